"""
게시글 API 엔드포인트
- 모든 API 는 token 헤더 인증 필요 (조회 포함)
- 수정/삭제는 작성자 본인만 가능
"""
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from common.auth.jwt_handler import AuthToken
from common.database.mariadb_board import get_maria_board_db
from common.dependencies import get_current_member
from common.logger import get_logger
from common.utils import MAX_ROW_NO, parse_page

from services.board.crud.board_crud import create_post, delete_post, list_posts, read_post, update_post
from services.board.schemas.board_schema import (
    CreatedResponse,
    PostListResponse,
    PostReadResponse,
    PostWrite,
)
from services.member.schemas.member_schema import SuccessResponse

router = APIRouter(prefix="/board", tags=["Board"])
logger = get_logger("board_router")


@router.get("", response_model=PostListResponse)
async def get_post_list(
    page: Optional[str] = Query(None, description="페이지 번호 (1부터, 페이지당 10개)"),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """게시글 목록 조회 (최신 글 먼저)"""
    page_no = parse_page(page)
    logger.debug(f"게시글 목록 조회 요청: id={member.subject_id}, page={page_no}")
    items, total = await list_posts(db, page_no)
    return PostListResponse(items=items, count=total)


@router.get("/{no}", response_model=PostReadResponse)
async def get_post(
    no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """게시글 상세 조회"""
    logger.debug(f"게시글 조회 요청: id={member.subject_id}, no={no}")
    contents = await read_post(db, no)
    return PostReadResponse(contents=contents)


@router.post("", response_model=CreatedResponse)
async def write_post(
    post: PostWrite,
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """게시글 작성 (작성자 = 로그인한 회원)"""
    logger.info(f"게시글 작성 요청: id={member.subject_id}")
    no = await create_post(db, member.subject_id, post.title, post.body)
    return CreatedResponse(no=no)


@router.put("/{no}", response_model=SuccessResponse)
async def modify_post(
    post: PostWrite,
    no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """게시글 수정 (작성자만)"""
    logger.info(f"게시글 수정 요청: id={member.subject_id}, no={no}")
    await update_post(db, no, member.subject_id, post.title, post.body)
    return SuccessResponse()


@router.delete("/{no}", response_model=SuccessResponse)
async def remove_post(
    no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """게시글 삭제 (작성자만, 댓글도 함께 삭제)"""
    logger.info(f"게시글 삭제 요청: id={member.subject_id}, no={no}")
    await delete_post(db, no, member.subject_id)
    return SuccessResponse()
