"""
댓글 API 엔드포인트 (/board/{text_no}/reply)
- 모든 API 는 token 헤더 인증 필요
- 수정/삭제는 댓글 작성자 본인만 가능
"""
from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from common.auth.jwt_handler import AuthToken
from common.database.mariadb_board import get_maria_board_db
from common.dependencies import get_current_member
from common.logger import get_logger
from common.utils import MAX_ROW_NO

from services.board.crud.reply_crud import create_reply, delete_reply, list_replies, update_reply
from services.board.schemas.board_schema import CreatedResponse, ReplyListResponse, ReplyWrite
from services.member.schemas.member_schema import SuccessResponse

router = APIRouter(prefix="/board/{text_no}/reply", tags=["Reply"])
logger = get_logger("reply_router")


@router.get("", response_model=ReplyListResponse)
async def get_reply_list(
    text_no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """댓글 목록 조회 (먼저 단 댓글부터)"""
    logger.debug(f"댓글 목록 조회 요청: id={member.subject_id}, text_no={text_no}")
    items = await list_replies(db, text_no)
    return ReplyListResponse(items=items)


@router.post("", response_model=CreatedResponse)
async def write_reply(
    reply: ReplyWrite,
    text_no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """댓글 작성"""
    logger.info(f"댓글 작성 요청: id={member.subject_id}, text_no={text_no}")
    no = await create_reply(db, text_no, member.subject_id, reply.reply)
    return CreatedResponse(no=no)


@router.put("/{reply_no}", response_model=SuccessResponse)
async def modify_reply(
    reply: ReplyWrite,
    text_no: int = Path(..., ge=1, le=MAX_ROW_NO),
    reply_no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """댓글 수정 (댓글 작성자만)"""
    logger.info(f"댓글 수정 요청: id={member.subject_id}, text_no={text_no}, no={reply_no}")
    await update_reply(db, text_no, reply_no, member.subject_id, reply.reply)
    return SuccessResponse()


@router.delete("/{reply_no}", response_model=SuccessResponse)
async def remove_reply(
    text_no: int = Path(..., ge=1, le=MAX_ROW_NO),
    reply_no: int = Path(..., ge=1, le=MAX_ROW_NO),
    member: AuthToken = Depends(get_current_member),
    db: AsyncSession = Depends(get_maria_board_db),
):
    """댓글 삭제 (댓글 작성자만)"""
    logger.info(f"댓글 삭제 요청: id={member.subject_id}, text_no={text_no}, no={reply_no}")
    await delete_reply(db, text_no, reply_no, member.subject_id)
    return SuccessResponse()
