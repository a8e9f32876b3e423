"""
게시글(board_text) DB 접근 함수 (비동기 CRUD)
- 목록: 최신 글 먼저(no DESC), 페이지당 10개
- 수정/삭제: 작성자 확인(load_owned) 후 같은 트랜잭션에서 반영
- 삭제 시 해당 글의 댓글을 먼저 지운 뒤 글을 삭제
"""
from typing import List, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from common.auth.ownership import load_owned
from common.database.mariadb_board import atomic
from common.errors import NotFoundException
from common.logger import get_logger
from common.utils import page_window, require_fields

from services.board.models.board_model import BoardReply, BoardText
from services.member.models.member_model import Member

logger = get_logger("board_crud")

RESOURCE_NAME = "게시글"


async def list_posts(db: AsyncSession, page: int = 1) -> Tuple[List[dict], int]:
    """
    게시글 목록 한 페이지와 전체 게시글 수 반환
    - 최신 글 먼저 (번호 내림차순)
    """
    offset, limit = page_window(page)
    stmt = (
        select(
            BoardText.no.label("no"),
            Member.nickname.label("nickname"),
            BoardText.title.label("title"),
            BoardText.written_at.label("wri_date"),
        )
        .join(Member, Member.id == BoardText.owner_id)
        .order_by(BoardText.no.desc())
        .offset(offset)
        .limit(limit)
    )
    rows = (await db.execute(stmt)).mappings().all()
    total = (await db.execute(select(func.count(BoardText.no)))).scalar_one()
    logger.debug(f"게시글 목록 조회: page={page}, count={len(rows)}, total={total}")
    return [dict(row) for row in rows], total


async def read_post(db: AsyncSession, no: int) -> dict:
    """
    게시글 상세 조회

    Raises:
        NotFoundException: 게시글 없음
    """
    stmt = (
        select(
            BoardText.no.label("no"),
            BoardText.owner_id.label("id"),
            Member.nickname.label("nickname"),
            BoardText.title.label("title"),
            BoardText.body.label("body"),
            BoardText.written_at.label("wri_date"),
        )
        .join(Member, Member.id == BoardText.owner_id)
        .where(BoardText.no == no)
    )
    row = (await db.execute(stmt)).mappings().one_or_none()
    if row is None:
        raise NotFoundException(RESOURCE_NAME)
    return dict(row)


async def create_post(db: AsyncSession, owner_id: str, title: str, body: str) -> int:
    """게시글 작성 후 새 글 번호 반환 (작성자 = 토큰의 회원 아이디)"""
    require_fields(title=title, body=body)

    post = BoardText(owner_id=owner_id, title=title, body=body)
    async with atomic(db, "게시글 작성"):
        db.add(post)
        await db.flush()
    logger.info(f"게시글 작성 성공: no={post.no}, id={owner_id}")
    return post.no


async def update_post(db: AsyncSession, no: int, caller_id: str, title: str, body: str) -> None:
    """
    게시글 수정 (작성자만 가능)

    Raises:
        ValidationException: 제목/본문 누락
        NotFoundException: 게시글 없음
        ForbiddenException: 작성자 아님
    """
    require_fields(title=title, body=body)

    async with atomic(db, "게시글 수정"):
        post = await load_owned(db, BoardText, no, caller_id, RESOURCE_NAME)
        post.title = title
        post.body = body
    logger.info(f"게시글 수정 성공: no={no}, id={caller_id}")


async def delete_post(db: AsyncSession, no: int, caller_id: str) -> None:
    """
    게시글 삭제 (작성자만 가능, 댓글 포함)

    Raises:
        NotFoundException: 게시글 없음
        ForbiddenException: 작성자 아님
    """
    async with atomic(db, "게시글 삭제"):
        post = await load_owned(db, BoardText, no, caller_id, RESOURCE_NAME)
        result = await db.execute(delete(BoardReply).where(BoardReply.post_no == no))
        await db.delete(post)
    logger.info(f"게시글 삭제 성공: no={no}, id={caller_id}, 삭제된 댓글 수={result.rowcount}")
