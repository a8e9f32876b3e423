"""
댓글(board_reply) DB 접근 함수 (비동기 CRUD)
- 목록: 먼저 달린 댓글부터(no ASC), 게시글 목록과 반대 순서
- 수정/삭제 권한은 게시글 작성자가 아닌 댓글 작성자 기준
"""
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.auth.ownership import load_owned
from common.database.mariadb_board import atomic
from common.errors import NotFoundException
from common.logger import get_logger
from common.utils import require_fields

from services.board.models.board_model import BoardReply, BoardText
from services.member.models.member_model import Member

logger = get_logger("reply_crud")

RESOURCE_NAME = "댓글"


async def list_replies(db: AsyncSession, post_no: int) -> List[dict]:
    """게시글의 댓글 목록 (없는 게시글이면 빈 목록)"""
    stmt = (
        select(
            BoardReply.no.label("no"),
            BoardReply.owner_id.label("id"),
            Member.nickname.label("nickname"),
            BoardReply.body.label("reply"),
            BoardReply.replied_at.label("rep_date"),
        )
        .join(Member, Member.id == BoardReply.owner_id)
        .where(BoardReply.post_no == post_no)
        .order_by(BoardReply.no.asc())
    )
    rows = (await db.execute(stmt)).mappings().all()
    logger.debug(f"댓글 목록 조회: text_no={post_no}, count={len(rows)}")
    return [dict(row) for row in rows]


async def create_reply(db: AsyncSession, post_no: int, owner_id: str, reply: str) -> int:
    """
    댓글 작성 후 새 댓글 번호 반환

    Raises:
        ValidationException: 댓글 내용 누락
        NotFoundException: 게시글 없음
    """
    require_fields(reply=reply)

    reply_obj = BoardReply(post_no=post_no, owner_id=owner_id, body=reply)
    async with atomic(db, "댓글 작성"):
        post_exists = (await db.execute(select(BoardText.no).where(BoardText.no == post_no))).scalar_one_or_none()
        if post_exists is None:
            raise NotFoundException("게시글")
        db.add(reply_obj)
        await db.flush()
    logger.info(f"댓글 작성 성공: no={reply_obj.no}, text_no={post_no}, id={owner_id}")
    return reply_obj.no


async def update_reply(db: AsyncSession, post_no: int, reply_no: int, caller_id: str, reply: str) -> None:
    """
    댓글 수정 (댓글 작성자만 가능)
    - 경로의 게시글 번호와 댓글의 게시글 번호가 다르면 없는 댓글로 처리
    """
    require_fields(reply=reply)

    async with atomic(db, "댓글 수정"):
        reply_obj = await load_owned(
            db, BoardReply, reply_no, caller_id, RESOURCE_NAME, BoardReply.post_no == post_no
        )
        reply_obj.body = reply
    logger.info(f"댓글 수정 성공: no={reply_no}, text_no={post_no}, id={caller_id}")


async def delete_reply(db: AsyncSession, post_no: int, reply_no: int, caller_id: str) -> None:
    """댓글 삭제 (댓글 작성자만 가능)"""
    async with atomic(db, "댓글 삭제"):
        reply_obj = await load_owned(
            db, BoardReply, reply_no, caller_id, RESOURCE_NAME, BoardReply.post_no == post_no
        )
        await db.delete(reply_obj)
    logger.info(f"댓글 삭제 성공: no={reply_no}, text_no={post_no}, id={caller_id}")
