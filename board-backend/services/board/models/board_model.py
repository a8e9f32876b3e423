"""
게시글(board_text) / 댓글(board_reply) ORM 모델
- 작성자(id)는 생성 시점에 고정되며 작성자만 수정/삭제 가능
- 게시글 삭제 시 댓글 정리는 DB cascade 가 아닌 서비스 계층에서 수행
"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from common.database.base_mariadb import MariaBase


class BoardText(MariaBase):
    __tablename__ = "board_text"

    no = Column("no", Integer, primary_key=True, autoincrement=True)
    owner_id = Column("id", String(50), ForeignKey("member.id"), nullable=False, index=True)
    title = Column("title", String(200), nullable=False)
    body = Column("body", Text, nullable=False)
    written_at = Column("wri_date", DateTime, nullable=False, server_default=func.now())


class BoardReply(MariaBase):
    __tablename__ = "board_reply"

    no = Column("no", Integer, primary_key=True, autoincrement=True)
    post_no = Column("text_no", Integer, ForeignKey("board_text.no"), nullable=False, index=True)
    owner_id = Column("id", String(50), ForeignKey("member.id"), nullable=False, index=True)
    body = Column("reply", Text, nullable=False)
    replied_at = Column("rep_date", DateTime, nullable=False, server_default=func.now())
