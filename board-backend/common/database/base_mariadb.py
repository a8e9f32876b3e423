"""
MariaDB용 Declarative Base 클래스
- 인덱스/제약조건 이름을 규칙에 따라 생성 (member, board_text, board_reply 공통)
"""
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class MariaBase(DeclarativeBase):
    """게시판 테이블용 Base"""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
