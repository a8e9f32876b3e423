"""
member 테이블 ORM 모델
- password 컬럼에는 bcrypt 해시만 저장
"""
from sqlalchemy import Column, String

from common.database.base_mariadb import MariaBase


class Member(MariaBase):
    __tablename__ = "member"

    id = Column("id", String(50), primary_key=True)
    password_hash = Column("password", String(255), nullable=False)
    nickname = Column("nickname", String(50), nullable=False)
