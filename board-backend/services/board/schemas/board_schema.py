"""
게시글/댓글 Pydantic 스키마 정의 모듈
- 응답 키 이름(list, cntText, wri_date, rep_date)은 기존 클라이언트와의 호환을 위해 유지
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PostWrite(BaseModel):
    """게시글 작성/수정 요청 스키마"""
    title: Optional[str] = None
    body: Optional[str] = None


class ReplyWrite(BaseModel):
    """댓글 작성/수정 요청 스키마"""
    reply: Optional[str] = None


class PostListItem(BaseModel):
    """게시글 목록 항목"""
    no: int
    nickname: str
    title: str
    wri_date: datetime


class PostContents(PostListItem):
    """게시글 상세 (작성자 아이디 포함)"""
    id: str
    body: str


class ReplyItem(BaseModel):
    """댓글 목록 항목"""
    no: int
    id: str
    nickname: str
    reply: str
    rep_date: datetime


class PostListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    items: List[PostListItem] = Field(alias="list")
    count: int = Field(alias="cntText")  # 전체 게시글 수


class PostReadResponse(BaseModel):
    success: bool = True
    contents: PostContents


class ReplyListResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    items: List[ReplyItem] = Field(alias="list")


class CreatedResponse(BaseModel):
    """생성된 게시글/댓글 번호"""
    success: bool = True
    no: int
