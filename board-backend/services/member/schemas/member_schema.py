"""
Member 관련 Pydantic 스키마 정의 모듈
- 요청 필드는 모두 선택값으로 받고, 누락/빈 값 검사는 서비스 계층에서 수행
"""
from typing import Optional

from pydantic import BaseModel


class MemberCreate(BaseModel):
    """
    회원가입 요청용 스키마
    - id: 로그인 아이디 (중복 불가)
    - password: 비밀번호
    - nickname: 닉네임
    """
    id: Optional[str] = None
    password: Optional[str] = None
    nickname: Optional[str] = None


class MemberLogin(BaseModel):
    """로그인 요청용 스키마"""
    id: Optional[str] = None
    password: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class LoginResponse(SuccessResponse):
    """로그인 성공 응답 (token 헤더에 그대로 실어 보내면 됨)"""
    token: str
