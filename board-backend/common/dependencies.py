"""
라우터 공통 의존성
- 기동 시 생성된 서비스 객체(app.state) 조회
- token 헤더 기반 회원 인증 (보호된 모든 API 가 공유하는 인증 단계)
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from common.auth.jwt_handler import AuthToken, TokenService
from common.auth.password import PasswordHasher
from common.logger import get_logger

# 표준 Authorization 헤더가 아닌 커스텀 "token" 헤더 사용
token_header = APIKeyHeader(name="token", auto_error=False)
logger = get_logger("dependencies")


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


async def get_current_member(
        request: Request,
        token: Optional[str] = Depends(token_header),
        token_service: TokenService = Depends(get_token_service),
) -> AuthToken:
    """
    token 헤더 검증 후 인증된 회원 정보 반환
    - 검증 실패 시 AuthException 이 그대로 전파되어 요청 전체가 거부됨
    - 성공 시 request.state.member 에도 보관 (로깅 미들웨어에서 사용)
    """
    logger.debug(f"토큰 인증 시작: {token[:10] if token else 'None'}...")
    member = token_service.verify(token)
    request.state.member = member
    logger.debug(f"회원 인증 성공: id={member.subject_id}")
    return member
