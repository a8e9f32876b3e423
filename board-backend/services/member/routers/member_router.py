"""
Member API 엔드포인트 (회원가입, 로그인) - 비동기 패턴
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from common.auth.jwt_handler import TokenService
from common.auth.password import PasswordHasher
from common.database.mariadb_board import get_maria_board_db
from common.dependencies import get_password_hasher, get_token_service
from common.errors import BoardException
from common.logger import get_logger

from services.member.crud.member_crud import login_member, register_member
from services.member.schemas.member_schema import LoginResponse, MemberCreate, MemberLogin, SuccessResponse

router = APIRouter(prefix="/member", tags=["Member"])
logger = get_logger("member_router")


@router.post("", response_model=SuccessResponse)
async def signup(
    member: MemberCreate,
    db: AsyncSession = Depends(get_maria_board_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """
    회원가입 API
    - id, password, nickname 모두 필수
    - 아이디 중복 시 실패, 가입 후 자동 로그인하지 않음
    """
    try:
        await register_member(db, hasher, member.id, member.password, member.nickname)
        return SuccessResponse()
    except BoardException:
        raise
    except Exception as e:
        logger.error(f"회원가입 중 예상치 못한 오류, id={member.id}: {str(e)}")
        raise


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: MemberLogin,
    db: AsyncSession = Depends(get_maria_board_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    token_service: TokenService = Depends(get_token_service),
):
    """
    로그인 API
    - 액세스 토큰(12시간) 발급, 이후 요청의 token 헤더에 사용
    """
    logger.info(f"로그인 요청 시작: id={credentials.id}")
    try:
        token = await login_member(db, hasher, token_service, credentials.id, credentials.password)
        return LoginResponse(token=token)
    except BoardException:
        # 이미 로깅된 경우 재로깅하지 않음
        raise
    except Exception as e:
        logger.error(f"로그인 중 예상치 못한 오류, id={credentials.id}: {str(e)}")
        raise
