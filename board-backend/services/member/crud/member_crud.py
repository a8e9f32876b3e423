"""
Member 관련 DB 접근 함수 (비동기 CRUD)
- 회원가입: 필수값 확인 → 비밀번호 해싱 → 중복 아이디 확인 → 저장 (자동 로그인 없음)
- 로그인: 존재하지 않는 아이디와 비밀번호 불일치를 같은 인증 실패로 처리
"""
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.auth.jwt_handler import TokenService
from common.auth.password import PasswordHasher
from common.errors import AuthException, ConflictException, InternalServerErrorException
from common.logger import get_logger
from common.utils import require_fields

from services.member.models.member_model import Member

logger = get_logger("member_crud")

LOGIN_FAILED_MESSAGE = "아이디 또는 비밀번호가 올바르지 않습니다."


async def get_member_by_id(db: AsyncSession, member_id: str):
    """
    주어진 아이디에 해당하는 회원(Member) 객체를 반환 (없으면 None)
    """
    result = await db.execute(select(Member).where(Member.id == member_id))
    return result.scalar_one_or_none()


async def register_member(
    db: AsyncSession,
    hasher: PasswordHasher,
    member_id: str,
    password: str,
    nickname: str,
) -> Member:
    """
    신규 회원 등록 (bcrypt 해싱 후 member row 생성)

    Raises:
        ValidationException: 아이디/비밀번호/닉네임 누락
        ConflictException: 이미 존재하는 아이디
    """
    require_fields(id=member_id, password=password, nickname=nickname)

    if await get_member_by_id(db, member_id) is not None:
        logger.warning(f"중복 아이디로 회원가입 시도: id={member_id}")
        raise ConflictException("이미 가입된 아이디입니다.")

    # bcrypt 는 CPU 작업이므로 이벤트 루프 밖에서 실행
    password_hash = await run_in_threadpool(hasher.hash, password)
    member = Member(id=member_id, password_hash=password_hash, nickname=nickname)
    db.add(member)
    try:
        await db.commit()
    except IntegrityError:
        # 동시 가입 요청으로 pre-check 를 통과한 경우
        await db.rollback()
        logger.warning(f"중복 아이디로 회원가입 시도 (unique 제약): id={member_id}")
        raise ConflictException("이미 가입된 아이디입니다.")
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"회원 저장 실패: id={member_id}, error={str(e)}")
        raise InternalServerErrorException("회원 정보 저장 중 오류가 발생했습니다.")

    logger.info(f"새 회원 등록 성공: id={member_id}")
    return member


async def login_member(
    db: AsyncSession,
    hasher: PasswordHasher,
    token_service: TokenService,
    member_id: str,
    password: str,
) -> str:
    """
    아이디/비밀번호 확인 후 액세스 토큰 발급

    Raises:
        ValidationException: 아이디/비밀번호 누락
        AuthException: 아이디 없음 또는 비밀번호 불일치 (구분하지 않음)
    """
    require_fields(id=member_id, password=password)

    member = await get_member_by_id(db, member_id)
    if member is None:
        # 응답 시간으로 아이디 존재 여부가 드러나지 않도록 동일한 비용의 검증 수행
        await run_in_threadpool(hasher.dummy_verify, password)
        logger.warning(f"로그인 실패: 존재하지 않는 아이디, id={member_id}")
        raise AuthException(LOGIN_FAILED_MESSAGE)

    if not await run_in_threadpool(hasher.verify, password, member.password_hash):
        logger.warning(f"로그인 실패: 비밀번호 불일치, id={member_id}")
        raise AuthException(LOGIN_FAILED_MESSAGE)

    token = token_service.issue(member.id, member.nickname)
    logger.info(f"회원 로그인 성공: id={member_id}")
    return token
