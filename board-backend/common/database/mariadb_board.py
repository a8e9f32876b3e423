"""
MariaDB 게시판 DB 세션 (board_db)
- 엔진/세션 팩토리는 설정 객체로부터 기동 시 한 번 생성되어 app.state 에 보관
- 요청마다 get_maria_board_db 로 세션 하나를 열고 닫음
"""
import re
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from fastapi import HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from common.config import Settings
from common.database.base_mariadb import MariaBase
from common.errors import InternalServerErrorException
from common.logger import get_logger

logger = get_logger("mariadb_board")

_OFFSET_PATTERN = re.compile(r"^[+-]\d{2}:\d{2}$")
_ZONE_NAME_PATTERN = re.compile(r"^[A-Za-z_]+(/[A-Za-z0-9_+-]+)*$")


def session_time_zone(value: Optional[str]) -> Optional[str]:
    """
    설정의 타임존 값을 MariaDB time_zone 세션 변수 값으로 변환
    - UTC, Z 는 +00:00, local(또는 빈 값)은 서버 기본값 사용(None)
    - 오프셋(+09:00)이나 이름(Asia/Seoul) 형식이 아니면 ValueError
    """
    if not value or value.lower() == "local":
        return None
    if value.upper() in ("UTC", "Z"):
        return "+00:00"
    if _OFFSET_PATTERN.match(value) or _ZONE_NAME_PATTERN.match(value):
        return value
    raise ValueError(f"지원하지 않는 타임존 형식입니다: {value}")


def create_board_engine(settings: Settings) -> AsyncEngine:
    """설정의 MARIADB_BOARD_URL 로 비동기 엔진 생성"""
    url = settings.mariadb_board_url
    if url.startswith("sqlite"):
        # 테스트/로컬 개발용 SQLite (커넥션 풀 옵션 미지원)
        engine = create_async_engine(url, echo=False)
    else:
        connect_args = {"connect_timeout": 10}  # 연결 타임아웃
        time_zone = session_time_zone(settings.db_timezone)
        if time_zone:
            # 연결마다 세션 타임존 지정 (wri_date/rep_date 기본값 기준)
            connect_args["init_command"] = f"SET time_zone = '{time_zone}'"
        engine = create_async_engine(
            url,
            echo=False,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # 연결 상태 확인
            pool_recycle=3600,  # 1시간마다 연결 재생성
            connect_args=connect_args,
        )
    logger.info(f"MariaDB Board 엔진 생성됨, dialect={engine.dialect.name}")
    logger.info(f"디버그 모드: {settings.debug}")
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """누락된 테이블 생성 (AUTO_CREATE_TABLES, 테스트용)"""
    # 메타데이터 등록을 위해 모델 모듈 import
    import services.member.models  # noqa: F401
    import services.board.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(MariaBase.metadata.create_all)
    logger.info("게시판 테이블 생성 확인 완료")


@asynccontextmanager
async def atomic(db: AsyncSession, action: str) -> AsyncIterator[AsyncSession]:
    """
    블록 안의 변경을 하나의 트랜잭션으로 커밋
    - 블록에서 예외 발생 시 롤백 후 다시 발생
    - DB 오류는 InternalServerErrorException 으로 변환
    """
    try:
        yield db
        await db.commit()
    except HTTPException:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"{action} 실패 (DB 오류): {str(e)}")
        raise InternalServerErrorException(f"{action} 중 DB 오류가 발생했습니다.")


async def get_maria_board_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """MariaDB 게시판용 세션 반환"""
    logger.debug("MariaDB 게시판 데이터베이스 세션 생성 중")
    async with request.app.state.session_factory() as session:
        yield session
    logger.debug("MariaDB 게시판 데이터베이스 세션 종료됨")
