"""
gateway/main.py
---------------
게시판 API 서비스 진입점.
회원/게시글/댓글 router 를 하나의 FastAPI 앱으로 묶어 제공한다.
- 설정 객체는 기동 시 한 번 로드하여 create_app(settings) 로 전달
- CORS, 요청 로그/타임아웃 미들웨어, 공통 예외처리도 이곳에서 적용
- 모든 실패 응답은 {"success": false} 로 통일

실행:
    board-backend                                   # console script (uvicorn, 기본 0.0.0.0:3031)
    uvicorn gateway.main:create_app --factory
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.auth.jwt_handler import TokenService
from common.auth.password import PasswordHasher
from common.config import Settings, get_settings
from common.database.mariadb_board import create_board_engine, create_session_factory, init_models
from common.errors import build_failure_response
from common.http_log_middleware import HttpLogMiddleware, RequestTimeoutMiddleware
from common.logger import apply_logging_settings, get_logger
from services.member.routers.member_router import router as member_router
from services.board.routers.board_router import router as board_router
from services.board.routers.reply_router import router as reply_router

logger = get_logger("gateway", sqlalchemy_logging={'enable': False})

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3031


def register_exception_handlers(app: FastAPI, expose_error_status: bool) -> None:
    """
    요청 경계에서 모든 예외를 실패 응답으로 변환
    - 내부적으로는 에러 종류를 구분해 로깅(request.state.error)하고, 외부로는 {"success": false}
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        request.state.error = type(exc).__name__
        logger.info(f"요청 실패: {request.method} {request.url.path} -> {type(exc).__name__}({exc.status_code}): {exc.detail}")
        return build_failure_response(exc.status_code, expose_error_status)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        request.state.error = "RequestValidationError"
        logger.info(f"요청 형식 오류: {request.method} {request.url.path}: {exc.errors()}")
        return build_failure_response(422, expose_error_status)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request.state.error = type(exc).__name__
        logger.exception(f"처리되지 않은 예외: {request.method} {request.url.path}: {type(exc).__name__}")
        return build_failure_response(500, expose_error_status)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성

    Args:
        settings: 불변 설정 객체 (None 이면 get_settings() 로 로드, 실패 시 기동 중단)
    """
    logger.info("게시판 API 초기화 시작...")
    if settings is None:
        settings = get_settings()
    apply_logging_settings(settings.log_level, settings.log_json_format)
    logger.info(f"FastAPI 애플리케이션 생성: 제목={settings.app_name}, 디버그={settings.debug}")

    engine = create_board_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_tables:
            await init_models(engine)
        yield
        await engine.dispose()
        logger.info("MariaDB Board 엔진 종료됨")

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # 요청 간 공유되는 객체는 설정으로부터 만든 불변 서비스뿐
    app.state.settings = settings
    app.state.token_service = TokenService(settings.jwt_secret, settings.jwt_algorithm)
    app.state.password_hasher = PasswordHasher(settings.password_hash_rounds)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    app.add_middleware(HttpLogMiddleware)

    # 타임아웃 실패 응답에도 CORS 헤더가 붙도록 CORS 안쪽에 배치
    app.add_middleware(
        RequestTimeoutMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
        expose_error_status=settings.expose_error_status,
    )

    logger.info("CORS 미들웨어 설정 중...")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],  # 커스텀 token 헤더 포함
    )

    register_exception_handlers(app, settings.expose_error_status)

    logger.info("서비스 라우터 등록 중...")
    app.include_router(member_router)
    app.include_router(board_router)
    app.include_router(reply_router)
    logger.info("모든 서비스 라우터 등록 완료")

    @app.get("/healthz")
    async def healthz():
        """
        서비스 헬스체크 엔드포인트.
        - 컨테이너/오케스트레이션의 상태 점검용으로 사용
        """
        return {"status": "ok"}

    return app


def run() -> None:
    """console script 진입점: 설정 로드 후 uvicorn 으로 서비스 기동"""
    try:
        app = create_app()
    except Exception as e:
        logger.error(f"애플리케이션 기동 실패: {e}")
        raise SystemExit(1)

    # 요청 로그는 HttpLogMiddleware 가 남기므로 uvicorn 액세스 로그 비활성화
    logging.getLogger("uvicorn.access").disabled = True

    uvicorn.run(
        app,
        host=os.getenv("HOST", DEFAULT_HOST),
        port=int(os.getenv("PORT", DEFAULT_PORT)),
    )


if __name__ == "__main__":
    run()
