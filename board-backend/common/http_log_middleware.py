# common/http_log_middleware.py
"""
FastAPI HTTP 요청 로그 / 요청 타임아웃 미들웨어 (비동기)
- 요청마다 HTTP_METHOD, API_URL(라우트 패턴 우선), RESPONSE_CODE, 처리 시간(ms), CLIENT_IP, 회원 id 를 로깅합니다.
- RequestTimeoutMiddleware: timeout_seconds 안에 끝나지 않는 요청을 취소하고 실패 응답을 반환합니다.
- 적용: app.add_middleware(HttpLogMiddleware), app.add_middleware(RequestTimeoutMiddleware, timeout_seconds=...)

주의:
- 회원 id 는 인증 의존성이 request.state.member 를 세팅한 경우에만 기록합니다(없으면 None).
- 프록시 환경이라면 X-Forwarded-For / X-Real-IP 를 우선 사용합니다.
- token 헤더 값은 로그에 남기지 않습니다.
"""

from __future__ import annotations

import asyncio
import time
from typing import Optional, Sequence

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from common.errors import RequestTimeoutException, build_failure_response
from common.logger import get_logger, log_with_context

logger = get_logger("http_log_middleware")

# 로그 제외 경로
DEFAULT_EXCLUDE_PATHS: Sequence[str] = (
    "/healthz",
    "/favicon.ico",
    "/docs",
    "/redoc",
    "/openapi.json",
)


def _should_skip_log(path: str, exclude_paths: Sequence[str]) -> bool:
    """요청 경로가 로그 제외 대상인지 판단 ("/" 로 끝나면 프리픽스 매칭)"""
    for p in exclude_paths:
        if p.endswith("/"):
            if path.startswith(p):
                return True
        elif path == p:
            return True
    return False


def _get_client_ip(request: Request) -> Optional[str]:
    """클라이언트 IP를 헤더/소켓 정보에서 추출

    우선순위:
        1) X-Forwarded-For (첫 번째)
        2) X-Real-IP
        3) request.client.host
    """
    xff = request.headers.get("x-forwarded-for")
    if xff:
        # "client, proxy1, proxy2" → 첫 값
        return xff.split(",")[0].strip()
    xrip = request.headers.get("x-real-ip")
    if xrip:
        return xrip.strip()
    return request.client.host if request.client else None


def _get_route_pattern(request: Request) -> str:
    """라우트 패턴(예: "/board/{no}") 또는 원본 경로 반환 (라우팅 이후에만 패턴 사용 가능)"""
    route = request.scope.get("route")
    if route is not None:
        path_format = getattr(route, "path_format", None) or getattr(route, "path", None)
        if path_format:
            return path_format
    return request.url.path


def _extract_member_id(request: Request) -> Optional[str]:
    member = getattr(request.state, "member", None)
    if member is None:
        return None
    return getattr(member, "subject_id", None)


class HttpLogMiddleware(BaseHTTPMiddleware):
    """HTTP 요청 로그 미들웨어

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> app.add_middleware(HttpLogMiddleware, exclude_paths=("/healthz",))
    """

    def __init__(self, app, *, exclude_paths: Sequence[str] = DEFAULT_EXCLUDE_PATHS):
        super().__init__(app)
        self.exclude_paths = exclude_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """요청 처리 시간을 측정하고 결과를 로깅"""
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            if not _should_skip_log(request.url.path, self.exclude_paths):
                server_ms = int((time.perf_counter() - started) * 1000)
                api_url = _get_route_pattern(request)
                log_with_context(
                    logger,
                    "INFO",
                    f"{request.method} {api_url} -> {status_code} ({server_ms}ms)",
                    http_method=request.method,
                    api_url=api_url,
                    response_code=status_code,
                    server_ms=server_ms,
                    client_ip=_get_client_ip(request),
                    member_id=_extract_member_id(request),
                    error=getattr(request.state, "error", None),
                )


class RequestTimeoutMiddleware:
    """요청 단위 타임아웃 (순수 ASGI 미들웨어)

    - 제한 시간 안에 응답이 시작되지 않으면 처리 중인 요청을 취소하고 실패 응답 반환
    - 이미 응답을 보내기 시작한 뒤라면 취소만 하고 예외를 그대로 전파
    """

    def __init__(self, app: ASGIApp, *, timeout_seconds: Optional[float] = None, expose_error_status: bool = False):
        self.app = app
        self.timeout_seconds = timeout_seconds
        self.expose_error_status = expose_error_status

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.timeout_seconds:
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            if response_started:
                raise
            exc = RequestTimeoutException(
                f"요청 처리 시간이 {self.timeout_seconds}초를 초과했습니다: {scope.get('method')} {scope.get('path')}"
            )
            response = build_failure_response(exc.status_code, self.expose_error_status)
            await response(scope, receive, send)
