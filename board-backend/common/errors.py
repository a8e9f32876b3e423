"""
공통 에러 타입 정의 모듈
- 서비스 계층에서 발생시키는 에러 분류(검증/인증/권한/없음/충돌)
- 모든 에러는 HTTPException 을 상속하며, 응답 변환은 gateway 의 예외 핸들러가 담당
  (외부로는 기본적으로 {"success": false} 하나로 통일)
"""

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse
from common.logger import get_logger

logger = get_logger("errors")


class BoardException(HTTPException):
    """게시판 서비스 공통 예외 (에러 종류별 상태 코드 보유)"""
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "요청을 처리할 수 없습니다."

    def __init__(self, message: str = None):
        message = message or self.default_message
        log = logger.error if self.status_code_default >= 500 else logger.warning
        log(f"{type(self).__name__} 발생: {message}")
        super().__init__(status_code=self.status_code_default, detail=message)


class ValidationException(BoardException):
    """400 Bad Request - 필수 파라미터 누락/빈 값"""
    status_code_default = status.HTTP_400_BAD_REQUEST
    default_message = "필수 입력값이 누락되었습니다."


class AuthException(BoardException):
    """401 Unauthorized - 로그인 실패, 토큰 없음/변조/만료"""
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_message = "인증이 필요합니다. 로그인 후 다시 시도해주세요."


class ForbiddenException(BoardException):
    """403 Forbidden - 인증은 되었으나 작성자가 아님"""
    status_code_default = status.HTTP_403_FORBIDDEN

    def __init__(self, action: str = "해당 작업"):
        super().__init__(f"{action}을(를) 수행할 권한이 없습니다.")


class NotFoundException(BoardException):
    """404 Not Found - 데이터 없음"""
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, name: str = "데이터"):
        super().__init__(f"{name}을(를) 찾을 수 없습니다.")


class ConflictException(BoardException):
    """409 Conflict - 중복된 아이디 등"""
    status_code_default = status.HTTP_409_CONFLICT
    default_message = "이미 존재하는 항목입니다."


class InternalServerErrorException(BoardException):
    """500 Internal Server Error - DB 오류 등 서버 오류"""
    default_message = "서버 내부 오류가 발생했습니다."


class RequestTimeoutException(BoardException):
    """504 Gateway Timeout - 요청 처리 시간 초과"""
    status_code_default = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = "요청 처리 시간이 초과되었습니다."


def build_failure_response(status_code: int = status.HTTP_400_BAD_REQUEST, expose_status: bool = False) -> JSONResponse:
    """
    실패 응답 생성
    - 본문은 원인과 관계없이 항상 {"success": false}
    - expose_status=False(기본) 이면 HTTP 200, True 이면 에러별 상태 코드 사용
    """
    return JSONResponse(
        status_code=status_code if expose_status else status.HTTP_200_OK,
        content={"success": False},
    )
