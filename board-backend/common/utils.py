"""utils.py
- 요청 파라미터 검증/페이지 계산 공통 유틸"""
from typing import Any, Optional, Tuple

from common.errors import ValidationException

PAGE_SIZE = 10
# 게시글/댓글 번호 컬럼(INT) 최대값
MAX_ROW_NO = 2 ** 31 - 1
MAX_PAGE = MAX_ROW_NO // PAGE_SIZE


def require_fields(**fields: Any) -> None:
    """
    필수 입력값 존재 여부 확인
    - None 또는 빈 문자열이면 ValidationException (값 내용 검사는 하지 않음)
    """
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise ValidationException(f"필수 입력값이 누락되었습니다: {', '.join(missing)}")


def parse_page(raw: Optional[str]) -> int:
    """
    page 쿼리 파라미터를 1부터 시작하는 페이지 번호로 변환
    - 누락, 숫자가 아님, 1 미만이면 1페이지
    - MAX_PAGE 보다 크면 MAX_PAGE (빈 페이지)
    """
    try:
        page = int(raw) if raw is not None else 1
    except (TypeError, ValueError):
        return 1
    if page < 1:
        return 1
    return min(page, MAX_PAGE)


def page_window(page: int, size: int = PAGE_SIZE) -> Tuple[int, int]:
    """(offset, limit) 반환"""
    return (page - 1) * size, size
