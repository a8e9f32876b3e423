"""
작성자 권한 검증 (게시글/댓글 수정·삭제 공통)
- 레코드 존재 확인 → 작성자 일치 확인 순서로 진행
- 조회는 행 잠금(SELECT ... FOR UPDATE)으로 수행하여 확인과 쓰기 사이 경쟁 상태 방지
"""
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from common.errors import ForbiddenException, NotFoundException
from common.logger import get_logger

logger = get_logger("ownership")


def authorize(resource_owner_id: Optional[str], caller_id: Optional[str]) -> bool:
    """레코드 작성자와 요청자가 정확히 같은 아이디일 때만 True"""
    if resource_owner_id is None or caller_id is None:
        return False
    return resource_owner_id == caller_id


def ensure_owner(resource_owner_id: Optional[str], caller_id: Optional[str], resource: str = "데이터") -> None:
    """작성자가 아니면 ForbiddenException"""
    if not authorize(resource_owner_id, caller_id):
        logger.warning(f"{resource} 접근 권한 없음: 요청 id={caller_id}, 작성자 id={resource_owner_id}")
        raise ForbiddenException(f"{resource} 수정/삭제")
    logger.debug(f"{resource} 권한 확인 성공: id={caller_id}")


async def load_owned(
    db: AsyncSession,
    model: Any,
    no: int,
    caller_id: str,
    resource: str = "데이터",
    *criteria,
):
    """
    수정/삭제 대상 레코드를 잠금 조회하고 작성자 권한을 확인한 뒤 반환

    Args:
        db: 현재 트랜잭션의 세션 (호출자가 commit/rollback)
        model: no, owner_id 컬럼을 가진 ORM 모델
        no: 레코드 번호
        caller_id: 인증된 요청자 아이디
        resource: 로그/에러 메시지용 리소스 이름
        *criteria: 추가 조회 조건 (예: 댓글의 게시글 번호)

    Raises:
        NotFoundException: 레코드 없음
        ForbiddenException: 작성자 불일치
    """
    stmt = select(model).where(model.no == no, *criteria).with_for_update()
    result = await db.execute(stmt)
    row = result.scalar_one_or_none()
    if row is None:
        raise NotFoundException(resource)
    ensure_owner(row.owner_id, caller_id, resource)
    return row
