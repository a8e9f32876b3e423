"""
비밀번호 해싱/검증 (bcrypt)
- 호출할 때마다 새 salt 를 사용하므로 같은 비밀번호라도 해시값이 매번 다름
- 저장된 해시가 손상된 경우 예외 대신 검증 실패(False)로 처리
"""
from passlib.context import CryptContext

from common.logger import get_logger

logger = get_logger("password")

DEFAULT_ROUNDS = 11


class PasswordHasher:
    """bcrypt 기반 단방향 해시 + 검증"""

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        if rounds < DEFAULT_ROUNDS:
            raise ValueError(f"bcrypt rounds 는 {DEFAULT_ROUNDS} 이상이어야 합니다: {rounds}")
        self.rounds = rounds
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        # 존재하지 않는 계정 로그인 시 비교할 해시 (첫 요청부터 동일한 비용)
        self._dummy_hash = self.hash("dummy-password-for-timing")

    def hash(self, plaintext: str) -> str:
        """평문 비밀번호를 salt 가 포함된 bcrypt 해시 문자열로 변환"""
        return self._context.hash(plaintext)

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        """
        평문과 저장된 해시가 일치하는지 검증 (일치 시 True, 아니면 False)
        - 해시 형식이 잘못된 경우에도 False 반환
        """
        try:
            return self._context.verify(plaintext, stored_hash)
        except (ValueError, TypeError) as e:
            logger.warning(f"저장된 비밀번호 해시 형식 오류로 검증 실패: {type(e).__name__}")
            return False

    def dummy_verify(self, plaintext: str) -> bool:
        """
        존재하지 않는 계정 로그인 시 호출하여 응답 시간을 실제 검증과 맞춤
        - 항상 False 반환
        """
        self._context.verify(plaintext, self._dummy_hash)
        return False
