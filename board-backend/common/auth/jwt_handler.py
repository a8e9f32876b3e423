"""
JWT 토큰 발급 및 검증
- 서버 세션 없이 서명된 토큰만으로 인증 (stateless)
- 토큰 수명은 발급 시점 기준 12시간 고정, 갱신 불가
- 검증은 (토큰, 비밀키, 현재 시각) 만으로 결정되는 순수 함수
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ConfigDict

from common.errors import AuthException
from common.logger import get_logger

logger = get_logger("jwt_handler")

ACCESS_TOKEN_LIFETIME = timedelta(hours=12)


class AuthToken(BaseModel):
    """
    검증된 토큰의 내용
    - subject_id: 토큰이 보증하는 회원 아이디
    - nickname: 발급 시점의 닉네임
    """
    model_config = ConfigDict(frozen=True)

    subject_id: str
    nickname: str
    issued_at: datetime
    expires_at: datetime


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """서버 비밀키로 서명하는 액세스 토큰 발급/검증기"""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("JWT 비밀키가 비어 있습니다")
        self._secret = secret
        self._algorithm = algorithm

    def issue(self, subject_id: str, nickname: str, now: Optional[datetime] = None) -> str:
        """회원 아이디와 닉네임을 담은 액세스 토큰 생성 (만료 = 발급 + 12시간)"""
        issued_at = int((now or _now_utc()).timestamp())
        expires_at = issued_at + int(ACCESS_TOKEN_LIFETIME.total_seconds())
        claims = {
            "sub": subject_id,
            "nickname": nickname,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        logger.info(f"사용자 {subject_id}에 대한 액세스 토큰이 생성되었습니다")
        return token

    def verify(self, token: str, now: Optional[datetime] = None) -> AuthToken:
        """
        토큰 검증 후 내용 반환

        Raises:
            AuthException: 서명 불일치, 형식 오류, 필수 클레임 누락, 만료(exp 시각 포함) 시
        """
        if not token or not isinstance(token, str):
            logger.warning("토큰이 비어있거나 유효하지 않은 형식입니다")
            raise AuthException("인증 토큰이 필요합니다.")

        # JWT 는 header.payload.signature 3개 부분으로 구성
        if len(token.split('.')) != 3:
            logger.warning("JWT 토큰 형식이 올바르지 않습니다")
            raise AuthException("유효하지 않은 토큰입니다.")

        try:
            # 만료는 주입 가능한 현재 시각으로 직접 검사
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.warning(f"JWT 검증 실패: {type(e).__name__}: {str(e)}")
            raise AuthException("유효하지 않은 토큰입니다.")

        subject_id = payload.get("sub")
        nickname = payload.get("nickname")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(subject_id, str) or not subject_id or not isinstance(nickname, str) \
                or not isinstance(issued_at, int) or not isinstance(expires_at, int):
            logger.warning("토큰 페이로드에 필수 정보가 누락되었습니다")
            raise AuthException("토큰에 사용자 정보가 없습니다.")

        now_ts = (now or _now_utc()).timestamp()
        if now_ts >= expires_at:
            logger.warning(f"토큰이 만료되었습니다: sub={subject_id}, exp={expires_at}")
            raise AuthException("인증 토큰이 만료되었습니다. 다시 로그인해주세요.")

        logger.debug(f"사용자 {subject_id}의 JWT 토큰이 성공적으로 검증되었습니다")
        return AuthToken(
            subject_id=subject_id,
            nickname=nickname,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
        )
