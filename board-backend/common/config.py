# common/config.py
"""
애플리케이션 설정 관리 모듈

게시판 백엔드의 모든 설정값을 하나의 불변(frozen) 설정 객체로 관리합니다.
설정은 프로세스 시작 시 한 번만 로드되고, create_app(settings)로 명시적으로 전달됩니다.

설정 로드 우선순위:
- 생성자 인자 (테스트용)
- 환경 변수
- .env 파일
- JSON 설정 파일 (기본 ./config.json, BOARD_CONFIG_FILE 로 경로 지정 가능)
  평탄한 키(jwt_secret, mariadb_board_url ...) 또는 기존 서비스의 중첩 형식
  {"jwt": {"secret"}, "database": {"host", "user", "password", "database", "port", "timezone"},
   "cors": {"origin"}} 을 모두 읽으며, 같은 파일 안에서는 평탄한 키가 우선

필수값(JWT_SECRET, MARIADB_BOARD_URL)이 없거나 형식이 잘못되면 예외가 발생하며,
애플리케이션은 기동하지 않습니다.

사용법:
    from common.config import get_settings

    settings = get_settings()
"""

import json
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from sqlalchemy.engine import URL

from common.logger import get_logger

logger = get_logger("config", sqlalchemy_logging={'enable': False})

CONFIG_FILE_ENV_KEY = "BOARD_CONFIG_FILE"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_MARIADB_PORT = 3306


def flatten_nested_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    중첩 형식의 config.json 을 Settings 필드 이름으로 변환
    - database 에 url 이 있으면 그대로, 없으면 host/user/password/database/port 로 URL 조립
    - cors.origin 은 문자열, 목록, true("*") 모두 허용
    """
    values: Dict[str, Any] = {}

    jwt_conf = data.get("jwt")
    if isinstance(jwt_conf, dict):
        if "secret" in jwt_conf:
            values["jwt_secret"] = jwt_conf["secret"]
        if "algorithm" in jwt_conf:
            values["jwt_algorithm"] = jwt_conf["algorithm"]

    db_conf = data.get("database")
    if isinstance(db_conf, dict):
        if db_conf.get("url"):
            values["mariadb_board_url"] = db_conf["url"]
        elif db_conf.get("host") and db_conf.get("database"):
            url = URL.create(
                "mysql+aiomysql",
                username=db_conf.get("user"),
                password=db_conf.get("password"),
                host=db_conf["host"],
                port=int(db_conf.get("port") or DEFAULT_MARIADB_PORT),
                database=db_conf["database"],
            )
            values["mariadb_board_url"] = url.render_as_string(hide_password=False)
        if db_conf.get("timezone"):
            values["db_timezone"] = db_conf["timezone"]

    cors_conf = data.get("cors")
    if isinstance(cors_conf, dict) and "origin" in cors_conf:
        origin = cors_conf["origin"]
        if origin is True:
            values["cors_origins"] = ["*"]
        elif isinstance(origin, str):
            values["cors_origins"] = [origin]
        elif isinstance(origin, list):
            values["cors_origins"] = origin

    return values


class BoardJsonConfigSource(PydanticBaseSettingsSource):
    """
    JSON 설정 파일 소스
    - 파일이 없으면 빈 설정
    - 중첩 형식과 평탄한 키를 모두 읽어 Settings 필드에 해당하는 값만 반환
    """

    def __init__(self, settings_cls, json_file: Optional[str]):
        super().__init__(settings_cls)
        self.json_file = json_file

    def get_field_value(self, field, field_name):
        # 파일 전체를 __call__ 에서 한 번에 변환
        return None, field_name, False

    def _load_file(self) -> Dict[str, Any]:
        if not self.json_file or not os.path.isfile(self.json_file):
            return {}
        with open(self.json_file, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"JSON 설정 파일의 최상위 값은 객체여야 합니다: {self.json_file}")
        logger.info(f"JSON 설정 파일 로드: {self.json_file}")
        return data

    def __call__(self) -> Dict[str, Any]:
        data = self._load_file()
        field_names = set(self.settings_cls.model_fields)
        values = flatten_nested_config(data)
        values.update({key: value for key, value in data.items() if key in field_names})
        return {key: value for key, value in values.items() if key in field_names}


class Settings(BaseSettings):
    """
    애플리케이션 설정 클래스

    Pydantic BaseSettings를 상속받아 환경 변수/설정 파일에서 값을 로드합니다.
    frozen=True 이므로 생성 이후에는 값을 변경할 수 없습니다.
    """

    # JWT 인증 관련 설정
    jwt_secret: str = Field(..., min_length=1, description="JWT 토큰 서명에 사용되는 비밀키")
    jwt_algorithm: str = Field("HS256", description="JWT 토큰 서명 알고리즘")

    # 비밀번호 해싱 설정 (bcrypt cost factor, 최소 11)
    password_hash_rounds: int = Field(11, ge=11, le=31, description="bcrypt 해싱 라운드 수")

    # MariaDB 데이터베이스 연결 설정
    mariadb_board_url: str = Field(..., min_length=1, description="게시판용 MariaDB 연결 URL (mysql+aiomysql://...)")
    auto_create_tables: bool = Field(False, description="기동 시 누락된 테이블 자동 생성 여부")
    db_timezone: str = Field("UTC", description="MariaDB 세션 타임존 (UTC, Z, +09:00, local 또는 Asia/Seoul 같은 이름)")

    # CORS 설정
    cors_origins: List[str] = Field(default_factory=lambda: ["*"], description="허용할 CORS origin 목록")

    # 요청 처리 설정
    request_timeout_seconds: Optional[float] = Field(None, gt=0, description="요청 단위 타임아웃(초), 미설정 시 무제한")
    expose_error_status: bool = Field(False, description="에러 응답에 세부 HTTP 상태 코드를 노출할지 여부")

    # 애플리케이션 기본 설정
    app_name: str = Field("board-backend", description="애플리케이션 이름")
    debug: bool = Field(False, description="디버그 모드 활성화 여부")
    log_level: str = Field("INFO", description="로그 레벨")
    log_json_format: bool = Field(False, description="JSON 형식 로그 출력 여부")

    class Config:
        """Pydantic 설정 클래스"""
        env_file = os.path.join(os.path.dirname(__file__), "..", ".env")  # .env 파일 경로
        env_file_encoding = "utf-8"  # 환경 변수 파일 인코딩
        extra = "ignore"  # 정의되지 않은 환경변수 무시
        frozen = True  # 로드 이후 변경 불가

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """JSON 설정 파일을 .env 다음 순위의 설정 소스로 추가"""
        json_file = os.getenv(CONFIG_FILE_ENV_KEY, DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            BoardJsonConfigSource(settings_cls, json_file),
            file_secret_settings,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    애플리케이션 설정을 로드하고 반환하는 함수

    LRU 캐시를 사용하여 프로세스당 한 번만 로드합니다.

    Returns:
        Settings: 로드된 설정 객체

    Raises:
        pydantic.ValidationError: 필수 설정 누락 또는 형식 오류 시
    """
    logger.debug("환경 변수에서 애플리케이션 설정 로드 중")
    try:
        settings = Settings()
        logger.info(f"설정 로드 완료: 앱명={settings.app_name}, 디버그={settings.debug}")
        return settings
    except Exception as e:
        logger.error(f"설정 로드 실패: {str(e)}")
        raise
