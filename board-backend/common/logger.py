# logger.py
"""
로깅 설정 및 logger 객체 반환 함수

    - ✅ 터미널 출력: 기본적으로 활성화
    - ✅ 구조화된 로깅: JSON 형식 지원
    - ✅ 로그 레벨별 색상 구분
    - ✅ SQLAlchemy 로깅 제어
    - ✅ 설정 로드 이후 레벨/포맷 일괄 변경 (apply_logging_settings)
"""
import logging
import json
from datetime import datetime
from typing import Optional, Dict, Any, Set

# get_logger 로 생성된 로거 이름 목록 (apply_logging_settings 에서 사용)
_managed_loggers: Set[str] = set()

LOG_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """컬러 로그 포맷터"""

    COLORS = {
        'DEBUG': '\033[36m',      # 청록색
        'INFO': '\033[32m',       # 초록색
        'WARNING': '\033[33m',    # 노란색
        'ERROR': '\033[31m',      # 빨간색
        'CRITICAL': '\033[35m',   # 보라색
        'RESET': '\033[0m'        # 리셋
    }

    def format(self, record):
        # 원본 record 를 건드리지 않도록 복사본에 색상 적용
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON 형식 로그 포맷터"""

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # 예외 정보가 있으면 추가
        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # 추가 필드가 있으면 추가
        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, ensure_ascii=False)


def configure_sqlalchemy_logging(enable: bool = False, level: str = "WARNING"):
    """
    SQLAlchemy 로깅 설정

    Args:
        enable: SQLAlchemy 로깅 활성화 여부 (False 이면 ERROR 이상만 출력)
        level: 활성화 시 로그 레벨
    """
    log_level = getattr(logging, level.upper(), logging.WARNING) if enable else logging.ERROR
    for logger_name in ('sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool',
                        'sqlalchemy.dialects', 'sqlalchemy.orm'):
        logging.getLogger(logger_name).setLevel(log_level)


def _build_formatter(enable_json_format: bool) -> logging.Formatter:
    if enable_json_format:
        return JSONFormatter()
    return ColoredFormatter(LOG_FORMAT)


def get_logger(
    name: str = "app",
    level: str = "INFO",
    enable_json_format: bool = False,
    sqlalchemy_logging: Optional[Dict[str, Any]] = None
) -> logging.Logger:
    """
    logger 객체 생성 및 포맷 지정

    Args:
        name: 로거 이름
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_json_format: JSON 형식 로깅 사용 여부
        sqlalchemy_logging: SQLAlchemy 로깅 설정 딕셔너리 ({'enable': bool, 'level': str})
    """
    logger = logging.getLogger(name)

    # 이미 핸들러가 설정되어 있으면 기존 로거 반환
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_build_formatter(enable_json_format))
    logger.addHandler(console_handler)
    _managed_loggers.add(name)

    # SQLAlchemy 로깅 설정 - 기본적으로 비활성화
    configure_sqlalchemy_logging(**(sqlalchemy_logging or {'enable': False}))

    return logger


def apply_logging_settings(level: str = "INFO", enable_json_format: bool = False):
    """
    이미 생성된 모든 로거에 레벨/포맷을 일괄 적용

    모듈 import 시점에는 설정이 로드되기 전이므로, 설정 로드 후 한 번 호출합니다.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    for name in _managed_loggers:
        logger = logging.getLogger(name)
        logger.setLevel(log_level)
        for handler in logger.handlers:
            handler.setFormatter(_build_formatter(enable_json_format))


def log_with_context(logger: logging.Logger, level: str, message: str, **kwargs):
    """
    컨텍스트 정보와 함께 로깅 (JSON 포맷에서 필드로 펼쳐짐)

    Args:
        logger: 로거 객체
        level: 로그 레벨
        message: 로그 메시지
        **kwargs: 추가 컨텍스트 정보
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(log_level, message, extra={'extra_fields': kwargs})
