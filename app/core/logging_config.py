# app/core/logging_config.py

"""
애플리케이션 로깅 설정 모듈입니다.
각 모듈은 `logging.getLogger(__name__)`으로 로거를 얻고,
main.py에서 `setup_logging()`을 한 번 호출하여 포맷과 레벨을 설정합니다.
"""

import logging
import logging.config
from typing import Optional

from app.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """dictConfig로 콘솔 로깅을 구성합니다. DEBUG_MODE이면 DEBUG 레벨을 사용합니다."""
    log_level = (level or ("DEBUG" if settings.DEBUG_MODE else settings.LOG_LEVEL)).upper()

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": log_level,
            },
        },
        "loggers": {
            "app": {"handlers": ["console"], "level": log_level, "propagate": False},
        },
        "root": {"handlers": ["console"], "level": "WARNING"},
    })
