"""
Logging configuration for the notice board backend.
Console output as plain text or structured JSON.
"""
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

from .config import Settings, get_settings

APP_LOGGER = "noticeboard"


class NoticeBoardJsonFormatter(JsonFormatter):
    """JSON formatter adding timestamp, level and logger name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name

        if hasattr(record, 'notice_id'):
            log_record['notice_id'] = record.notice_id


def build_logging_config(settings: Settings) -> Dict[str, Any]:
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': NoticeBoardJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s'
            },
        },
        'handlers': {
            'console': {
                'level': 'DEBUG' if settings.DEBUG else settings.LOG_LEVEL,
                'class': 'logging.StreamHandler',
                'formatter': 'json' if settings.LOG_JSON else 'standard'
            },
        },
        'loggers': {
            APP_LOGGER: {
                'handlers': ['console'],
                'level': settings.LOG_LEVEL,
                'propagate': False
            },
            'sqlalchemy.engine': {
                'handlers': ['console'],
                'level': 'INFO' if settings.DATABASE_ECHO else 'WARNING',
                'propagate': False
            },
        }
    }


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure application logging"""
    settings = settings or get_settings()
    logging.config.dictConfig(build_logging_config(settings))
    logger = logging.getLogger(APP_LOGGER)
    logger.info(f"Logging initialized with level: {settings.LOG_LEVEL}")
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
