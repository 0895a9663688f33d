# -*- coding: utf-8 -*-
"""
Запуск uvicorn с логами через loguru.
"""

import logging

from logicboard.config.logger import InterceptHandler
from logicboard.config.settings import settings

# Уровни сторонних логгеров; access-лог заменён middleware приложения
_LOGGER_LEVELS = {
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "fastapi": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "websockets": logging.WARNING,
}


def setup_uvicorn_logging():
    """Направить логи uvicorn, FastAPI и SQLAlchemy в loguru."""
    for name, level in _LOGGER_LEVELS.items():
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False
        std_logger.setLevel(level)


def get_uvicorn_config() -> dict:
    return {
        "app": "logicboard.main:app",
        "host": settings.app_host,
        "port": settings.app_port,
        "log_config": None,
        "access_log": False,
    }
