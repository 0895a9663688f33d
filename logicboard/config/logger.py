# -*- coding: utf-8 -*-
"""
Логирование LogicBoard через loguru.

Стандартный ``logging`` (uvicorn, SQLAlchemy, FastAPI) перехватывается и
пишется в те же приёмники. Записи, привязанные с ``system=True``, выводятся
отдельным форматом без имени модуля: это сообщения о запуске сервиса.
"""
import logging
import sys

from loguru import logger

from logicboard.config.settings import settings

# Шумные библиотеки, которые не пишем даже на DEBUG
_SILENCED_PREFIXES = ("httpx", "httpcore", "aiosqlite", "asyncio", "passlib")

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
_SYSTEM_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>LOGICBOARD</magenta> | "
    "<level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def _is_system(record) -> bool:
    return record["extra"].get("system") is True


def _is_regular(record) -> bool:
    return not _is_system(record)


class InterceptHandler(logging.Handler):
    """Пересылает записи стандартного logging в loguru."""

    def emit(self, record):
        if record.name.startswith(_SILENCED_PREFIXES):
            return
        # Баннеры uvicorn дублируют системные сообщения
        if record.name.startswith("uvicorn") and record.levelno == logging.INFO:
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str, log_file=None) -> None:
    """
    Заменить приёмники loguru: консоль, системные сообщения и файл.

    Args:
        level: Минимальный уровень для консоли
        log_file: Путь файла логов с ротацией (None - без файла)
    """
    logger.remove()
    level = level.upper()
    logger.add(
        sys.stdout,
        format=_CONSOLE_FORMAT,
        level=level,
        colorize=True,
        backtrace=False,
        diagnose=False,
        filter=_is_regular,
    )
    logger.add(sys.stdout, format=_SYSTEM_FORMAT, level=level, colorize=True, filter=_is_system)
    if log_file:
        logger.add(
            log_file,
            format=_FILE_FORMAT,
            level="INFO",
            rotation="10 MB",
            retention=7,
            encoding="utf-8",
        )
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


setup_logging(settings.log_level, settings.log_file)


def configure_logger(name: str = "logicboard"):
    """Логгер модуля (loguru общий для всего процесса, имя не используется)."""
    return logger


def get_system_logger():
    """Логгер сообщений о запуске и остановке сервиса."""
    return logger.bind(system=True)
