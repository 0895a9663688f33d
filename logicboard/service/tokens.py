# -*- coding: utf-8 -*-
"""
Генерация токенов присоединения к классу.

Формат токена: ``PROG-<год>-<XXX>``, где суффикс из трёх символов
``[A-Z0-9]``. Студент отправляет боту ``unirse <токен>``.
"""
import secrets
import string
from datetime import datetime
from typing import Awaitable, Callable, Optional

from logicboard.config.logger import configure_logger
from logicboard.config.settings import settings
from logicboard.utils.exceptions import ConflictError

logger = configure_logger()

TOKEN_ALPHABET = string.ascii_uppercase + string.digits


def generate_class_token(
    now: datetime,
    prefix: Optional[str] = None,
    suffix_length: Optional[int] = None,
    choice: Callable[[str], str] = secrets.choice,
) -> str:
    """
    Сгенерировать токен класса.

    Args:
        now: Момент создания (берётся год)
        prefix: Префикс токена (по умолчанию из настроек)
        suffix_length: Длина случайного суффикса (по умолчанию 3)
        choice: Источник случайности; подменяется в тестах

    Returns:
        Токен вида PROG-2026-7QX
    """
    if prefix is None:
        prefix = settings.class_token_prefix
    if suffix_length is None:
        suffix_length = settings.class_token_suffix_length
    suffix = "".join(choice(TOKEN_ALPHABET) for _ in range(suffix_length))
    return f"{prefix}-{now.year}-{suffix}"


async def generate_unique_token(
    now: datetime,
    exists: Callable[[str], Awaitable[bool]],
    max_attempts: Optional[int] = None,
    choice: Callable[[str], str] = secrets.choice,
) -> str:
    """
    Сгенерировать токен, которого ещё нет среди классов.

    Raises:
        ConflictError: Не удалось подобрать свободный токен за max_attempts попыток
    """
    if max_attempts is None:
        max_attempts = settings.class_token_max_attempts

    for attempt in range(1, max_attempts + 1):
        token = generate_class_token(now, choice=choice)
        if not await exists(token):
            return token
        logger.warning(f"Коллизия токена класса {token}, попытка {attempt}/{max_attempts}")

    raise ConflictError(
        f"Не удалось сгенерировать уникальный токен класса за {max_attempts} попыток"
    )
