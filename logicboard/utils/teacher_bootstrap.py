# -*- coding: utf-8 -*-
"""
Утилиты для проверки и создания учётной записи преподавателя.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from logicboard.clients.database_client import AsyncSessionLocal
from logicboard.config.logger import configure_logger
from logicboard.config.settings import settings
from logicboard.domain.models import Teacher
from logicboard.repository import get_teacher_by_username
from logicboard.repository.base import create_item
from logicboard.security.security import hash_password

logger = configure_logger()


async def create_default_teacher(
    session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
    username: Optional[str] = None,
    password: Optional[str] = None,
) -> bool:
    """
    Создаёт преподавателя из настроек, если его ещё нет.

    Returns:
        bool: True если преподаватель создан, False если уже существовал
    """
    username = username or settings.teacher_username
    password = password or settings.teacher_password

    async with session_factory() as session:
        if await get_teacher_by_username(session, username) is not None:
            logger.info(f"✅ Преподаватель {username} уже существует")
            return False

        await create_item(
            session,
            Teacher,
            username=username,
            full_name=settings.teacher_full_name,
            password=hash_password(password),
            is_active=True,
        )
        logger.info(f"✅ Преподаватель создан ({username})")
        return True


async def ensure_teacher_exists(
    session_factory: async_sessionmaker[AsyncSession] = AsyncSessionLocal,
) -> None:
    """
    Проверяет существование преподавателя и создаёт его при необходимости.
    """
    try:
        await create_default_teacher(session_factory)
    except SQLAlchemyError as e:
        logger.error(f"❌ Ошибка при создании преподавателя: {e}")
        raise RuntimeError("Не удалось создать преподавателя") from e
