# -*- coding: utf-8 -*-
"""
Репозиторий классов преподавателей.
"""

from datetime import datetime
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from logicboard.domain.models import ClassRoom
from logicboard.repository.base import create_item, list_items


async def list_classes(session: AsyncSession) -> List[ClassRoom]:
    """Все классы в порядке создания."""
    return await list_items(session, ClassRoom, ClassRoom.created_at, ClassRoom.id)


async def token_exists(session: AsyncSession, token: str) -> bool:
    result = await session.execute(
        select(ClassRoom.id).where(ClassRoom.token == token).limit(1)
    )
    return result.first() is not None


async def create_class(
    session: AsyncSession,
    name: str,
    token: str,
    teacher_id: str,
    created_at: datetime,
) -> ClassRoom:
    """Создать класс; счётчик студентов начинается с нуля."""
    return await create_item(
        session,
        ClassRoom,
        name=name,
        token=token,
        teacher_id=teacher_id,
        created_at=created_at,
        student_count=0,
    )
