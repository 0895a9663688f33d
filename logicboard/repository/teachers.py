# -*- coding: utf-8 -*-
"""
Репозиторий учётных записей преподавателей.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from logicboard.domain.models import Teacher


async def get_teacher_by_username(
    session: AsyncSession, username: str
) -> Optional[Teacher]:
    result = await session.execute(select(Teacher).where(Teacher.username == username))
    return result.scalars().first()
