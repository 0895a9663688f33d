# -*- coding: utf-8 -*-
"""
Репозиторий студентов, синхронизированных ботом.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from logicboard.domain.models import Student
from logicboard.repository.base import list_items


async def list_students(session: AsyncSession) -> List[Student]:
    """Полный снимок студентов без фильтрации по классу."""
    return await list_items(session, Student, Student.id)
