# -*- coding: utf-8 -*-
"""
Репозиторий журнала решений задач.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from logicboard.domain.models import ActivityLog
from logicboard.repository.base import list_items


async def list_activity_logs(
    session: AsyncSession, newest_first: bool = True
) -> List[ActivityLog]:
    """Весь журнал, по умолчанию от новых записей к старым."""
    if newest_first:
        order = (ActivityLog.timestamp.desc(), ActivityLog.id.desc())
    else:
        order = (ActivityLog.timestamp.asc(), ActivityLog.id.asc())
    return await list_items(session, ActivityLog, *order)
