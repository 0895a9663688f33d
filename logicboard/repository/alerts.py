# -*- coding: utf-8 -*-
"""
Репозиторий алертов академической честности.
"""

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from logicboard.domain.models import IntegrityAlert
from logicboard.repository.base import get_item, list_items


async def list_alerts(
    session: AsyncSession, newest_first: bool = True
) -> List[IntegrityAlert]:
    """Все алерты, по умолчанию от новых к старым."""
    if newest_first:
        order = (IntegrityAlert.created_at.desc(), IntegrityAlert.id.desc())
    else:
        order = (IntegrityAlert.created_at.asc(), IntegrityAlert.id.asc())
    return await list_items(session, IntegrityAlert, *order)


async def mark_read(session: AsyncSession, alert_id: int) -> tuple[IntegrityAlert, bool]:
    """
    Пометить алерт прочитанным.

    Returns:
        Пара (алерт, изменился ли флаг); повторная отметка ничего не меняет

    Raises:
        NotFoundError: Алерт не найден
    """
    alert = await get_item(session, IntegrityAlert, alert_id)
    if alert.read:
        return alert, False
    alert.read = True
    await session.commit()
    await session.refresh(alert)
    return alert, True
