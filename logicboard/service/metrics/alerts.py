# -*- coding: utf-8 -*-
"""
Модуль для подсчета и выборки алертов академической честности.
"""
from typing import Iterable, Sequence

from logicboard.domain.records import AlertRecord


def unread_alert_count(alerts: Iterable[AlertRecord]) -> int:
    """Количество непрочитанных алертов (счётчик на колокольчике)."""
    return sum(1 for alert in alerts if not alert.read)


def alerts_for_student(
    alerts: Iterable[AlertRecord], phone_number: str
) -> list[AlertRecord]:
    """Алерты студента в порядке снимка; сопоставление по номеру телефона."""
    return [alert for alert in alerts if alert.student_id == phone_number]


def recent_alerts(alerts: Sequence[AlertRecord], limit: int) -> list[AlertRecord]:
    """Первые limit алертов снимка (снимок уже отсортирован от новых к старым)."""
    if limit <= 0:
        return []
    return list(alerts[:limit])
