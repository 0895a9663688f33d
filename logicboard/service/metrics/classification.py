# -*- coding: utf-8 -*-
"""
Модуль для классификации процентов освоения и активности студентов.
"""
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from logicboard.domain.enums import ActivityStatus, MasteryStatus
from logicboard.domain.records import StudentRecord
from logicboard.service.metrics.config import (get_activity_windows,
                                              get_in_progress_threshold,
                                              get_mastery_threshold)


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def classify_status(
    percentage: float,
    mastery_threshold: Optional[float] = None,
    in_progress_threshold: Optional[float] = None,
) -> MasteryStatus:
    """
    Определить статус освоения по проценту.

    Нижние границы включительные: 80 -> MASTERY, 50 -> IN_PROGRESS.
    """
    if mastery_threshold is None:
        mastery_threshold = get_mastery_threshold()
    if in_progress_threshold is None:
        in_progress_threshold = get_in_progress_threshold()

    if percentage >= mastery_threshold:
        return MasteryStatus.MASTERY
    if percentage >= in_progress_threshold:
        return MasteryStatus.IN_PROGRESS
    return MasteryStatus.RISK


def classify_activity(
    last_seen_at: Optional[datetime],
    now: datetime,
    active_days: Optional[int] = None,
    inactive_days: Optional[int] = None,
) -> ActivityStatus:
    """
    Отнести студента к корзине активности по последнему подключению.

    Args:
        last_seen_at: Время последнего подключения (None, если студент не подключался)
        now: Текущее время
        active_days: Граница активного окна в днях (по умолчанию 3)
        inactive_days: Граница неактивности в днях (по умолчанию 7)

    Returns:
        ACTIVE, AT_RISK или INACTIVE; без даты студент считается неактивным
    """
    if last_seen_at is None:
        return ActivityStatus.INACTIVE

    default_active, default_inactive = get_activity_windows()
    if active_days is None:
        active_days = default_active
    if inactive_days is None:
        inactive_days = default_inactive

    elapsed = _as_utc(now) - _as_utc(last_seen_at)
    if elapsed < timedelta(days=active_days):
        return ActivityStatus.ACTIVE
    if elapsed < timedelta(days=inactive_days):
        return ActivityStatus.AT_RISK
    return ActivityStatus.INACTIVE


def activity_breakdown(
    students: Iterable[StudentRecord], now: datetime
) -> dict[ActivityStatus, int]:
    """Количество студентов в каждой корзине активности (круговая диаграмма)."""
    breakdown = {status: 0 for status in ActivityStatus}
    for student in students:
        breakdown[classify_activity(student.last_seen_at, now)] += 1
    return breakdown


def count_active_today(students: Iterable[StudentRecord], now: datetime) -> int:
    """Студенты, подключавшиеся в тот же календарный день, что и now."""
    now = _as_utc(now)
    today = now.date()
    return sum(
        1
        for student in students
        if student.last_seen_at is not None
        and _as_utc(student.last_seen_at).astimezone(now.tzinfo).date() == today
    )
