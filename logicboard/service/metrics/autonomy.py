# -*- coding: utf-8 -*-
"""
Модуль для расчета автономии студента.

Автономия: доля решённых задач, в которых студент не запрашивал подсказки ИИ.
"""
from typing import Optional

from logicboard.domain.enums import AutonomyBadge
from logicboard.domain.records import StudentRecord
from logicboard.service.metrics.config import (get_autonomy_badge_thresholds,
                                              is_autonomy_clamped)


def _round_half_up(numerator: int, denominator: int) -> int:
    """Округление numerator/denominator к ближайшему целому, половины вверх."""
    return (2 * numerator + denominator) // (2 * denominator)


def compute_autonomy(student: StudentRecord, clamp: Optional[bool] = None) -> int:
    """
    Рассчитать процент автономии студента.

    Args:
        student: Снимок студента
        clamp: Ограничивать ли результат диапазоном [0, 100]
            (по умолчанию из настроек)

    Returns:
        Целый процент; 0, если студент ещё не решил ни одной задачи
    """
    completed = student.challenges_completed or 0
    if completed <= 0:
        return 0

    without_hints = student.challenges_without_hints or 0
    percentage = _round_half_up(100 * without_hints, completed)

    if clamp is None:
        clamp = is_autonomy_clamped()
    if clamp:
        # Без подсказок > решено: несогласованность данных на стороне бота
        percentage = min(max(percentage, 0), 100)
    return percentage


def help_percentage(student: StudentRecord) -> int:
    """Зависимость от подсказок: 100 - автономия."""
    return 100 - compute_autonomy(student)


def autonomy_badge(
    percentage: int,
    success_threshold: Optional[int] = None,
    warning_threshold: Optional[int] = None,
) -> AutonomyBadge:
    """Бейдж автономии: выше 75 SUCCESS, выше 40 WARNING, иначе DANGER."""
    default_success, default_warning = get_autonomy_badge_thresholds()
    if success_threshold is None:
        success_threshold = default_success
    if warning_threshold is None:
        warning_threshold = default_warning

    if percentage > success_threshold:
        return AutonomyBadge.SUCCESS
    if percentage > warning_threshold:
        return AutonomyBadge.WARNING
    return AutonomyBadge.DANGER
