# -*- coding: utf-8 -*-
"""
Модуль для рейтинга студентов и аудита академической честности.
"""
from typing import Iterable, Optional

from logicboard.domain.records import StudentRecord
from logicboard.service.metrics.autonomy import compute_autonomy
from logicboard.service.metrics.config import (get_integrity_thresholds,
                                              get_leaderboard_size)


def students_in_class(
    students: Iterable[StudentRecord], class_token: str
) -> list[StudentRecord]:
    """Студенты, присоединившиеся к классу по токену; неизвестные токены не попадают никуда."""
    return [student for student in students if student.class_token == class_token]


def find_student(
    students: Iterable[StudentRecord], phone_number: str
) -> Optional[StudentRecord]:
    return next(
        (student for student in students if student.phone_number == phone_number),
        None,
    )


def rank_leaderboard(
    students: Iterable[StudentRecord], top_n: Optional[int] = None
) -> list[StudentRecord]:
    """
    Топ студентов по очкам.

    Сортировка устойчивая: при равенстве очков сохраняется порядок снимка.

    Args:
        students: Студенты класса
        top_n: Размер топа (по умолчанию из настроек)

    Returns:
        Не более top_n студентов по убыванию очков
    """
    if top_n is None:
        top_n = get_leaderboard_size()
    if top_n <= 0:
        return []
    ranked = sorted(students, key=lambda student: -(student.points or 0))
    return ranked[:top_n]


def filter_integrity_risks(
    students: Iterable[StudentRecord],
    autonomy_threshold: Optional[int] = None,
    min_challenges: Optional[int] = None,
) -> list[StudentRecord]:
    """
    Студенты с высокой зависимостью от подсказок.

    Попадают студенты с автономией ниже порога и числом решённых задач
    строго больше минимума.
    """
    default_threshold, default_min = get_integrity_thresholds()
    if autonomy_threshold is None:
        autonomy_threshold = default_threshold
    if min_challenges is None:
        min_challenges = default_min

    return [
        student
        for student in students
        if compute_autonomy(student) < autonomy_threshold
        and (student.challenges_completed or 0) > min_challenges
    ]
