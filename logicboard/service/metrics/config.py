# -*- coding: utf-8 -*-
"""
Модуль для получения порогов метрик из конфигурации приложения.
"""
from logicboard.config.settings import settings


def get_mastery_threshold() -> float:
    """
    Получить порог статуса «освоено» из настроек.

    Returns:
        Нижняя граница процента для MASTERY (по умолчанию 80.0)
    """
    return settings.mastery_threshold


def get_in_progress_threshold() -> float:
    """
    Получить порог статуса «в процессе» из настроек.

    Returns:
        Нижняя граница процента для IN_PROGRESS (по умолчанию 50.0)
    """
    return settings.in_progress_threshold


def get_activity_windows() -> tuple[int, int]:
    """Окна активности в днях: (активен до, неактивен начиная с)."""
    return settings.active_days, settings.inactive_days


def get_integrity_thresholds() -> tuple[int, int]:
    """Порог автономии и минимум решённых задач для аудита честности."""
    return settings.integrity_autonomy_threshold, settings.integrity_min_challenges


def get_autonomy_badge_thresholds() -> tuple[int, int]:
    return settings.autonomy_success_threshold, settings.autonomy_warning_threshold


def get_max_topic_level() -> int:
    return settings.max_topic_level


def get_curriculum_topics() -> list[str]:
    return list(settings.curriculum_topics)


def get_leaderboard_size() -> int:
    return settings.leaderboard_size


def is_autonomy_clamped() -> bool:
    return settings.clamp_autonomy
