# -*- coding: utf-8 -*-
"""
Общие компоненты API панели.

Этот модуль экспортирует схемы представлений и зависимости маршрутов.
"""

from .schemas import (ActivityBreakdown, AlertsPanel, ClassDashboard,
                      ClassSummary, DashboardHeader, IntegrityRow,
                      LeaderboardEntry, RadarPoint, SkillCell, SkillRow,
                      StudentDetail, StudentStats, TopicProgressBar)

__all__ = [
    "ActivityBreakdown",
    "AlertsPanel",
    "ClassDashboard",
    "ClassSummary",
    "DashboardHeader",
    "IntegrityRow",
    "LeaderboardEntry",
    "RadarPoint",
    "SkillCell",
    "SkillRow",
    "StudentDetail",
    "StudentStats",
    "TopicProgressBar",
]
