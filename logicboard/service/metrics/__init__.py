# -*- coding: utf-8 -*-
"""
Модуль метрик панели преподавателя.

Чистые функции без ввода-вывода: по снимкам студентов, алертов и журнала
рассчитывают автономию, статусы, корзины активности, средние по темам,
рейтинг и счётчики, которые отображает панель.
"""

from logicboard.service.metrics.alerts import (alerts_for_student,
                                              recent_alerts,
                                              unread_alert_count)
from logicboard.service.metrics.autonomy import (autonomy_badge,
                                                compute_autonomy,
                                                help_percentage)
from logicboard.service.metrics.classification import (activity_breakdown,
                                                      classify_activity,
                                                      classify_status,
                                                      count_active_today)
from logicboard.service.metrics.logs import (ALL_TOPICS, distinct_topics,
                                            filter_logs_by_topic,
                                            logs_for_student)
from logicboard.service.metrics.ranking import (filter_integrity_risks,
                                               find_student, rank_leaderboard,
                                               students_in_class)
from logicboard.service.metrics.topics import (TopicAverage,
                                              class_radar_average,
                                              topic_level, topic_score,
                                              topic_short_label, topic_status)

__all__ = [
    # Автономия
    "compute_autonomy",
    "help_percentage",
    "autonomy_badge",
    # Классификация
    "classify_status",
    "classify_activity",
    "activity_breakdown",
    "count_active_today",
    # Темы
    "TopicAverage",
    "topic_level",
    "topic_score",
    "topic_status",
    "topic_short_label",
    "class_radar_average",
    # Рейтинг и аудит
    "students_in_class",
    "find_student",
    "rank_leaderboard",
    "filter_integrity_risks",
    # Алерты
    "unread_alert_count",
    "alerts_for_student",
    "recent_alerts",
    # Журнал
    "ALL_TOPICS",
    "logs_for_student",
    "filter_logs_by_topic",
    "distinct_topics",
]
