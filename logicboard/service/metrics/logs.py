# -*- coding: utf-8 -*-
"""
Модуль для фильтрации журнала решений по студенту и теме.

Функции сохраняют порядок входа и ничего не сортируют: источник отдаёт журнал
от новых записей к старым, и вызывающий код, которому важна свежесть,
передаёт уже отсортированный снимок.
"""
from typing import Iterable

from logicboard.domain.records import ActivityLogRecord

# Значение фильтра «все темы»
ALL_TOPICS = "Todos"
ALL_TOPICS_SENTINELS = frozenset({ALL_TOPICS, "All"})


def logs_for_student(
    logs: Iterable[ActivityLogRecord], phone_number: str
) -> list[ActivityLogRecord]:
    return [log for log in logs if log.student_id == phone_number]


def filter_logs_by_topic(
    logs: Iterable[ActivityLogRecord], topic: str
) -> list[ActivityLogRecord]:
    """
    Отфильтровать журнал по теме.

    Args:
        logs: Записи журнала
        topic: Тема или значение «все темы» ("Todos"/"All")

    Returns:
        Все записи для значения «все темы», иначе записи с точно совпадающей темой
    """
    if topic in ALL_TOPICS_SENTINELS:
        return list(logs)
    return [log for log in logs if log.topic == topic]


def distinct_topics(logs: Iterable[ActivityLogRecord]) -> list[str]:
    """Варианты фильтра тем: "Todos" первым, затем темы в порядке появления."""
    topics = [ALL_TOPICS]
    seen = set(topics)
    for log in logs:
        if log.topic not in seen:
            seen.add(log.topic)
            topics.append(log.topic)
    return topics
