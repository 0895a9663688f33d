# -*- coding: utf-8 -*-
"""
Модуль для агрегации уровней освоения по темам учебного плана.
"""
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from logicboard.domain.enums import MasteryStatus
from logicboard.domain.records import StudentRecord, TopicProgress
from logicboard.service.metrics.classification import classify_status
from logicboard.service.metrics.config import (get_curriculum_topics,
                                              get_max_topic_level)

DEFAULT_TOPIC_PROGRESS = TopicProgress(level=1, points=0)


class TopicAverage(BaseModel):
    """Средний уровень класса по теме (точка радара)."""

    model_config = ConfigDict(frozen=True)

    topic: str
    average_level: float


def topic_short_label(topic: str) -> str:
    """Короткая подпись темы для осей графика: первое слово."""
    return topic.split(" ")[0] if topic else topic


def topic_level(student: StudentRecord, topic_name: str) -> TopicProgress:
    """Прогресс студента по теме; для неначатой темы уровень 1 и 0 очков."""
    return student.topic_progress.get(topic_name, DEFAULT_TOPIC_PROGRESS)


def topic_score(level: int, max_level: Optional[int] = None) -> float:
    """Нормированный балл уровня для раскраски: level / 5 * 100, не выше 100."""
    if max_level is None:
        max_level = get_max_topic_level()
    return min(level / max_level * 100, 100.0)


def topic_status(level: int) -> MasteryStatus:
    return classify_status(topic_score(level))


def class_radar_average(
    students: Sequence[StudentRecord], topics: Optional[Iterable[str]] = None
) -> list[TopicAverage]:
    """
    Рассчитать средний уровень класса по каждой теме учебного плана.

    Args:
        students: Студенты класса
        topics: Темы (по умолчанию учебный план из настроек)

    Returns:
        Список TopicAverage в порядке тем; для пустого класса среднее равно 0
    """
    if topics is None:
        topics = get_curriculum_topics()

    averages = []
    for topic in topics:
        if not students:
            averages.append(TopicAverage(topic=topic, average_level=0.0))
            continue
        total = sum(topic_level(student, topic).level for student in students)
        averages.append(TopicAverage(topic=topic, average_level=total / len(students)))
    return averages
