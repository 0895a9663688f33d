# -*- coding: utf-8 -*-
"""
LogicBoard/logicboard/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Определение классов перечислений для домена LogicBoard.

Этот модуль содержит перечисления, используемые в приложении: роли, статусы
освоения, корзины активности, результаты решений и коллекции хранилища.
"""

import enum


class Role(str, enum.Enum):
    """Роли, доступные в панели."""

    TEACHER = "teacher"


class MasteryStatus(str, enum.Enum):
    """Статус освоения по проценту (цвет ячейки тепловой карты)."""

    MASTERY = "mastery"  # >= 80%
    IN_PROGRESS = "in_progress"  # [50%, 80%)
    RISK = "risk"  # < 50%


class ActivityStatus(str, enum.Enum):
    """Корзины активности по давности последнего подключения."""

    ACTIVE = "active"  # < 3 дней
    AT_RISK = "at_risk"  # [3, 7) дней
    INACTIVE = "inactive"  # >= 7 дней или нет даты


class AutonomyBadge(str, enum.Enum):
    """Бейдж процента автономии в матрице навыков."""

    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class ChallengeResult(str, enum.Enum):
    """Результат решения задачи в журнале активности."""

    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"


class Speaker(str, enum.Enum):
    """Автор сообщения в истории чата."""

    STUDENT = "student"
    BOT = "bot"


class Collection(str, enum.Enum):
    """Коллекции хранилища, на изменения которых можно подписаться."""

    CLASSES = "classes"
    STUDENTS = "students"
    ALERTS = "alerts"
    LOGS = "logs"
