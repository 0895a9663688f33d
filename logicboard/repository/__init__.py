# -*- coding: utf-8 -*-
"""
Репозитории коллекций хранилища.
"""

from logicboard.repository.activity_logs import list_activity_logs
from logicboard.repository.alerts import list_alerts, mark_read
from logicboard.repository.classes import (create_class, list_classes,
                                           token_exists)
from logicboard.repository.students import list_students
from logicboard.repository.teachers import get_teacher_by_username

__all__ = [
    "list_classes",
    "token_exists",
    "create_class",
    "list_students",
    "list_alerts",
    "mark_read",
    "list_activity_logs",
    "get_teacher_by_username",
]
