# -*- coding: utf-8 -*-
"""
Зависимости маршрутов панели.
"""

from fastapi.requests import HTTPConnection

from logicboard.domain.records import ClassRoomRecord
from logicboard.service.data_source import DataSource
from logicboard.utils.exceptions import (DataSourceUnavailableError,
                                         PermissionDeniedError)


def get_data_source(connection: HTTPConnection) -> DataSource:
    """Источник данных приложения (создаётся при старте)."""
    data_source = getattr(connection.app.state, "data_source", None)
    if data_source is None:
        raise DataSourceUnavailableError("startup", "источник данных не инициализирован")
    return data_source


def ensure_class_owner(classroom: ClassRoomRecord, claims: dict) -> None:
    if classroom.teacher_id != str(claims.get("sub")):
        raise PermissionDeniedError("Класс принадлежит другому преподавателю")
