# LogicBoard/logicboard/api/v1/students/routes.py
# -*- coding: utf-8 -*-
"""
Маршруты FastAPI для карточки студента.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query

from logicboard.api.v1.shared.dependencies import get_data_source
from logicboard.api.v1.shared.schemas import StudentDetail
from logicboard.config.logger import configure_logger
from logicboard.security.security import teacher_required
from logicboard.service.dashboard import load_dashboard_state
from logicboard.service.data_source import DataSource
from logicboard.service.metrics import ALL_TOPICS

router = APIRouter()
logger = configure_logger()


@router.get(
    "/{phone_number}",
    response_model=StudentDetail,
    dependencies=[Depends(teacher_required)],
)
async def get_student_detail(
    phone_number: str,
    topic: str = Query(ALL_TOPICS, description='Тема истории решений или "Todos"'),
    data_source: DataSource = Depends(get_data_source),
):
    """
    Карточка студента: статистика, прогресс по темам, чат, алерты и история решений.

    Исключения:
        * 404 ― студента с таким номером нет.
    """
    logger.debug(f"Запрос карточки студента {phone_number}, тема {topic!r}")
    state = await load_dashboard_state(data_source)
    return state.student_detail(phone_number, topic, datetime.now(timezone.utc))
