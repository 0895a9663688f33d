# LogicBoard/logicboard/api/v1/alerts/routes.py
# -*- coding: utf-8 -*-
"""
Маршруты FastAPI для алертов академической честности.
"""

from fastapi import APIRouter, Depends

from logicboard.api.v1.shared.dependencies import get_data_source
from logicboard.api.v1.shared.schemas import AlertsPanel
from logicboard.config.logger import configure_logger
from logicboard.domain.records import AlertRecord
from logicboard.security.security import teacher_required
from logicboard.service.dashboard import DashboardState
from logicboard.service.data_source import DataSource

router = APIRouter(dependencies=[Depends(teacher_required)])
logger = configure_logger()


@router.get("", response_model=AlertsPanel)
async def get_alerts(data_source: DataSource = Depends(get_data_source)):
    """
    Счётчик непрочитанных, превью последних алертов и полный список.
    """
    state = DashboardState(alerts=await data_source.fetch_alerts())
    return state.alerts_panel()


@router.post("/{alert_id}/read", response_model=AlertRecord)
async def mark_alert_read(
    alert_id: int,
    data_source: DataSource = Depends(get_data_source),
):
    """
    Отмечает алерт как просмотренный; повторная отметка ничего не меняет.

    Исключения:
        * 404 ― алерт не найден.
    """
    return await data_source.mark_alert_read(alert_id)
