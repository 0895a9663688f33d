# LogicBoard/logicboard/api/v1/classes/routes.py
# -*- coding: utf-8 -*-
"""
Маршруты FastAPI для классов преподавателя и панели класса.
"""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import (APIRouter, Depends, HTTPException, Query, WebSocket,
                     WebSocketDisconnect, status)

from logicboard.api.v1.shared.dependencies import (ensure_class_owner,
                                                   get_data_source)
from logicboard.api.v1.shared.schemas import ClassDashboard, ClassSummary
from logicboard.config.logger import configure_logger
from logicboard.security.security import (check_teacher_claims,
                                          teacher_required, verify_token)
from logicboard.service.dashboard import (DashboardState, join_hint,
                                          load_dashboard_state)
from logicboard.service.data_source import DataSource
from logicboard.service.live import LiveDashboard
from logicboard.utils.exceptions import NotFoundError, PermissionDeniedError

from .schemas import ClassCreateSchema

router = APIRouter()
logger = configure_logger()


@router.get("", response_model=List[ClassSummary])
async def list_classes(
    data_source: DataSource = Depends(get_data_source),
    claims: dict = Depends(teacher_required),
):
    """
    Классы текущего преподавателя с живым числом студентов.
    """
    state = DashboardState(
        classes=await data_source.fetch_classes(),
        students=await data_source.fetch_students(),
    )
    return state.class_list(teacher_id=str(claims["sub"]))


@router.post("", response_model=ClassSummary, status_code=status.HTTP_201_CREATED)
async def create_class(
    payload: ClassCreateSchema,
    data_source: DataSource = Depends(get_data_source),
    claims: dict = Depends(teacher_required),
):
    """
    Создаёт класс с новым токеном присоединения.

    Исключения:
        * 422 ― пустое или слишком длинное название.
        * 409 ― не удалось подобрать свободный токен.
    """
    classroom = await data_source.create_class(payload.name, teacher_id=str(claims["sub"]))
    return ClassSummary(
        id=classroom.id,
        name=classroom.name,
        token=classroom.token,
        join_hint=join_hint(classroom.token),
        teacher_id=classroom.teacher_id,
        created_at=classroom.created_at,
        student_count=0,
    )


@router.get("/{class_token}/dashboard", response_model=ClassDashboard)
async def get_class_dashboard(
    class_token: str,
    data_source: DataSource = Depends(get_data_source),
    claims: dict = Depends(teacher_required),
):
    """
    Панель класса: шапка, радар, активность, матрица навыков, аудит и рейтинг.
    """
    state = await load_dashboard_state(data_source)
    ensure_class_owner(state.find_class(class_token), claims)
    return state.class_dashboard(class_token, datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Живая панель
# ---------------------------------------------------------------------------


async def _drain(websocket: WebSocket) -> None:
    while True:
        await websocket.receive_text()


async def _push(websocket: WebSocket, state: DashboardState, class_token: str) -> None:
    if state.notice:
        await websocket.send_json({"type": "notice", "message": state.notice})
    try:
        dashboard = state.class_dashboard(class_token, datetime.now(timezone.utc))
    except NotFoundError as e:
        await websocket.send_json({"type": "notice", "message": e.detail})
        return
    await websocket.send_json({"type": "dashboard", "data": dashboard.model_dump(mode="json")})


@router.websocket("/{class_token}/live")
async def live_class_dashboard(
    websocket: WebSocket,
    class_token: str,
    access_token: Optional[str] = Query(None, alias="token"),
    data_source: DataSource = Depends(get_data_source),
):
    """
    Поток панели класса: новая панель после каждого изменения коллекций.
    """
    try:
        claims = check_teacher_claims(verify_token(access_token or ""))
    except HTTPException as e:
        logger.warning(f"Отклонено подключение к живой панели {class_token}: {e.detail}")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    live = LiveDashboard(data_source)
    await live.start()
    receiver = asyncio.create_task(_drain(websocket))
    try:
        state = await live.wait_ready()
        try:
            ensure_class_owner(state.find_class(class_token), claims)
        except (NotFoundError, PermissionDeniedError) as e:
            await websocket.send_json({"type": "error", "detail": e.detail})
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        logger.info(f"Живая панель класса {class_token} открыта преподавателем {claims['sub']}")
        version = live.version
        while True:
            await _push(websocket, live.state, class_token)
            update = asyncio.create_task(live.wait_for_update(version))
            done, _ = await asyncio.wait(
                {update, receiver}, return_when=asyncio.FIRST_COMPLETED
            )
            if receiver in done:
                update.cancel()
                break
            version = update.result()
            if version is None:
                break
    except WebSocketDisconnect:
        logger.debug(f"Клиент живой панели {class_token} отключился")
    finally:
        receiver.cancel()
        await asyncio.gather(receiver, return_exceptions=True)
        await live.close()
        logger.info(f"Живая панель класса {class_token} закрыта")
