# LogicBoard/logicboard/api/v1/auth/routes.py
# -*- coding: utf-8 -*-
"""
Маршруты FastAPI для входа преподавателя.
"""

from fastapi import APIRouter, Depends, status

from logicboard.api.v1.shared.dependencies import get_data_source
from logicboard.config.logger import configure_logger
from logicboard.domain.enums import Role
from logicboard.domain.records import TeacherIdentity
from logicboard.security.security import create_access_token, teacher_required
from logicboard.service.data_source import DataSource

from .schemas import LoginSchema, TokenSchema

router = APIRouter()
logger = configure_logger()


@router.post("/login", response_model=TokenSchema, status_code=status.HTTP_200_OK)
async def login(
    credentials: LoginSchema,
    data_source: DataSource = Depends(get_data_source),
):
    """
    Аутентифицирует преподавателя и возвращает JWT-токен.

    Исключения:
        * 401 ― неверные учётные данные.
        * 403 ― учётная запись отключена.
        * 503 ― хранилище недоступно.
    """
    teacher = await data_source.authenticate_teacher(
        credentials.username, credentials.password
    )
    access_token = create_access_token(
        {
            "sub": teacher.uid,
            "role": Role.TEACHER.value,
            "username": teacher.username,
            "full_name": teacher.full_name,
        }
    )
    logger.info(f"Преподаватель {teacher.username} (ID: {teacher.uid}) успешно авторизовался")
    return {"access_token": access_token, "token_type": "bearer", "teacher": teacher}


@router.get("/me", response_model=TeacherIdentity)
async def read_current_teacher(claims: dict = Depends(teacher_required)):
    """
    Возвращает данные текущего преподавателя из токена.
    """
    return TeacherIdentity(
        uid=str(claims["sub"]),
        username=claims.get("username", ""),
        full_name=claims.get("full_name", ""),
    )
