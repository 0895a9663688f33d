# -*- coding: utf-8 -*-
"""
Pydantic-схемы для аутентификации преподавателя.
"""

from pydantic import BaseModel

from logicboard.domain.records import TeacherIdentity


class LoginSchema(BaseModel):
    username: str
    password: str


class TokenSchema(BaseModel):
    access_token: str
    token_type: str = "bearer"
    teacher: TeacherIdentity
