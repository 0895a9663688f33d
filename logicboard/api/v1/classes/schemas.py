# -*- coding: utf-8 -*-
"""
Pydantic-схемы для классов.
"""

from pydantic import BaseModel, Field


class ClassCreateSchema(BaseModel):
    name: str = Field(..., description="Название класса, например «Java 2026-A»")
