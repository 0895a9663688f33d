# -*- coding: utf-8 -*-
"""
LogicBoard/logicboard/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
ORM-модели SQLAlchemy для коллекций, которые пишут бот и панель.

Связи между таблицами не объявлены внешними ключами: студент
привязан к классу по значению токена, алерты и журнал по номеру телефона.
Вложенные структуры студента (прогресс по темам и история чата) хранятся так,
как их пишет бот: JSON-строками.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Базовый класс для всех моделей."""


class ClassRoom(Base):
    """Класс преподавателя с уникальным токеном присоединения."""

    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    token: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    teacher_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    student_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class Student(Base):
    """Публичная проекция студента, которую синхронизирует бот."""

    __tablename__ = "users_sync"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone_number: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False
    )
    name: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    streak_days: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    challenges_completed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    challenges_without_hints: Mapped[Optional[int]] = mapped_column(
        Integer, nullable=True
    )
    total_failures: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    hints_used: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    last_seen_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    class_token: Mapped[Optional[str]] = mapped_column(
        String(32), index=True, nullable=True
    )
    topic_progress: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    chat_history: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class IntegrityAlert(Base):
    """Алерт о подозрительно быстром ответе студента."""

    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    student_name: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    reported_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    submitted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    expected_solve_seconds: Mapped[Optional[float]] = mapped_column(nullable=True)
    actual_solve_seconds: Mapped[Optional[float]] = mapped_column(nullable=True)
    challenge_statement: Mapped[str] = mapped_column(Text, default="", nullable=False)
    submitted_answer: Mapped[str] = mapped_column(Text, default="", nullable=False)
    read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class ActivityLog(Base):
    """Запись журнала решений задач."""

    __tablename__ = "challenge_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(String(32), index=True, nullable=False)
    topic: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    challenge_statement: Mapped[str] = mapped_column(Text, default="", nullable=False)
    submitted_answer: Mapped[str] = mapped_column(Text, default="", nullable=False)
    result: Mapped[str] = mapped_column(String(16), default="INCORRECT", nullable=False)
    estimated_seconds: Mapped[Optional[float]] = mapped_column(nullable=True)
    actual_seconds: Mapped[Optional[float]] = mapped_column(nullable=True)
    suspicious: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class Teacher(Base):
    """Учётная запись преподавателя панели."""

    __tablename__ = "teachers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(64), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str] = mapped_column(String(120), default="", nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
