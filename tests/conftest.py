# -*- coding: utf-8 -*-
"""
Общие фикстуры для тестирования
"""

import os

# Настройки должны быть заданы до импорта приложения
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CHANGE_FEED_REDIS_ENABLED"] = "false"

import json
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from logicboard.api.v1.shared.dependencies import get_data_source
from logicboard.domain.enums import Role
from logicboard.domain.models import (ActivityLog, Base, ClassRoom,
                                      IntegrityAlert, Student, Teacher)
from logicboard.domain.records import (ActivityLogRecord, AlertRecord,
                                       ClassRoomRecord, StudentRecord)
from logicboard.main import app
from logicboard.security.security import create_access_token, hash_password
from logicboard.service.change_feed import ChangeFeed
from logicboard.service.data_source import DataSource

# Тестовая база данных в памяти
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Фиксированное «сейчас» для детерминированных метрик
NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)

TEACHER_PASSWORD = "logicbot-test"


@pytest.fixture
def now():
    return NOW


@pytest.fixture
async def test_engine():
    """Создать тестовый движок БД."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_session(session_factory):
    """Создать тестовую сессию БД."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def feed():
    return ChangeFeed()


@pytest.fixture
def data_source(session_factory, feed):
    return DataSource(session_factory, feed, clock=lambda: NOW)


# ---------------------------------------------------------------------------
# Записи и строки хранилища
# ---------------------------------------------------------------------------


@pytest.fixture
def make_student():
    """Фабрика снимков студентов."""

    def factory(phone_number="+34600000001", **overrides):
        data = {"phone_number": phone_number, "name": f"Estudiante {phone_number[-2:]}"}
        data.update(overrides)
        return StudentRecord.model_validate(data)

    return factory


@pytest.fixture
def make_alert():
    def factory(alert_id=1, **overrides):
        data = {
            "id": alert_id,
            "student_id": "+34600000001",
            "student_name": "Ana",
            "created_at": NOW,
            "read": False,
        }
        data.update(overrides)
        return AlertRecord.model_validate(data)

    return factory


@pytest.fixture
def make_log():
    def factory(log_id=1, **overrides):
        data = {
            "id": log_id,
            "student_id": "+34600000001",
            "topic": "Variables y Primitivos",
            "timestamp": NOW,
            "result": "CORRECT",
        }
        data.update(overrides)
        return ActivityLogRecord.model_validate(data)

    return factory


@pytest.fixture
def make_class():
    def factory(token="PROG-2026-AB1", **overrides):
        data = {"id": 1, "name": "Java A", "token": token, "teacher_id": "1", "created_at": NOW}
        data.update(overrides)
        return ClassRoomRecord.model_validate(data)

    return factory


async def create_test_data(session, model_class, **kwargs):
    """Хелпер для создания тестовых данных с async session"""
    instance = model_class(**kwargs)
    session.add(instance)
    await session.commit()
    await session.refresh(instance)
    return instance


@pytest.fixture
def add_row(test_session):
    """Вставить строку модели в тестовую БД."""

    async def factory(model_class, **kwargs):
        return await create_test_data(test_session, model_class, **kwargs)

    return factory


@pytest.fixture
def add_student(add_row):
    async def factory(phone_number="+34600000001", topic_progress=None, chat_history=None, **kwargs):
        kwargs.setdefault("name", f"Estudiante {phone_number[-2:]}")
        return await add_row(
            Student,
            phone_number=phone_number,
            topic_progress=json.dumps(topic_progress or {}),
            chat_history=json.dumps(chat_history or []),
            **kwargs,
        )

    return factory


@pytest.fixture
def add_alert(add_row):
    async def factory(**kwargs):
        kwargs.setdefault("student_id", "+34600000001")
        kwargs.setdefault("student_name", "Ana")
        kwargs.setdefault("created_at", NOW)
        return await add_row(IntegrityAlert, **kwargs)

    return factory


@pytest.fixture
def add_log(add_row):
    async def factory(**kwargs):
        kwargs.setdefault("student_id", "+34600000001")
        kwargs.setdefault("topic", "Variables y Primitivos")
        kwargs.setdefault("timestamp", NOW)
        kwargs.setdefault("result", "CORRECT")
        return await add_row(ActivityLog, **kwargs)

    return factory


@pytest.fixture
def add_class(add_row):
    async def factory(token="PROG-2026-AB1", teacher_id="1", **kwargs):
        kwargs.setdefault("name", "Java A")
        kwargs.setdefault("created_at", NOW)
        return await add_row(ClassRoom, token=token, teacher_id=teacher_id, **kwargs)

    return factory


# ---------------------------------------------------------------------------
# Преподаватель и API
# ---------------------------------------------------------------------------


@pytest.fixture
async def teacher(add_row):
    return await add_row(
        Teacher,
        username="profe",
        full_name="Profesora Ruiz",
        password=hash_password(TEACHER_PASSWORD),
        is_active=True,
    )


def bearer_headers(teacher_id) -> dict:
    token = create_access_token({"sub": str(teacher_id), "role": Role.TEACHER.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(teacher):
    return bearer_headers(teacher.id)


@pytest.fixture
async def async_client(data_source):
    """Создать асинхронный тестовый клиент для API."""
    app.dependency_overrides[get_data_source] = lambda: data_source
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def headers_for():
    """Заголовки авторизации для произвольного преподавателя."""
    return bearer_headers
