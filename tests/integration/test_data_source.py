# -*- coding: utf-8 -*-
"""
Интеграционные тесты источника данных панели
"""

import asyncio
import re
from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from conftest import NOW, TEACHER_PASSWORD
from logicboard import repository
from logicboard.domain.enums import Collection
from logicboard.domain.models import Student
from logicboard.service.data_source import DataSource
from logicboard.service.metrics import unread_alert_count
from logicboard.utils.exceptions import (DataSourceUnavailableError,
                                         InvalidCredentialsError,
                                         NotFoundError, PermissionDeniedError,
                                         ValidationError)


@pytest.fixture
async def empty_engine():
    """Движок без таблиц: любое чтение завершается ошибкой хранилища."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    yield engine
    await engine.dispose()


class TestSnapshots:
    async def test_alerts_are_newest_first(self, data_source, add_alert):
        await add_alert(created_at=NOW - timedelta(hours=2))
        await add_alert(created_at=NOW)
        await add_alert(created_at=NOW - timedelta(hours=1))

        alerts = await data_source.fetch_alerts()

        assert [a.id for a in alerts] == [2, 3, 1]
        oldest_first = await data_source.fetch_alerts(newest_first=False)
        assert [a.id for a in oldest_first] == [1, 3, 2]

    async def test_logs_are_newest_first(self, data_source, add_log):
        await add_log(timestamp=NOW - timedelta(days=1), topic="Arrays (Arreglos)")
        await add_log(timestamp=NOW)

        logs = await data_source.fetch_activity_logs()

        assert [log.id for log in logs] == [2, 1]

    async def test_student_json_fields_are_parsed(self, data_source, add_student):
        await add_student(
            topic_progress={"Variables y Primitivos": {"nivel": 3, "puntos": 30}},
            chat_history=[{"usuario": "hola"}],
            challenges_completed=4,
        )

        (student,) = await data_source.fetch_students()

        assert student.topic_progress["Variables y Primitivos"].level == 3
        assert student.chat_history[0].text == "hola"
        assert student.challenges_completed == 4

    async def test_unknown_chat_speaker_keeps_student(self, data_source, add_row):
        await add_row(
            Student,
            phone_number="+34600000009",
            chat_history='[{"speaker": "teacher", "text": "x"}]',
        )

        (student,) = await data_source.fetch_students()

        assert student.phone_number == "+34600000009"
        assert student.chat_history == ()

    async def test_invalid_row_is_skipped(self, data_source, monkeypatch):
        async def list_classes(session):
            return [{"token": "PROG-2026-AB1", "name": "Java"}, {"name": "sin token"}]

        monkeypatch.setattr(repository, "list_classes", list_classes)

        classes = await data_source.fetch_classes()

        assert [c.token for c in classes] == ["PROG-2026-AB1"]

    async def test_store_failure_is_reported(self, empty_engine):
        factory = async_sessionmaker(empty_engine, class_=AsyncSession, expire_on_commit=False)
        data_source = DataSource(factory)

        with pytest.raises(DataSourceUnavailableError) as exc_info:
            await data_source.fetch_students()

        assert exc_info.value.status_code == 503


class TestSubscriptions:
    async def test_first_snapshot_then_one_per_change(self, data_source, add_student):
        subscription = data_source.subscribe_students()

        assert await anext(subscription) == ()

        await add_student("+34600000001")
        data_source.feed.publish(Collection.STUDENTS)
        snapshot = await asyncio.wait_for(anext(subscription), timeout=1)

        assert [s.phone_number for s in snapshot] == ["+34600000001"]
        subscription.unsubscribe()

    async def test_unsubscribe_is_idempotent_and_stops_delivery(self, data_source):
        async with data_source.subscribe_alerts() as subscription:
            await anext(subscription)
        subscription.unsubscribe()

        data_source.feed.publish(Collection.ALERTS)

        with pytest.raises(StopAsyncIteration):
            await anext(subscription)
        assert data_source.feed.subscriber_count(Collection.ALERTS) == 0

    async def test_subscription_surfaces_store_error(self, empty_engine):
        factory = async_sessionmaker(empty_engine, class_=AsyncSession, expire_on_commit=False)
        subscription = DataSource(factory).subscribe_classes()

        with pytest.raises(DataSourceUnavailableError):
            await anext(subscription)

        subscription.unsubscribe()


class TestCreateClass:
    async def test_class_is_created_and_published(self, data_source, feed):
        classes = feed.subscribe(Collection.CLASSES)

        classroom = await data_source.create_class("  Java A  ", teacher_id="1")

        assert classroom.name == "Java A"
        assert re.match(r"^PROG-2026-[A-Z0-9]{3}$", classroom.token)
        assert classroom.student_count == 0
        assert classroom.teacher_id == "1"
        assert await asyncio.wait_for(classes.wait(), timeout=1) is True
        assert [c.token for c in await data_source.fetch_classes()] == [classroom.token]

    async def test_tokens_are_unique(self, data_source):
        tokens = {(await data_source.create_class(f"Grupo {i}", teacher_id="1")).token for i in range(10)}

        assert len(tokens) == 10

    @pytest.mark.parametrize("name", ["", "   ", "x" * 121])
    async def test_invalid_name_never_reaches_store(self, feed, name):
        session_factory = MagicMock()
        data_source = DataSource(session_factory, feed)

        with pytest.raises(ValidationError):
            await data_source.create_class(name, teacher_id="1")

        session_factory.assert_not_called()

    async def test_signed_in_teacher_owns_the_class(self, data_source, teacher):
        await data_source.sign_in_teacher("profe", TEACHER_PASSWORD)

        classroom = await data_source.create_class("Java B")

        assert classroom.teacher_id == str(teacher.id)

    async def test_requires_teacher(self, data_source):
        with pytest.raises(PermissionDeniedError):
            await data_source.create_class("Java C")


class TestMarkAlertRead:
    async def test_acknowledge_flow(self, data_source, add_alert, feed):
        first = await add_alert()
        await add_alert()
        await add_alert(read=True)
        alerts_feed = feed.subscribe(Collection.ALERTS)
        assert unread_alert_count(await data_source.fetch_alerts()) == 2

        alert = await data_source.mark_alert_read(first.id)

        assert alert.read is True
        assert unread_alert_count(await data_source.fetch_alerts()) == 1
        assert await asyncio.wait_for(alerts_feed.wait(), timeout=1) is True

    async def test_second_acknowledge_changes_nothing(self, data_source, add_alert, feed):
        alert = await add_alert(read=True)
        alerts_feed = feed.subscribe(Collection.ALERTS)

        result = await data_source.mark_alert_read(alert.id)

        assert result.read is True
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(alerts_feed.wait(), timeout=0.05)

    async def test_unknown_alert(self, data_source):
        with pytest.raises(NotFoundError):
            await data_source.mark_alert_read(999)


class TestTeacherSession:
    async def test_sign_in_and_out_notify_listeners(self, data_source, teacher):
        seen = []
        unsubscribe = data_source.on_auth_state_change(seen.append)

        identity = await data_source.sign_in_teacher("profe", TEACHER_PASSWORD)
        data_source.sign_out()
        unsubscribe()
        unsubscribe()
        await data_source.sign_in_teacher("profe", TEACHER_PASSWORD)

        assert seen == [None, identity, None]
        assert identity.uid == str(teacher.id)
        assert identity.full_name == "Profesora Ruiz"
        assert data_source.current_teacher == identity

    async def test_wrong_password(self, data_source, teacher):
        with pytest.raises(InvalidCredentialsError):
            await data_source.sign_in_teacher("profe", "nope")

        assert data_source.current_teacher is None

    async def test_unknown_teacher(self, data_source):
        with pytest.raises(InvalidCredentialsError):
            await data_source.authenticate_teacher("nadie", TEACHER_PASSWORD)

    async def test_inactive_teacher(self, data_source, test_session, teacher):
        teacher.is_active = False
        await test_session.commit()

        with pytest.raises(PermissionDeniedError):
            await data_source.authenticate_teacher("profe", TEACHER_PASSWORD)
