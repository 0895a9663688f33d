# -*- coding: utf-8 -*-
"""
Интеграционные тесты живой сессии панели
"""

import asyncio

import pytest

from conftest import NOW
from logicboard.domain.enums import Collection
from logicboard.domain.models import Student
from logicboard.service.live import STALE_NOTICE, LiveDashboard
from logicboard.utils.exceptions import DataSourceUnavailableError

TOKEN = "PROG-2026-AB1"


@pytest.fixture
async def start_live(data_source):
    """Запустить живую сессию после подготовки данных."""
    sessions = []

    async def factory():
        session = LiveDashboard(data_source)
        sessions.append(session)
        await session.start()
        await asyncio.wait_for(session.wait_ready(), timeout=1)
        return session

    yield factory

    for session in sessions:
        await session.close()


async def test_initial_state_has_all_collections(start_live, add_class, add_student, add_alert):
    await add_class(TOKEN)
    await add_student(class_token=TOKEN)
    await add_alert()

    live = await start_live()

    assert len(live.state.classes) == 1
    assert len(live.state.alerts) == 1
    assert live.state.class_dashboard(TOKEN, NOW).header.total_students == 1
    assert live.state.notice is None


async def test_bot_write_updates_dashboard(start_live, add_class, add_student, data_source):
    await add_class(TOKEN)
    live = await start_live()
    assert live.state.class_dashboard(TOKEN, NOW).header.total_students == 0

    version = live.version
    await add_student(class_token=TOKEN, points=50)
    data_source.feed.publish(Collection.STUDENTS)

    assert await asyncio.wait_for(live.wait_for_update(version), timeout=1) > version
    dashboard = live.state.class_dashboard(TOKEN, NOW)
    assert dashboard.header.total_students == 1
    assert dashboard.leaderboard[0].points == 50


async def test_failed_refresh_keeps_last_snapshot(start_live, data_source, add_student, monkeypatch):
    await add_student()
    live = await start_live()

    async def broken():
        raise DataSourceUnavailableError("students", "connection lost")

    monkeypatch.setattr(data_source, "fetch_students", broken)
    version = live.version
    data_source.feed.publish(Collection.STUDENTS)
    await asyncio.wait_for(live.wait_for_update(version), timeout=1)

    assert live.state.notice == STALE_NOTICE
    assert len(live.state.students) == 1

    monkeypatch.undo()
    version = live.version
    data_source.feed.publish(Collection.STUDENTS)
    await asyncio.wait_for(live.wait_for_update(version), timeout=1)

    assert live.state.notice is None
    assert len(live.state.students) == 1


async def test_close_releases_subscriptions(start_live, data_source):
    live = await start_live()

    await live.close()
    await live.close()

    assert live.closed
    assert await live.wait_for_update(live.version) is None
    for collection in Collection:
        assert data_source.feed.subscriber_count(collection) == 0


async def test_malformed_bot_row_does_not_block_session(start_live, add_row, add_class):
    await add_class(TOKEN)
    await add_row(
        Student,
        phone_number="+34600000009",
        class_token=TOKEN,
        chat_history='[{"speaker": "teacher", "text": "x"}]',
    )

    live = await start_live()

    assert live.state.class_dashboard(TOKEN, NOW).header.total_students == 1
    assert live.state.notice is None


async def test_unexpected_error_sets_notice_and_session_survives(start_live, data_source, add_student, monkeypatch):
    await add_student()
    live = await start_live()

    async def broken():
        raise RuntimeError("unexpected")

    monkeypatch.setattr(data_source, "fetch_students", broken)
    version = live.version
    data_source.feed.publish(Collection.STUDENTS)
    await asyncio.wait_for(live.wait_for_update(version), timeout=1)

    assert live.state.notice == STALE_NOTICE
    assert not live.closed

    monkeypatch.undo()
    version = live.version
    data_source.feed.publish(Collection.STUDENTS)
    await asyncio.wait_for(live.wait_for_update(version), timeout=1)

    assert live.state.notice is None
    assert len(live.state.students) == 1


async def test_session_is_ready_when_first_load_fails(data_source, monkeypatch):
    async def broken(newest_first=True):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(data_source, "fetch_alerts", broken)
    live = LiveDashboard(data_source)
    await live.start()

    state = await asyncio.wait_for(live.wait_ready(), timeout=1)

    assert state.notice == STALE_NOTICE
    await live.close()
