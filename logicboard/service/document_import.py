# -*- coding: utf-8 -*-
"""
Импорт выгрузки документов бота в базу панели.

Выгрузка представляет собой JSON-объект с ключами ``classes``, ``students``, ``alerts`` и
``logs``; документы могут использовать исходные испанские ключи бота. Каждый
документ проходит через запись снимка, поэтому повреждённые вложенные
структуры заменяются значениями по умолчанию так же, как при чтении.
Студенты и классы обновляются по номеру телефона и токену, алерты и журнал
добавляются.
"""

import json
from datetime import datetime, timezone
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from logicboard.config.logger import configure_logger
from logicboard.domain.enums import Collection
from logicboard.domain.models import (ActivityLog, ClassRoom, IntegrityAlert,
                                      Student)
from logicboard.domain.records import (ActivityLogRecord, AlertRecord,
                                       ClassRoomRecord, StudentRecord)

logger = configure_logger()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _dump_topic_progress(record: StudentRecord) -> str:
    return json.dumps(
        {
            topic: {"level": progress.level, "points": progress.points}
            for topic, progress in record.topic_progress.items()
        },
        ensure_ascii=False,
    )


def _dump_chat_history(record: StudentRecord) -> str:
    return json.dumps(
        [
            {"speaker": message.speaker.value, "text": message.text}
            for message in record.chat_history
        ],
        ensure_ascii=False,
    )


async def _upsert_class(session: AsyncSession, record: ClassRoomRecord, now: datetime) -> None:
    result = await session.execute(select(ClassRoom).where(ClassRoom.token == record.token))
    classroom = result.scalars().first()
    if classroom is None:
        classroom = ClassRoom(token=record.token)
        session.add(classroom)
    classroom.name = record.name
    classroom.teacher_id = record.teacher_id
    classroom.student_count = record.student_count
    classroom.created_at = record.created_at or now


async def _upsert_student(session: AsyncSession, record: StudentRecord) -> None:
    result = await session.execute(
        select(Student).where(Student.phone_number == record.phone_number)
    )
    student = result.scalars().first()
    if student is None:
        student = Student(phone_number=record.phone_number)
        session.add(student)
    student.name = record.name
    student.points = record.points
    student.level = record.level
    student.streak_days = record.streak_days
    student.challenges_completed = record.challenges_completed
    student.challenges_without_hints = record.challenges_without_hints
    student.total_failures = record.total_failures
    student.hints_used = record.hints_used
    student.last_seen_at = record.last_seen_at
    student.class_token = record.class_token
    student.topic_progress = _dump_topic_progress(record)
    student.chat_history = _dump_chat_history(record)


def _alert_row(record: AlertRecord, now: datetime) -> IntegrityAlert:
    return IntegrityAlert(
        student_id=record.student_id,
        student_name=record.student_name,
        created_at=record.created_at or record.reported_at or now,
        reported_at=record.reported_at,
        submitted_at=record.submitted_at,
        expected_solve_seconds=record.expected_solve_seconds,
        actual_solve_seconds=record.actual_solve_seconds,
        challenge_statement=record.challenge_statement,
        submitted_answer=record.submitted_answer,
        read=record.read,
    )


def _log_row(record: ActivityLogRecord, now: datetime) -> ActivityLog:
    return ActivityLog(
        student_id=record.student_id,
        topic=record.topic,
        timestamp=record.timestamp or now,
        challenge_statement=record.challenge_statement,
        submitted_answer=record.submitted_answer,
        result=record.result.value,
        estimated_seconds=record.estimated_seconds,
        actual_seconds=record.actual_seconds,
        suspicious=record.suspicious,
    )


async def import_documents(
    session_factory: async_sessionmaker[AsyncSession],
    documents: dict[str, Any],
    clock: Callable[[], datetime] = _utcnow,
) -> dict[Collection, int]:
    """
    Загрузить выгрузку документов в одной транзакции.

    Args:
        session_factory: Фабрика асинхронных сессий
        documents: Выгрузка ``{"classes": [...], "students": [...], ...}``
        clock: Источник текущего времени для документов без даты

    Returns:
        Количество импортированных документов по коллекциям
    """
    now = clock()
    counts = {collection: 0 for collection in Collection}

    async with session_factory() as session:
        for document in documents.get(Collection.CLASSES.value) or []:
            await _upsert_class(session, ClassRoomRecord.model_validate(document), now)
            counts[Collection.CLASSES] += 1

        for document in documents.get(Collection.STUDENTS.value) or []:
            record = StudentRecord.model_validate(document)
            if not record.phone_number:
                logger.warning("Пропущен студент без номера телефона")
                continue
            await _upsert_student(session, record)
            counts[Collection.STUDENTS] += 1

        for document in documents.get(Collection.ALERTS.value) or []:
            session.add(_alert_row(AlertRecord.model_validate(document), now))
            counts[Collection.ALERTS] += 1

        for document in documents.get(Collection.LOGS.value) or []:
            session.add(_log_row(ActivityLogRecord.model_validate(document), now))
            counts[Collection.LOGS] += 1

        await session.commit()

    logger.info(
        "Импорт завершён: "
        + ", ".join(f"{collection.value}={count}" for collection, count in counts.items())
    )
    return counts


def changed_collections(counts: dict[Collection, int]) -> list[Collection]:
    """Коллекции, в которые что-то было записано."""
    return [collection for collection, count in counts.items() if count]

