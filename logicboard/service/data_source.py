# -*- coding: utf-8 -*-
"""
Источник данных панели преподавателя.

Подписки отдают полные снимки коллекций: текущий снимок сразу, затем новый
снимок после каждого изменения коллекции. Снимок представляет собой кортеж неизменяемых
записей, поэтому его можно передавать по значению в движок метрик.

Записи панели ограничены двумя операциями: создание класса и отметка алерта
прочитанным. Студентов, алерты и журнал создаёт бот.
"""

from datetime import datetime, timezone
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import pydantic
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from logicboard import repository
from logicboard.config.logger import configure_logger
from logicboard.config.settings import settings
from logicboard.domain.enums import Collection
from logicboard.domain.models import Teacher
from logicboard.domain.records import (ActivityLogRecord, AlertRecord,
                                       ClassRoomRecord, StudentRecord,
                                       TeacherIdentity)
from logicboard.repository.base import update_item
from logicboard.security.security import verify_password
from logicboard.service.change_feed import ChangeFeed, FeedSubscription
from logicboard.service.tokens import generate_unique_token
from logicboard.utils.exceptions import (ConflictError,
                                         DataSourceUnavailableError,
                                         InvalidCredentialsError,
                                         PermissionDeniedError,
                                         ValidationError)

logger = configure_logger()

R = TypeVar("R")

AuthCallback = Callable[[Optional[TeacherIdentity]], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_class_name(name: Optional[str]) -> str:
    """
    Проверить название класса до обращения к хранилищу.

    Raises:
        ValidationError: Пустое или слишком длинное название
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Название класса не может быть пустым")
    if len(cleaned) > settings.class_name_max_length:
        raise ValidationError(
            f"Название класса длиннее {settings.class_name_max_length} символов"
        )
    return cleaned


class Subscription(Generic[R]):
    """
    Асинхронный итератор снимков одной коллекции.

    Пример:
        async with data_source.subscribe_students() as students:
            async for snapshot in students:
                ...
    """

    def __init__(
        self,
        feed_subscription: FeedSubscription,
        loader: Callable[[], Awaitable[tuple[R, ...]]],
    ):
        self._feed_subscription = feed_subscription
        self._loader = loader
        self._primed = False

    @property
    def collection(self) -> Collection:
        return self._feed_subscription.collection

    @property
    def closed(self) -> bool:
        return self._feed_subscription.closed

    def __aiter__(self) -> "Subscription[R]":
        return self

    async def __anext__(self) -> tuple[R, ...]:
        if self.closed:
            raise StopAsyncIteration
        if not self._primed:
            self._primed = True
            return await self._loader()
        if not await self._feed_subscription.wait():
            raise StopAsyncIteration
        return await self._loader()

    def unsubscribe(self) -> None:
        """Отписаться; повторный вызов безопасен."""
        self._feed_subscription.close()

    async def __aenter__(self) -> "Subscription[R]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.unsubscribe()


class DataSource:
    """Подписки на коллекции, записи панели и сессия преподавателя."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        feed: Optional[ChangeFeed] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._session_factory = session_factory
        self.feed = feed or ChangeFeed()
        self._clock = clock
        self._identity: Optional[TeacherIdentity] = None
        self._auth_listeners: list[AuthCallback] = []

    # ------------------------------------------------------------------
    # Чтение снимков
    # ------------------------------------------------------------------

    async def _load(self, operation: str, reader, record_cls) -> tuple:
        """Прочитать коллекцию; строки, которые не удаётся разобрать, пропускаются."""
        try:
            async with self._session_factory() as session:
                rows = await reader(session)
                records = []
                for row in rows:
                    try:
                        records.append(record_cls.model_validate(row))
                    except pydantic.ValidationError as e:
                        logger.warning(
                            f"Пропущена некорректная запись {operation} "
                            f"(id={getattr(row, 'id', None)}): {e.error_count()} ошибок"
                        )
                return tuple(records)
        except SQLAlchemyError as e:
            logger.error(f"Ошибка чтения хранилища ({operation}): {e}")
            raise DataSourceUnavailableError(operation, str(e)) from e

    def _subscribe(self, collection: Collection, loader) -> Subscription:
        return Subscription(self.feed.subscribe(collection), loader)

    async def fetch_classes(self) -> tuple[ClassRoomRecord, ...]:
        return await self._load("classes", repository.list_classes, ClassRoomRecord)

    async def fetch_students(self) -> tuple[StudentRecord, ...]:
        return await self._load("students", repository.list_students, StudentRecord)

    async def fetch_alerts(self, newest_first: bool = True) -> tuple[AlertRecord, ...]:
        return await self._load(
            "alerts",
            lambda session: repository.list_alerts(session, newest_first),
            AlertRecord,
        )

    async def fetch_activity_logs(
        self, newest_first: bool = True
    ) -> tuple[ActivityLogRecord, ...]:
        return await self._load(
            "logs",
            lambda session: repository.list_activity_logs(session, newest_first),
            ActivityLogRecord,
        )

    def subscribe_classes(self) -> Subscription[ClassRoomRecord]:
        return self._subscribe(Collection.CLASSES, lambda: self.fetch_classes())

    def subscribe_students(self) -> Subscription[StudentRecord]:
        """Сырой снимок студентов; по токену класса фильтрует вызывающий код."""
        return self._subscribe(Collection.STUDENTS, lambda: self.fetch_students())

    def subscribe_alerts(
        self, ordered_by_created_at_desc: bool = True
    ) -> Subscription[AlertRecord]:
        return self._subscribe(
            Collection.ALERTS, lambda: self.fetch_alerts(ordered_by_created_at_desc)
        )

    def subscribe_activity_logs(
        self, ordered_by_timestamp_desc: bool = True
    ) -> Subscription[ActivityLogRecord]:
        return self._subscribe(
            Collection.LOGS,
            lambda: self.fetch_activity_logs(ordered_by_timestamp_desc),
        )

    # ------------------------------------------------------------------
    # Записи панели
    # ------------------------------------------------------------------

    async def create_class(
        self,
        name: str,
        teacher_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ClassRoomRecord:
        """
        Создать класс с новым токеном присоединения.

        Args:
            name: Название класса
            teacher_id: Владелец (по умолчанию вошедший преподаватель)
            now: Момент создания (по умолчанию текущее время)

        Returns:
            Созданный класс

        Raises:
            ValidationError: Некорректное название (хранилище не трогается)
            PermissionDeniedError: Не указан преподаватель и никто не вошёл
            ConflictError: Не удалось подобрать свободный токен
            DataSourceUnavailableError: Ошибка хранилища
        """
        name = validate_class_name(name)
        if teacher_id is None:
            if self._identity is None:
                raise PermissionDeniedError("Требуется вход преподавателя")
            teacher_id = self._identity.uid
        now = now or self._clock()

        try:
            async with self._session_factory() as session:
                token = await generate_unique_token(
                    now, lambda candidate: repository.token_exists(session, candidate)
                )
                classroom = await repository.create_class(
                    session, name, token, teacher_id, now
                )
                record = ClassRoomRecord.model_validate(classroom)
        except IntegrityError as e:
            logger.warning(f"Токен класса занят параллельной записью: {e}")
            raise ConflictError("Токен класса уже используется, повторите попытку") from e
        except SQLAlchemyError as e:
            logger.error(f"Ошибка создания класса {name!r}: {e}")
            raise DataSourceUnavailableError("create_class", str(e)) from e

        logger.info(f"Класс {record.name!r} создан с токеном {record.token}")
        self.feed.publish(Collection.CLASSES)
        return record

    async def mark_alert_read(self, alert_id: int) -> AlertRecord:
        """
        Пометить алерт прочитанным.

        Флаг переходит false -> true один раз; повторная отметка возвращает алерт
        без изменений и без уведомления подписчиков.

        Raises:
            NotFoundError: Алерт не найден
            DataSourceUnavailableError: Ошибка хранилища
        """
        try:
            async with self._session_factory() as session:
                alert, changed = await repository.mark_read(session, alert_id)
                record = AlertRecord.model_validate(alert)
        except SQLAlchemyError as e:
            logger.error(f"Ошибка отметки алерта {alert_id}: {e}")
            raise DataSourceUnavailableError("mark_alert_read", str(e)) from e

        if changed:
            logger.info(f"Алерт {alert_id} отмечен как просмотренный")
            self.feed.publish(Collection.ALERTS)
        return record

    # ------------------------------------------------------------------
    # Сессия преподавателя
    # ------------------------------------------------------------------

    @property
    def current_teacher(self) -> Optional[TeacherIdentity]:
        return self._identity

    async def authenticate_teacher(self, username: str, password: str) -> TeacherIdentity:
        """
        Проверить учётные данные преподавателя, не меняя состояние сессии.

        Raises:
            InvalidCredentialsError: Неверное имя или пароль
            PermissionDeniedError: Учётная запись отключена
            DataSourceUnavailableError: Ошибка хранилища
        """
        username = (username or "").strip()
        try:
            async with self._session_factory() as session:
                teacher = await repository.get_teacher_by_username(session, username)
                if teacher is None or not verify_password(password, teacher.password):
                    logger.warning(f"Неудачная попытка входа преподавателя {username!r}")
                    raise InvalidCredentialsError()
                if not teacher.is_active:
                    logger.warning(f"Попытка входа отключённого преподавателя {username!r}")
                    raise PermissionDeniedError("Учётная запись преподавателя отключена")
                teacher = await update_item(
                    session, Teacher, teacher.id, last_login=self._clock()
                )
        except SQLAlchemyError as e:
            logger.error(f"Ошибка проверки учётных данных {username!r}: {e}")
            raise DataSourceUnavailableError("sign_in_teacher", str(e)) from e

        return TeacherIdentity(
            uid=str(teacher.id), username=teacher.username, full_name=teacher.full_name
        )

    async def sign_in_teacher(self, username: str, password: str) -> TeacherIdentity:
        identity = await self.authenticate_teacher(username, password)
        self._set_identity(identity)
        logger.info(f"Преподаватель {identity.username} вошёл в панель")
        return identity

    def sign_out(self) -> None:
        if self._identity is None:
            return
        logger.info(f"Преподаватель {self._identity.username} вышел из панели")
        self._set_identity(None)

    def on_auth_state_change(self, callback: AuthCallback) -> Callable[[], None]:
        """
        Зарегистрировать обработчик смены сессии.

        Обработчик сразу вызывается с текущей идентичностью, затем при каждом
        входе и выходе.

        Returns:
            Функция отписки; повторный вызов безопасен
        """
        self._auth_listeners.append(callback)
        callback(self._identity)

        def unsubscribe() -> None:
            if callback in self._auth_listeners:
                self._auth_listeners.remove(callback)

        return unsubscribe

    def _set_identity(self, identity: Optional[TeacherIdentity]) -> None:
        self._identity = identity
        for listener in list(self._auth_listeners):
            listener(identity)
