# -*- coding: utf-8 -*-
"""
Лента изменений коллекций.

``ChangeFeed`` раздаёт подписчикам внутри процесса уведомления «коллекция
изменилась». Само уведомление не несёт данных: подписчик перечитывает
коллекцию целиком и получает полный снимок. Несколько уведомлений, пришедших
подряд, схлопываются в одно.

``RedisChangeRelay`` связывает ленты разных процессов через канал Redis
pub/sub: бот, записав студента или алерт, публикует имя коллекции, и панель
обновляет подписчиков.
"""

import asyncio
import json
import uuid
from collections import defaultdict
from typing import Callable, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from logicboard.config.logger import configure_logger
from logicboard.config.redis_settings import redis_settings
from logicboard.domain.enums import Collection

logger = configure_logger()

_CHANGED = object()
_CLOSED = object()


class FeedSubscription:
    """Подписка на изменения одной коллекции."""

    def __init__(self, feed: "ChangeFeed", collection: Collection):
        self.collection = collection
        self._feed = feed
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self) -> None:
        if not self._closed:
            self._queue.put_nowait(_CHANGED)

    async def wait(self) -> bool:
        """
        Дождаться следующего изменения.

        Returns:
            True, если коллекция изменилась; False, если подписка закрыта
        """
        if self._closed:
            return False
        item = await self._queue.get()
        # Схлопываем накопившиеся уведомления в одно
        while item is not _CLOSED and not self._queue.empty():
            item = self._queue.get_nowait()
        return item is not _CLOSED and not self._closed

    def close(self) -> None:
        """Отписаться; повторный вызов ничего не делает."""
        if self._closed:
            return
        self._closed = True
        self._feed._discard(self)
        self._queue.put_nowait(_CLOSED)


class ChangeFeed:
    """Раздача уведомлений об изменениях коллекций внутри процесса."""

    def __init__(self):
        self._subscribers: dict[Collection, set[FeedSubscription]] = defaultdict(set)
        self._publish_listeners: list[Callable[[Collection], None]] = []

    def subscribe(self, collection: Collection) -> FeedSubscription:
        subscription = FeedSubscription(self, collection)
        self._subscribers[collection].add(subscription)
        return subscription

    def publish(self, collection: Collection, local: bool = True) -> None:
        """
        Уведомить подписчиков об изменении коллекции.

        Args:
            collection: Изменившаяся коллекция
            local: Изменение сделано в этом процессе (уходит в слушатели публикаций)
        """
        for subscription in list(self._subscribers[collection]):
            subscription.notify()
        if local:
            for listener in list(self._publish_listeners):
                listener(collection)

    def add_publish_listener(self, listener: Callable[[Collection], None]) -> None:
        self._publish_listeners.append(listener)

    def remove_publish_listener(self, listener: Callable[[Collection], None]) -> None:
        if listener in self._publish_listeners:
            self._publish_listeners.remove(listener)

    def subscriber_count(self, collection: Collection) -> int:
        return len(self._subscribers[collection])

    def _discard(self, subscription: FeedSubscription) -> None:
        self._subscribers[subscription.collection].discard(subscription)


class RedisChangeRelay:
    """Ретрансляция уведомлений ленты через канал Redis pub/sub."""

    def __init__(
        self,
        feed: ChangeFeed,
        redis: Redis,
        channel: Optional[str] = None,
        origin: Optional[str] = None,
    ):
        self._feed = feed
        self._redis = redis
        self._channel = channel or redis_settings.change_feed_channel
        self._origin = origin or uuid.uuid4().hex
        self._pubsub = None
        self._listener_task: Optional[asyncio.Task] = None
        self._pending: set[asyncio.Task] = set()

    @property
    def origin(self) -> str:
        return self._origin

    @property
    def redis(self) -> Redis:
        return self._redis

    async def start(self) -> None:
        """Подписаться на канал и начать пересылку локальных изменений."""
        self._pubsub = self._redis.pubsub()
        await self._pubsub.subscribe(self._channel)
        self._listener_task = asyncio.create_task(self._listen())
        self._feed.add_publish_listener(self._forward)
        logger.info(f"📡 Ретрансляция изменений через Redis канал {self._channel}")

    async def stop(self) -> None:
        self._feed.remove_publish_listener(self._forward)
        if self._listener_task is not None:
            self._listener_task.cancel()
            try:
                await self._listener_task
            except (asyncio.CancelledError, RedisError):
                pass
            self._listener_task = None
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        if self._pubsub is not None:
            try:
                await self._pubsub.unsubscribe(self._channel)
            except RedisError as e:
                logger.warning(f"Не удалось отписаться от канала {self._channel}: {e}")
            await self._pubsub.aclose()
            self._pubsub = None

    def _forward(self, collection: Collection) -> None:
        try:
            task = asyncio.get_running_loop().create_task(self.publish(collection))
        except RuntimeError:
            logger.warning(f"Нет активного event loop, изменение {collection.value} не отправлено в Redis")
            return
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def publish(self, collection: Collection) -> None:
        payload = json.dumps({"origin": self._origin, "collection": collection.value})
        try:
            await self._redis.publish(self._channel, payload)
        except RedisError as e:
            logger.error(f"Ошибка публикации изменения {collection.value} в Redis: {e}")

    async def _listen(self) -> None:
        try:
            async for message in self._pubsub.listen():
                if message.get("type") != "message":
                    continue
                self.handle_message(message.get("data"))
        except RedisError as e:
            logger.error(f"❌ Потеряно соединение с Redis каналом {self._channel}: {e}")
            logger.warning("⚠️ Изменения бота больше не поступают до перезапуска панели")

    def handle_message(self, data) -> Optional[Collection]:
        """
        Обработать сообщение канала.

        Принимается JSON ``{"origin": ..., "collection": ...}`` или просто имя
        коллекции (так публикует бот). Собственные сообщения игнорируются.

        Returns:
            Коллекция, о которой уведомлены локальные подписчики, или None
        """
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")
        origin = None
        name = data
        try:
            payload = json.loads(data)
        except (TypeError, ValueError):
            payload = None
        if isinstance(payload, dict):
            origin = payload.get("origin")
            name = payload.get("collection")

        if origin == self._origin:
            return None

        try:
            collection = Collection(name)
        except ValueError:
            logger.warning(f"Неизвестная коллекция в канале изменений: {name!r}")
            return None

        self._feed.publish(collection, local=False)
        return collection
