# -*- coding: utf-8 -*-
"""
Живая сессия панели.

``LiveDashboard`` держит подписки на четыре коллекции, применяет каждый
пришедший снимок к ``DashboardState`` и будит ожидающих через счётчик версий.
Ошибка обновления снимка не останавливает сессию: в состояние записывается
уведомление, а подписка ждёт следующего изменения.
"""

import asyncio
from typing import Callable, Optional

from logicboard.config.logger import configure_logger
from logicboard.domain.enums import Collection
from logicboard.service.dashboard import DashboardState
from logicboard.service.data_source import DataSource, Subscription
from logicboard.utils.exceptions import DataSourceUnavailableError

logger = configure_logger()

Handler = Callable[[DashboardState, tuple], DashboardState]

STALE_NOTICE = "Не удалось обновить данные, показаны последние полученные"


class LiveDashboard:
    """Состояние панели, обновляемое подписками источника данных."""

    def __init__(self, data_source: DataSource):
        self._data_source = data_source
        self._state = DashboardState()
        self._version = 0
        self._loaded: set[Collection] = set()
        self._condition = asyncio.Condition()
        self._subscriptions: list[Subscription] = []
        self._tasks: list[asyncio.Task] = []
        self._closed = False

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def version(self) -> int:
        return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        """Подписаться на все коллекции и запустить задачи приёма снимков."""
        if self._tasks or self._closed:
            return
        handlers: list[tuple[Subscription, Handler]] = [
            (self._data_source.subscribe_classes(), DashboardState.with_classes),
            (self._data_source.subscribe_students(), DashboardState.with_students),
            (self._data_source.subscribe_alerts(), DashboardState.with_alerts),
            (self._data_source.subscribe_activity_logs(), DashboardState.with_logs),
        ]
        for subscription, handler in handlers:
            self._subscriptions.append(subscription)
            self._tasks.append(asyncio.create_task(self._consume(subscription, handler)))

    async def _consume(self, subscription: Subscription, handler: Handler) -> None:
        while True:
            try:
                snapshot = await anext(subscription)
            except StopAsyncIteration:
                return
            except DataSourceUnavailableError as e:
                logger.warning(
                    f"Снимок {subscription.collection.value} не обновлён: {e.detail}"
                )
                await self._apply(
                    lambda state: state.with_notice(STALE_NOTICE),
                    subscription.collection,
                )
                continue
            except Exception:
                logger.exception(
                    f"Непредвиденная ошибка снимка {subscription.collection.value}"
                )
                await self._apply(
                    lambda state: state.with_notice(STALE_NOTICE),
                    subscription.collection,
                )
                continue

            await self._apply(
                lambda state: handler(state, snapshot).with_notice(None),
                subscription.collection,
            )

    async def _apply(
        self,
        transform: Callable[[DashboardState], DashboardState],
        collection: Collection,
    ) -> None:
        async with self._condition:
            self._state = transform(self._state)
            self._version += 1
            self._loaded.add(collection)
            self._condition.notify_all()

    async def wait_ready(self) -> DashboardState:
        """Дождаться первого снимка (или уведомления) по каждой коллекции."""
        async with self._condition:
            await self._condition.wait_for(
                lambda: len(self._loaded) == len(Collection) or self._closed
            )
            return self._state

    async def wait_for_update(self, since: int) -> Optional[int]:
        """
        Дождаться версии новее since.

        Returns:
            Новая версия или None, если сессия закрыта
        """
        async with self._condition:
            await self._condition.wait_for(lambda: self._version > since or self._closed)
            if self._closed:
                return None
            return self._version

    async def close(self) -> None:
        """Отписаться от всех коллекций; повторный вызов безопасен."""
        if self._closed:
            return
        self._closed = True
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        async with self._condition:
            self._condition.notify_all()
        logger.debug("Живая сессия панели закрыта")
