# -*- coding: utf-8 -*-
"""
Клиент для работы с базой данных, в которую бот синхронизирует коллекции.
"""
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.pool import StaticPool

from logicboard.config.settings import settings
from logicboard.domain.models import Base


def build_engine(database_url: str) -> AsyncEngine:
    """Создать асинхронный движок; для SQLite пул соединений не проверяется."""
    if database_url.startswith("sqlite"):
        if ":memory:" in database_url:
            # Одно соединение на процесс, иначе каждая сессия видит пустую базу
            return create_async_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(database_url, echo=False)
    return create_async_engine(
        database_url,
        echo=False,  # Отключаем логирование SQL запросов в продакшене
        pool_pre_ping=True,  # Проверяем соединение перед использованием
        pool_recycle=3600,  # Переподключаемся каждый час
    )


# Создаем асинхронный движок для асинхронных операций
async_engine = build_engine(settings.database_url)

# Создаем фабрику асинхронных сессий
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)


async def init_db(engine: AsyncEngine = async_engine) -> None:
    """
    Инициализирует базу данных, создавая все определенные таблицы.

    Raises:
        SQLAlchemyError: Ошибки при создании таблиц
        OperationalError: Ошибки подключения к базе данных
    """
    async with engine.begin() as conn:
        # Создаем все таблицы на основе моделей
        await conn.run_sync(Base.metadata.create_all)
