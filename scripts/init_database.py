#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт инициализации базы данных.

Выполняет:
1. Создание таблиц коллекций
2. Создание учётной записи преподавателя из настроек
"""

import asyncio
import sys
from pathlib import Path

# Добавляем корень проекта в sys.path
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy.exc import SQLAlchemyError

from logicboard.clients.database_client import async_engine, init_db
from logicboard.config.logger import configure_logger
from logicboard.config.settings import settings
from logicboard.utils.teacher_bootstrap import create_default_teacher

logger = configure_logger()


async def init_database():
    """Создание таблиц и преподавателя."""
    try:
        print("🚀 Начинаем инициализацию базы данных...")

        print("🔄 Создание таблиц...")
        await init_db()
        print("✅ Таблицы созданы")

        print("👤 Создание преподавателя...")
        created = await create_default_teacher()
        if created:
            print(f"✅ Преподаватель {settings.teacher_username} создан")
        else:
            print(f"ℹ️ Преподаватель {settings.teacher_username} уже существует")

        print("🎉 Инициализация базы данных завершена успешно!")

    except SQLAlchemyError as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        print(f"❌ Ошибка: {e}")
        sys.exit(1)
    finally:
        await async_engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_database())
