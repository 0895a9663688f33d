#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт импорта выгрузки документов бота.

Пример:
    python scripts/import_documents.py export.json

Если включена ретрансляция изменений через Redis, после импорта в канал
публикуются изменённые коллекции, и открытые панели обновляются.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Добавляем корень проекта в sys.path
sys.path.append(str(Path(__file__).parent.parent))

from redis.asyncio import Redis
from sqlalchemy.exc import SQLAlchemyError

from logicboard.clients.database_client import (AsyncSessionLocal,
                                                async_engine, init_db)
from logicboard.config.logger import configure_logger
from logicboard.config.redis_settings import get_redis_connection_params
from logicboard.config.settings import settings
from logicboard.service.change_feed import ChangeFeed, RedisChangeRelay
from logicboard.service.document_import import (changed_collections,
                                                import_documents)

logger = configure_logger()


async def publish_changes(counts) -> None:
    redis = Redis(**get_redis_connection_params())
    relay = RedisChangeRelay(ChangeFeed(), redis)
    try:
        for collection in changed_collections(counts):
            await relay.publish(collection)
            print(f"📡 Изменение {collection.value} опубликовано")
    finally:
        await redis.aclose()


async def run(path: Path) -> None:
    try:
        documents = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"❌ Не удалось прочитать выгрузку {path}: {e}")
        sys.exit(1)

    try:
        await init_db()
        counts = await import_documents(AsyncSessionLocal, documents)
    except SQLAlchemyError as e:
        logger.error(f"Ошибка импорта документов: {e}")
        print(f"❌ Ошибка: {e}")
        sys.exit(1)
    finally:
        await async_engine.dispose()

    for collection, count in counts.items():
        print(f"✅ {collection.value}: {count}")

    if settings.change_feed_redis_enabled:
        await publish_changes(counts)


def main() -> None:
    parser = argparse.ArgumentParser(description="Импорт выгрузки документов бота")
    parser.add_argument("path", type=Path, help="JSON-файл выгрузки")
    args = parser.parse_args()
    asyncio.run(run(args.path))


if __name__ == "__main__":
    main()
