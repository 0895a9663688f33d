# -*- coding: utf-8 -*-
"""
Точка входа FastAPI-приложения LogicBoard.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from logicboard.api.v1.alerts.routes import router as alerts_router
from logicboard.api.v1.auth.routes import router as auth_router
from logicboard.api.v1.classes.routes import router as classes_router
from logicboard.api.v1.students.routes import router as students_router
from logicboard.clients.database_client import AsyncSessionLocal, init_db
from logicboard.config.logger import configure_logger, get_system_logger
from logicboard.config.redis_settings import get_redis_connection_params
from logicboard.config.settings import settings
from logicboard.config.uvicorn_config import setup_uvicorn_logging
from logicboard.service.change_feed import ChangeFeed, RedisChangeRelay
from logicboard.service.data_source import DataSource
from logicboard.utils.exceptions import APIException
from logicboard.utils.teacher_bootstrap import ensure_teacher_exists

app = FastAPI(
    title="LogicBoard API",
    description="Панель преподавателя для бота-тьютора по программированию LogicBot",
    version="0.1.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    openapi_tags=[
        {"name": "🔐 Аутентификация", "description": "Вход преподавателя"},
        {"name": "🏫 Классы", "description": "Классы, токены и панель класса"},
        {"name": "🎓 Студенты", "description": "Карточка студента"},
        {"name": "🚨 Алерты", "description": "Алерты академической честности"},
    ],
)

# Настройка CORS из настроек
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.get_cors_methods(),
    allow_headers=settings.get_cors_headers(),
)

logger = configure_logger()


# Middleware для логирования всех запросов
@app.middleware("http")
async def log_all_requests(request, call_next):
    if request.url.path.startswith("/api/"):
        logger.info(f"🌐 API запрос: {request.method} {request.url.path}")

    try:
        response = await call_next(request)

        if request.url.path.startswith("/api/"):
            if response.status_code >= 400:
                logger.warning(
                    f"❌ API ошибка: {request.method} {request.url.path} → {response.status_code}"
                )
            else:
                logger.info(
                    f"✅ API ответ: {request.method} {request.url.path} → {response.status_code}"
                )

        return response

    except Exception as e:
        if request.url.path.startswith("/api/"):
            logger.error(
                f"💥 Критическая ошибка API: {request.method} {request.url.path}"
            )
            logger.exception(f"Детали ошибки: {e}")
        raise


@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error_code": exc.error_code},
        headers=exc.headers,
    )


app.include_router(auth_router, prefix="/api/v1/auth", tags=["🔐 Аутентификация"])
app.include_router(classes_router, prefix="/api/v1/classes", tags=["🏫 Классы"])
app.include_router(students_router, prefix="/api/v1/students", tags=["🎓 Студенты"])
app.include_router(alerts_router, prefix="/api/v1/alerts", tags=["🚨 Алерты"])


@app.on_event("startup")
async def startup_event():
    setup_uvicorn_logging()
    system_logger = get_system_logger()
    system_logger.info(f"🚀 Запуск LogicBoard (конфигурация: {settings.get_config_source()})")

    try:
        await init_db()
        logger.info("✅ База данных подключена")
    except SQLAlchemyError as e:
        logger.error(f"❌ Ошибка базы данных: {e}")
        raise

    await ensure_teacher_exists()

    feed = ChangeFeed()
    app.state.data_source = DataSource(AsyncSessionLocal, feed)
    app.state.change_relay = None

    if settings.change_feed_redis_enabled:
        redis = Redis(**get_redis_connection_params())
        relay = RedisChangeRelay(feed, redis)
        try:
            await redis.ping()
            await relay.start()
            app.state.change_relay = relay
            logger.info("✅ Redis подключен, изменения бота приходят в реальном времени")
        except RedisError as e:
            logger.error(f"❌ Ошибка Redis: {e}")
            logger.warning("⚠️ Продолжаем работу без ретрансляции изменений")
            await redis.aclose()

    system_logger.info("🎉 Все сервисы готовы к работе!")


@app.on_event("shutdown")
async def shutdown_event():
    """Обработчик завершения приложения"""
    logger.info("🛑 Завершение работы LogicBoard API")
    relay = getattr(app.state, "change_relay", None)
    if relay is not None:
        await relay.stop()
        await relay.redis.aclose()


@app.get("/api/v1")
async def api_root():
    """Корневой эндпоинт API."""
    return {"message": "LogicBoard API работает", "version": app.version}


@app.get("/api/v1/health")
async def api_health():
    """Проверка живости приложения."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    from logicboard.config.uvicorn_config import get_uvicorn_config

    uvicorn.run(**get_uvicorn_config())
