# -*- coding: utf-8 -*-
"""
LogicBoard/logicboard/config/settings.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Конфигурация настроек приложения с использованием Pydantic.

Этот модуль загружает конфигурацию из .env файла, предоставляя централизованную
систему управления настройками: подключение к хранилищу, учётная запись
преподавателя, учебный план и пороги метрик панели.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

"""Загрузка .env производится ТОЛЬКО если файл существует.
В контейнере используем переменные окружения, переданные Docker/Compose.
"""
# Base directory for the project (LogicBoard/)
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Возможные пути к .env файлам
ROOT_ENV_PATH = (BASE_DIR / ".env").resolve()
PACKAGE_ENV_PATH = (BASE_DIR / "logicboard" / ".env").resolve()

# Учебный план Java, который бот ведёт по темам (порядок важен для радара)
DEFAULT_CURRICULUM_TOPICS = [
    "Variables y Primitivos",
    "Operadores Lógicos",
    "Condicionales (if-else)",
    "Ciclos (for, while)",
    "Arrays (Arreglos)",
    "Métodos y Funciones",
    "Clases y Objetos (OOP)",
]


class Settings(BaseSettings):
    """Настройки приложения, загружаемые из .env файла."""

    # Приоритет: 1) корневой .env файл, 2) .env пакета, 3) только переменные окружения
    _env_file = None
    if ROOT_ENV_PATH.exists():
        _env_file = ROOT_ENV_PATH
    elif PACKAGE_ENV_PATH.exists():
        _env_file = PACKAGE_ENV_PATH

    model_config = SettingsConfigDict(
        env_file=_env_file,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Конфигурация хранилища
    database_url: str = "sqlite+aiosqlite:///./logicboard.db"

    # Конфигурация JWT
    jwt_secret: str = "logicboard-dev-secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    # Учётная запись преподавателя по умолчанию
    teacher_username: str = "teacher"
    teacher_password: str = "logicbot"
    teacher_full_name: str = "Docente"

    # Конфигурация приложения
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # Учебный план и шкала уровней
    curriculum_topics: list[str] = DEFAULT_CURRICULUM_TOPICS
    max_topic_level: int = 5

    # Пороги статуса освоения (в процентах)
    mastery_threshold: float = 80.0
    in_progress_threshold: float = 50.0

    # Окна активности (в днях)
    active_days: int = 3
    inactive_days: int = 7

    # Аудит академической честности
    integrity_autonomy_threshold: int = 40
    integrity_min_challenges: int = 2
    clamp_autonomy: bool = True

    # Пороги бейджа автономии
    autonomy_success_threshold: int = 75
    autonomy_warning_threshold: int = 40

    # Размеры списков на панели
    leaderboard_size: int = 3
    alerts_preview_size: int = 5

    # Токены классов: PROG-<год>-<XXX>
    class_token_prefix: str = "PROG"
    class_token_suffix_length: int = 3
    class_token_max_attempts: int = 10
    class_name_max_length: int = 120

    # Конфигурация логирования
    log_level: str = "INFO"
    log_file: str | None = None

    # Конфигурация CORS
    cors_allow_origins: str = ""
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "GET,POST,OPTIONS"
    cors_allow_headers: str = "Authorization,Content-Type"
    frontend_port: int | None = None

    # Ретрансляция изменений через Redis (изменения от бота из другого процесса)
    change_feed_redis_enabled: bool = False

    def get_allowed_origins(self) -> list[str]:
        """Формирует список разрешённых origins для CORS.
        Приоритет: явные cors_allow_origins -> localhost фронтенда для dev.
        """
        if self.cors_allow_origins:
            return [
                origin.strip()
                for origin in self.cors_allow_origins.split(",")
                if origin.strip()
            ]

        port = self.frontend_port or 5173
        return [
            f"http://localhost:{port}",
            f"http://127.0.0.1:{port}",
        ]

    def get_cors_methods(self) -> list[str]:
        """Возвращает список разрешённых HTTP методов для CORS."""
        if self.cors_allow_methods == "*":
            return ["*"]
        return [
            method.strip()
            for method in self.cors_allow_methods.split(",")
            if method.strip()
        ]

    def get_cors_headers(self) -> list[str]:
        """Возвращает список разрешённых заголовков для CORS."""
        if self.cors_allow_headers == "*":
            return ["*"]
        return [
            header.strip()
            for header in self.cors_allow_headers.split(",")
            if header.strip()
        ]

    def get_config_source(self) -> str:
        """Возвращает информацию об источнике конфигурации для отладки."""
        if ROOT_ENV_PATH.exists():
            return f"root: {ROOT_ENV_PATH}"
        elif PACKAGE_ENV_PATH.exists():
            return f"package: {PACKAGE_ENV_PATH}"
        else:
            return "environment variables only"


settings = Settings()
