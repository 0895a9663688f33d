# -*- coding: utf-8 -*-
"""
LogicBoard/logicboard/domain/records.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Неизменяемые записи снимков, которые получает движок метрик.

Записи строятся из ORM-строк (``from_attributes``) или из сырых документов бота,
где используются исходные испанские ключи (``retos_completados``,
``progreso_temas``, ``leida`` ...). Здесь, на границе доступа к данным, один раз
выполняется разбор вложенных JSON-структур: повреждённое значение заменяется
документированным значением по умолчанию и фиксируется предупреждением в логе,
но никогда не превращается в ошибку.
"""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import (AliasChoices, BaseModel, ConfigDict, Field,
                      field_validator)

from logicboard.config.logger import configure_logger
from logicboard.config.settings import settings
from logicboard.domain.enums import ChallengeResult, Speaker

logger = configure_logger()

RECORD_CONFIG = ConfigDict(frozen=True, from_attributes=True, populate_by_name=True)

# ---------------------------------------------------------------------------
# Помощники разбора
# ---------------------------------------------------------------------------


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _to_int(value: Any, default: int) -> int:
    """Привести счётчик к int; None и мусор дают значение по умолчанию."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Некорректное числовое значение {value!r}, используем {default}")
            return default


def _to_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_datetime(value: Any, field_name: str) -> Optional[datetime]:
    """Разобрать дату (datetime или ISO-8601); наивные значения считаются UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Некорректная дата в поле {field_name}: {value!r}")
            return None
    else:
        logger.warning(f"Неподдерживаемый тип даты в поле {field_name}: {type(value)}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


_TRUE_STRINGS = frozenset({"true", "1", "yes", "si", "sí"})


def _to_bool(value: Any) -> bool:
    """Флаг бота: bool, число или строка вида "true"/"false"."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if value is None:
        return False
    return bool(value)


def _load_json(value: Any, expected: type, field_name: str) -> Any:
    """Разобрать JSON-строку; при ошибке вернуть пустое значение ожидаемого типа."""
    if value is None or value == "":
        return expected()
    if isinstance(value, (str, bytes)):
        try:
            value = json.loads(value)
        except (TypeError, ValueError):
            logger.warning(f"Не удалось разобрать JSON в поле {field_name}, используем пустое значение")
            return expected()
    if not isinstance(value, expected):
        logger.warning(
            f"Поле {field_name} имеет тип {type(value).__name__}, ожидался {expected.__name__}"
        )
        return expected()
    return value


# ---------------------------------------------------------------------------
# Вложенные структуры
# ---------------------------------------------------------------------------


class TopicProgress(BaseModel):
    """Уровень освоения темы (1..5) и набранные по ней очки."""

    model_config = RECORD_CONFIG

    level: int = Field(default=1, validation_alias=_alias("level", "nivel"))
    points: int = Field(default=0, validation_alias=_alias("points", "puntos"))

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> int:
        level = _to_int(value, 1)
        return min(max(level, 1), settings.max_topic_level)

    @field_validator("points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> int:
        return _to_int(value, 0)


class ChatMessage(BaseModel):
    """Одна реплика в истории чата студента с ботом."""

    model_config = RECORD_CONFIG

    speaker: Speaker
    text: str = ""


def _parse_chat_entry(entry: Any) -> Optional[dict]:
    if not isinstance(entry, dict):
        return None
    if "speaker" in entry:
        try:
            speaker = Speaker(entry["speaker"])
        except (TypeError, ValueError):
            return None
        return {"speaker": speaker, "text": str(entry.get("text") or "")}
    # Формат бота: {"usuario": "..."} или {"bot": "..."}; пустой "usuario" считается репликой бота
    if entry.get("usuario"):
        return {"speaker": Speaker.STUDENT, "text": str(entry["usuario"])}
    if "bot" in entry or "usuario" in entry:
        return {"speaker": Speaker.BOT, "text": str(entry.get("bot") or "")}
    return None


# ---------------------------------------------------------------------------
# Записи коллекций
# ---------------------------------------------------------------------------


class ClassRoomRecord(BaseModel):
    """Снимок класса."""

    model_config = RECORD_CONFIG

    id: Optional[int] = None
    name: str = ""
    token: str
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=_alias("created_at", "createdAt")
    )
    teacher_id: str = Field(default="", validation_alias=_alias("teacher_id", "teacherId"))
    student_count: int = Field(
        default=0, validation_alias=_alias("student_count", "studentCount")
    )

    @field_validator("name", "token", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[int]:
        return _to_int(value, None) if value is not None else None

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value: Any) -> Optional[datetime]:
        return _to_datetime(value, "created_at")

    @field_validator("teacher_id", mode="before")
    @classmethod
    def _coerce_teacher_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("student_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int:
        return _to_int(value, 0)


class StudentRecord(BaseModel):
    """Снимок студента с уже разобранными вложенными структурами."""

    model_config = RECORD_CONFIG

    id: Optional[int] = None
    phone_number: str = Field(default="", validation_alias=_alias("phone_number", "numero_telefono"))
    name: str = Field(default="", validation_alias=_alias("name", "nombre"))
    points: int = Field(default=0, validation_alias=_alias("points", "puntos"))
    level: int = Field(default=1, validation_alias=_alias("level", "nivel"))
    streak_days: int = Field(default=0, validation_alias=_alias("streak_days", "racha_dias"))
    challenges_completed: int = Field(
        default=0, validation_alias=_alias("challenges_completed", "retos_completados")
    )
    challenges_without_hints: int = Field(
        default=0,
        validation_alias=_alias("challenges_without_hints", "retos_sin_pistas"),
    )
    total_failures: int = Field(
        default=0, validation_alias=_alias("total_failures", "fallos_totales")
    )
    hints_used: int = Field(default=0, validation_alias=_alias("hints_used", "pistas_usadas"))
    last_seen_at: Optional[datetime] = Field(
        default=None, validation_alias=_alias("last_seen_at", "ultima_conexion")
    )
    class_token: Optional[str] = None
    topic_progress: dict[str, TopicProgress] = Field(
        default_factory=dict,
        validation_alias=_alias("topic_progress", "progreso_temas"),
    )
    chat_history: tuple[ChatMessage, ...] = Field(
        default=(), validation_alias=_alias("chat_history", "historial_chat")
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[int]:
        return _to_int(value, None) if value is not None else None

    @field_validator("phone_number", mode="before")
    @classmethod
    def _coerce_phone(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("class_token", mode="before")
    @classmethod
    def _coerce_class_token(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value or None
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        logger.warning(f"Некорректный токен класса {value!r}, студент без класса")
        return None

    @field_validator(
        "points",
        "streak_days",
        "challenges_completed",
        "challenges_without_hints",
        "total_failures",
        "hints_used",
        mode="before",
    )
    @classmethod
    def _coerce_counter(cls, value: Any) -> int:
        return _to_int(value, 0)

    @field_validator("level", mode="before")
    @classmethod
    def _coerce_level(cls, value: Any) -> int:
        return _to_int(value, 1)

    @field_validator("last_seen_at", mode="before")
    @classmethod
    def _coerce_last_seen(cls, value: Any) -> Optional[datetime]:
        return _to_datetime(value, "last_seen_at")

    @field_validator("topic_progress", mode="before")
    @classmethod
    def _parse_topic_progress(cls, value: Any) -> dict:
        parsed = _load_json(value, dict, "topic_progress")
        progress = {}
        for topic, entry in parsed.items():
            if isinstance(entry, TopicProgress):
                progress[str(topic)] = entry
            elif isinstance(entry, dict):
                progress[str(topic)] = TopicProgress.model_validate(entry)
            else:
                logger.warning(f"Пропущен некорректный прогресс темы {topic!r}")
        return progress

    @field_validator("chat_history", mode="before")
    @classmethod
    def _parse_chat_history(cls, value: Any) -> tuple:
        if isinstance(value, tuple):
            value = list(value)
        parsed = _load_json(value, list, "chat_history")
        messages = []
        for entry in parsed:
            if isinstance(entry, ChatMessage):
                messages.append(entry)
                continue
            message = _parse_chat_entry(entry)
            if message is None:
                logger.warning("Пропущено некорректное сообщение истории чата")
                continue
            messages.append(message)
        return tuple(messages)


class AlertRecord(BaseModel):
    """Снимок алерта академической честности."""

    model_config = RECORD_CONFIG

    id: Optional[int] = None
    student_id: str = Field(default="", validation_alias=_alias("student_id", "estudiante_id"))
    student_name: str = Field(
        default="", validation_alias=_alias("student_name", "nombre_estudiante")
    )
    created_at: Optional[datetime] = Field(
        default=None, validation_alias=_alias("created_at", "creado_en")
    )
    reported_at: Optional[datetime] = Field(
        default=None, validation_alias=_alias("reported_at", "timestamp_alerta")
    )
    submitted_at: Optional[datetime] = Field(
        default=None, validation_alias=_alias("submitted_at", "timestamp_envio")
    )
    expected_solve_seconds: Optional[float] = Field(
        default=None, validation_alias=_alias("expected_solve_seconds", "tiempo_estimado")
    )
    actual_solve_seconds: Optional[float] = Field(
        default=None, validation_alias=_alias("actual_solve_seconds", "tiempo_tomado")
    )
    challenge_statement: str = Field(
        default="", validation_alias=_alias("challenge_statement", "reto_enunciado")
    )
    submitted_answer: str = Field(
        default="", validation_alias=_alias("submitted_answer", "respuesta_estudiante")
    )
    read: bool = Field(default=False, validation_alias=_alias("read", "leida"))

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[int]:
        return _to_int(value, None) if value is not None else None

    @field_validator(
        "student_id", "student_name", "challenge_statement", "submitted_answer",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("created_at", "reported_at", "submitted_at", mode="before")
    @classmethod
    def _coerce_dates(cls, value: Any, info) -> Optional[datetime]:
        return _to_datetime(value, info.field_name)

    @field_validator("expected_solve_seconds", "actual_solve_seconds", mode="before")
    @classmethod
    def _coerce_seconds(cls, value: Any) -> Optional[float]:
        return _to_float(value)

    @field_validator("read", mode="before")
    @classmethod
    def _coerce_read(cls, value: Any) -> bool:
        return _to_bool(value)

    @property
    def displayed_at(self) -> Optional[datetime]:
        """Время, которое показывается в карточке: время алерта или создания."""
        return self.reported_at or self.created_at


class ActivityLogRecord(BaseModel):
    """Снимок записи журнала решений."""

    model_config = RECORD_CONFIG

    id: Optional[int] = None
    student_id: str = Field(default="", validation_alias=_alias("student_id", "estudiante_id"))
    topic: str = Field(default="", validation_alias=_alias("topic", "tema"))
    timestamp: Optional[datetime] = None
    challenge_statement: str = Field(
        default="", validation_alias=_alias("challenge_statement", "enunciado")
    )
    submitted_answer: str = Field(
        default="", validation_alias=_alias("submitted_answer", "respuesta")
    )
    result: ChallengeResult = Field(
        default=ChallengeResult.INCORRECT,
        validation_alias=_alias("result", "resultado"),
    )
    estimated_seconds: Optional[float] = Field(
        default=None, validation_alias=_alias("estimated_seconds", "tiempo_estimado")
    )
    actual_seconds: Optional[float] = Field(
        default=None, validation_alias=_alias("actual_seconds", "tiempo_tomado")
    )
    suspicious: bool = Field(
        default=False, validation_alias=_alias("suspicious", "es_sospechoso")
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Optional[int]:
        return _to_int(value, None) if value is not None else None

    @field_validator(
        "student_id", "topic", "challenge_statement", "submitted_answer", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Optional[datetime]:
        return _to_datetime(value, "timestamp")

    @field_validator("result", mode="before")
    @classmethod
    def _coerce_result(cls, value: Any) -> ChallengeResult:
        # Бот пишет CORRECTO/INCORRECTO
        if isinstance(value, ChallengeResult):
            return value
        if str(value or "").strip().upper() in ("CORRECT", "CORRECTO"):
            return ChallengeResult.CORRECT
        return ChallengeResult.INCORRECT

    @field_validator("estimated_seconds", "actual_seconds", mode="before")
    @classmethod
    def _coerce_seconds(cls, value: Any) -> Optional[float]:
        return _to_float(value)

    @field_validator("suspicious", mode="before")
    @classmethod
    def _coerce_suspicious(cls, value: Any) -> bool:
        return _to_bool(value)


class TeacherIdentity(BaseModel):
    """Идентичность вошедшего преподавателя."""

    model_config = RECORD_CONFIG

    uid: str
    username: str
    full_name: str = ""
