# -*- coding: utf-8 -*-
"""
Unit тесты для разбора записей снимков
"""

from datetime import datetime, timezone

import pydantic
import pytest

from logicboard.domain.enums import ChallengeResult, Speaker
from logicboard.domain.records import (ActivityLogRecord, AlertRecord,
                                       ClassRoomRecord, StudentRecord)


class TestStudentRecord:
    def test_bot_document_with_spanish_keys(self):
        student = StudentRecord.model_validate(
            {
                "numero_telefono": "+34600000001",
                "nombre": "Ana",
                "puntos": 120,
                "nivel": 3,
                "racha_dias": 4,
                "retos_completados": 10,
                "retos_sin_pistas": 7,
                "fallos_totales": 2,
                "pistas_usadas": 5,
                "ultima_conexion": "2026-03-09T18:30:00Z",
                "class_token": "PROG-2026-AB1",
                "progreso_temas": '{"Variables y Primitivos": {"nivel": 4, "puntos": 80}}',
                "historial_chat": '[{"usuario": "hola"}, {"bot": "¡Hola!"}]',
            }
        )

        assert student.phone_number == "+34600000001"
        assert student.challenges_completed == 10
        assert student.challenges_without_hints == 7
        assert student.last_seen_at == datetime(2026, 3, 9, 18, 30, tzinfo=timezone.utc)
        assert student.topic_progress["Variables y Primitivos"].level == 4
        assert student.topic_progress["Variables y Primitivos"].points == 80
        assert [(m.speaker, m.text) for m in student.chat_history] == [
            (Speaker.STUDENT, "hola"),
            (Speaker.BOT, "¡Hola!"),
        ]

    def test_missing_counters_default(self):
        student = StudentRecord.model_validate(
            {"phone_number": "+34600000001", "points": None, "level": None}
        )

        assert student.points == 0
        assert student.level == 1
        assert student.challenges_completed == 0
        assert student.last_seen_at is None

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "42"])
    def test_malformed_topic_progress_becomes_empty(self, raw):
        student = StudentRecord.model_validate({"phone_number": "1", "topic_progress": raw})

        assert student.topic_progress == {}

    @pytest.mark.parametrize("raw", ["oops", '{"usuario": "x"}'])
    def test_malformed_chat_history_becomes_empty(self, raw):
        student = StudentRecord.model_validate({"phone_number": "1", "chat_history": raw})

        assert student.chat_history == ()

    def test_topic_level_is_clamped(self):
        student = StudentRecord.model_validate(
            {
                "phone_number": "1",
                "topic_progress": {"A": {"level": 9}, "B": {"level": 0}, "C": {}},
            }
        )

        assert [student.topic_progress[t].level for t in "ABC"] == [5, 1, 1]

    def test_bad_timestamp_becomes_absent(self):
        student = StudentRecord.model_validate({"phone_number": "1", "last_seen_at": "ayer"})

        assert student.last_seen_at is None

    def test_record_is_immutable(self):
        student = StudentRecord.model_validate({"phone_number": "1"})

        with pytest.raises(pydantic.ValidationError):
            student.points = 10


class TestOtherRecords:
    def test_alert_document(self):
        alert = AlertRecord.model_validate(
            {
                "id": "7",
                "estudiante_id": "+34600000001",
                "nombre_estudiante": "Ana",
                "timestamp_alerta": "2026-03-10T10:00:00",
                "tiempo_estimado": "120",
                "tiempo_tomado": 4,
                "reto_enunciado": "Suma dos enteros",
                "respuesta_estudiante": "a + b",
                "leida": 0,
            }
        )

        assert alert.id == 7
        assert alert.read is False
        assert alert.expected_solve_seconds == 120.0
        assert alert.displayed_at == datetime(2026, 3, 10, 10, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("CORRECTO", ChallengeResult.CORRECT),
            ("correct", ChallengeResult.CORRECT),
            ("INCORRECTO", ChallengeResult.INCORRECT),
            (None, ChallengeResult.INCORRECT),
        ],
    )
    def test_log_result(self, raw, expected):
        log = ActivityLogRecord.model_validate({"tema": "Arrays (Arreglos)", "resultado": raw})

        assert log.result == expected
        assert log.topic == "Arrays (Arreglos)"

    def test_class_document(self):
        classroom = ClassRoomRecord.model_validate(
            {"name": "Java A", "token": "PROG-2026-AB1", "teacherId": 12, "createdAt": "2026-01-15T08:00:00Z"}
        )

        assert classroom.teacher_id == "12"
        assert classroom.student_count == 0
        assert classroom.created_at.year == 2026


class TestMalformedEntries:
    def test_unknown_speaker_is_dropped(self):
        student = StudentRecord.model_validate(
            {
                "phone_number": "1",
                "chat_history": '[{"speaker": "teacher", "text": "x"}, {"speaker": "bot", "text": "ok"}]',
            }
        )

        assert [(m.speaker, m.text) for m in student.chat_history] == [(Speaker.BOT, "ok")]

    def test_empty_student_message_is_shown_as_bot(self):
        student = StudentRecord.model_validate(
            {"phone_number": "1", "chat_history": [{"usuario": ""}, {"foo": "bar"}]}
        )

        assert [(m.speaker, m.text) for m in student.chat_history] == [(Speaker.BOT, "")]

    def test_non_finite_numbers_fall_back_to_defaults(self):
        student = StudentRecord.model_validate(
            {
                "phone_number": "1",
                "puntos": float("inf"),
                "retos_completados": float("nan"),
                "progreso_temas": '{"A": {"nivel": 1e400, "puntos": 5}}',
            }
        )

        assert student.points == 0
        assert student.challenges_completed == 0
        assert student.topic_progress["A"].level == 1
        assert student.topic_progress["A"].points == 5

    def test_non_finite_seconds_are_absent(self):
        alert = AlertRecord.model_validate({"tiempo_estimado": "inf", "tiempo_tomado": 3})

        assert alert.expected_solve_seconds is None
        assert alert.actual_solve_seconds == 3.0

    @pytest.mark.parametrize(
        "raw, expected", [(["PROG"], None), ({"t": 1}, None), (2026, "2026"), ("", None)]
    )
    def test_class_token_of_wrong_type(self, raw, expected):
        student = StudentRecord.model_validate({"phone_number": "1", "class_token": raw})

        assert student.class_token == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [("false", False), ("true", True), ("0", False), ("1", True), (0, False), (True, True), (None, False)],
    )
    def test_flags_from_strings(self, raw, expected):
        alert = AlertRecord.model_validate({"leida": raw})
        log = ActivityLogRecord.model_validate({"es_sospechoso": raw})

        assert alert.read is expected
        assert log.suspicious is expected
