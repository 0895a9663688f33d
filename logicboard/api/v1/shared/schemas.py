# -*- coding: utf-8 -*-
"""
Pydantic-схемы представлений панели преподавателя.

Представления строятся сервисом ``logicboard.service.dashboard`` из снимков
коллекций и отдаются как HTTP-ответы и сообщения WebSocket.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from logicboard.domain.enums import (ActivityStatus, AutonomyBadge,
                                     MasteryStatus)
from logicboard.domain.records import (ActivityLogRecord, AlertRecord,
                                       ChatMessage)


class ClassSummary(BaseModel):
    """Карточка класса в списке."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    name: str
    token: str
    join_hint: str
    teacher_id: str
    created_at: Optional[datetime] = None
    student_count: int = 0


class DashboardHeader(BaseModel):
    token: str
    class_name: str
    join_hint: str
    total_students: int
    active_today: int


class RadarPoint(BaseModel):
    topic: str
    label: str
    average_level: float


class ActivityBreakdown(BaseModel):
    """Распределение студентов по корзинам активности (круговая диаграмма)."""

    active: int = 0
    at_risk: int = 0
    inactive: int = 0


class SkillCell(BaseModel):
    topic: str
    level: int
    score: float
    status: MasteryStatus


class SkillRow(BaseModel):
    """Строка тепловой карты навыков."""

    phone_number: str
    name: str
    cells: List[SkillCell]
    autonomy: int
    autonomy_badge: AutonomyBadge


class IntegrityRow(BaseModel):
    """Студент из аудита академической честности."""

    phone_number: str
    name: str
    challenges_completed: int
    challenges_without_hints: int
    autonomy: int
    help_percentage: int


class LeaderboardEntry(BaseModel):
    rank: int
    phone_number: str
    name: str
    points: int
    streak_days: int


class ClassDashboard(BaseModel):
    """Полная панель класса."""

    header: DashboardHeader
    radar: List[RadarPoint]
    activity: ActivityBreakdown
    skill_matrix: List[SkillRow]
    integrity_risks: List[IntegrityRow]
    leaderboard: List[LeaderboardEntry]
    unread_alerts: int


class StudentStats(BaseModel):
    streak_days: int
    challenges_completed: int
    total_failures: int
    hints_used: int
    points: int
    level: int


class TopicProgressBar(BaseModel):
    topic: str
    level: int
    points: int
    score: float
    status: MasteryStatus


class StudentDetail(BaseModel):
    """Карточка студента: статистика, темы, чат, алерты и история решений."""

    phone_number: str
    name: str
    class_token: Optional[str] = None
    last_seen_at: Optional[datetime] = None
    activity_status: ActivityStatus
    stats: StudentStats
    autonomy: int
    autonomy_badge: AutonomyBadge
    help_percentage: int
    topics: List[TopicProgressBar]
    chat_history: List[ChatMessage]
    alerts: List[AlertRecord]
    topic_options: List[str]
    topic_filter: str
    history: List[ActivityLogRecord]


class AlertsPanel(BaseModel):
    unread_count: int
    preview: List[AlertRecord]
    alerts: List[AlertRecord]
