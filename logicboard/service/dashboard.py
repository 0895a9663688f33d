# -*- coding: utf-8 -*-
"""
Состояние панели преподавателя и построение представлений.

``DashboardState`` хранит последние снимки четырёх коллекций. Каждый снимок
полностью заменяет предыдущий, порядок прихода снимков не важен. Представления
строятся заново из текущего состояния через функции движка метрик.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict

from logicboard.api.v1.shared.schemas import (ActivityBreakdown, AlertsPanel,
                                              ClassDashboard, ClassSummary,
                                              DashboardHeader, IntegrityRow,
                                              LeaderboardEntry, RadarPoint,
                                              SkillCell, SkillRow,
                                              StudentDetail, StudentStats,
                                              TopicProgressBar)
from logicboard.config.settings import settings
from logicboard.domain.enums import ActivityStatus
from logicboard.domain.records import (ActivityLogRecord, AlertRecord,
                                       ClassRoomRecord, StudentRecord)
from logicboard.service.metrics import (ALL_TOPICS, activity_breakdown,
                                        alerts_for_student, autonomy_badge,
                                        class_radar_average, classify_activity,
                                        compute_autonomy, count_active_today,
                                        distinct_topics, filter_integrity_risks,
                                        filter_logs_by_topic, find_student,
                                        help_percentage, logs_for_student,
                                        rank_leaderboard, recent_alerts,
                                        students_in_class, topic_level,
                                        topic_score, topic_short_label,
                                        topic_status, unread_alert_count)
from logicboard.service.metrics.config import get_curriculum_topics
from logicboard.utils.exceptions import NotFoundError


def join_hint(token: str) -> str:
    """Команда, которую студент отправляет боту, чтобы присоединиться к классу."""
    return f"unirse {token}"


class DashboardState(BaseModel):
    """Неизменяемый набор текущих снимков и активное уведомление."""

    model_config = ConfigDict(frozen=True)

    classes: tuple[ClassRoomRecord, ...] = ()
    students: tuple[StudentRecord, ...] = ()
    alerts: tuple[AlertRecord, ...] = ()
    logs: tuple[ActivityLogRecord, ...] = ()
    notice: Optional[str] = None

    # ------------------------------------------------------------------
    # Обработчики снимков
    # ------------------------------------------------------------------

    def with_classes(self, classes) -> "DashboardState":
        return self.model_copy(update={"classes": tuple(classes)})

    def with_students(self, students) -> "DashboardState":
        return self.model_copy(update={"students": tuple(students)})

    def with_alerts(self, alerts) -> "DashboardState":
        return self.model_copy(update={"alerts": tuple(alerts)})

    def with_logs(self, logs) -> "DashboardState":
        return self.model_copy(update={"logs": tuple(logs)})

    def with_notice(self, notice: Optional[str]) -> "DashboardState":
        return self.model_copy(update={"notice": notice})

    # ------------------------------------------------------------------
    # Представления
    # ------------------------------------------------------------------

    def find_class(self, token: str) -> ClassRoomRecord:
        for classroom in self.classes:
            if classroom.token == token:
                return classroom
        raise NotFoundError(resource_type="Класс", resource_id=token)

    def class_list(self, teacher_id: Optional[str] = None) -> list[ClassSummary]:
        """
        Список классов с живым числом студентов.

        Args:
            teacher_id: Показывать только классы этого преподавателя
        """
        summaries = []
        for classroom in self.classes:
            if teacher_id is not None and classroom.teacher_id != teacher_id:
                continue
            summaries.append(
                ClassSummary(
                    id=classroom.id,
                    name=classroom.name,
                    token=classroom.token,
                    join_hint=join_hint(classroom.token),
                    teacher_id=classroom.teacher_id,
                    created_at=classroom.created_at,
                    student_count=len(students_in_class(self.students, classroom.token)),
                )
            )
        return summaries

    def class_dashboard(self, token: str, now: datetime) -> ClassDashboard:
        """
        Собрать панель класса.

        Raises:
            NotFoundError: Класса с таким токеном нет в снимке
        """
        classroom = self.find_class(token)
        students = students_in_class(self.students, token)
        topics = get_curriculum_topics()

        header = DashboardHeader(
            token=classroom.token,
            class_name=classroom.name,
            join_hint=join_hint(classroom.token),
            total_students=len(students),
            active_today=count_active_today(students, now),
        )
        radar = [
            RadarPoint(
                topic=average.topic,
                label=topic_short_label(average.topic),
                average_level=average.average_level,
            )
            for average in class_radar_average(students, topics)
        ]
        breakdown = activity_breakdown(students, now)
        activity = ActivityBreakdown(
            active=breakdown[ActivityStatus.ACTIVE],
            at_risk=breakdown[ActivityStatus.AT_RISK],
            inactive=breakdown[ActivityStatus.INACTIVE],
        )

        skill_matrix = []
        for student in students:
            autonomy = compute_autonomy(student)
            cells = []
            for topic in topics:
                level = topic_level(student, topic).level
                cells.append(
                    SkillCell(
                        topic=topic,
                        level=level,
                        score=topic_score(level),
                        status=topic_status(level),
                    )
                )
            skill_matrix.append(
                SkillRow(
                    phone_number=student.phone_number,
                    name=student.name,
                    cells=cells,
                    autonomy=autonomy,
                    autonomy_badge=autonomy_badge(autonomy),
                )
            )

        integrity_risks = [
            IntegrityRow(
                phone_number=student.phone_number,
                name=student.name,
                challenges_completed=student.challenges_completed,
                challenges_without_hints=student.challenges_without_hints,
                autonomy=compute_autonomy(student),
                help_percentage=help_percentage(student),
            )
            for student in filter_integrity_risks(students)
        ]
        leaderboard = [
            LeaderboardEntry(
                rank=rank,
                phone_number=student.phone_number,
                name=student.name,
                points=student.points,
                streak_days=student.streak_days,
            )
            for rank, student in enumerate(rank_leaderboard(students), start=1)
        ]

        return ClassDashboard(
            header=header,
            radar=radar,
            activity=activity,
            skill_matrix=skill_matrix,
            integrity_risks=integrity_risks,
            leaderboard=leaderboard,
            unread_alerts=unread_alert_count(self.alerts),
        )

    def student_detail(
        self,
        phone_number: str,
        topic_filter: str = ALL_TOPICS,
        now: Optional[datetime] = None,
    ) -> StudentDetail:
        """
        Собрать карточку студента.

        Args:
            phone_number: Номер телефона студента
            topic_filter: Тема истории решений или "Todos"
            now: Текущее время для корзины активности (по умолчанию сейчас)

        Raises:
            NotFoundError: Студента нет в снимке
        """
        student = find_student(self.students, phone_number)
        if student is None:
            raise NotFoundError(resource_type="Студент", resource_id=phone_number)
        if now is None:
            now = datetime.now(timezone.utc)

        autonomy = compute_autonomy(student)
        topics = []
        for topic in get_curriculum_topics():
            progress = topic_level(student, topic)
            topics.append(
                TopicProgressBar(
                    topic=topic,
                    level=progress.level,
                    points=progress.points,
                    score=topic_score(progress.level),
                    status=topic_status(progress.level),
                )
            )

        student_logs = logs_for_student(self.logs, phone_number)
        return StudentDetail(
            phone_number=student.phone_number,
            name=student.name,
            class_token=student.class_token,
            last_seen_at=student.last_seen_at,
            activity_status=classify_activity(student.last_seen_at, now),
            stats=StudentStats(
                streak_days=student.streak_days,
                challenges_completed=student.challenges_completed,
                total_failures=student.total_failures,
                hints_used=student.hints_used,
                points=student.points,
                level=student.level,
            ),
            autonomy=autonomy,
            autonomy_badge=autonomy_badge(autonomy),
            help_percentage=help_percentage(student),
            topics=topics,
            chat_history=list(student.chat_history),
            alerts=alerts_for_student(self.alerts, phone_number),
            topic_options=distinct_topics(student_logs),
            topic_filter=topic_filter,
            history=filter_logs_by_topic(student_logs, topic_filter),
        )

    def alerts_panel(self, preview_size: Optional[int] = None) -> AlertsPanel:
        """Счётчик непрочитанных, превью новых алертов и полный список."""
        if preview_size is None:
            preview_size = settings.alerts_preview_size
        return AlertsPanel(
            unread_count=unread_alert_count(self.alerts),
            preview=recent_alerts(self.alerts, preview_size),
            alerts=list(self.alerts),
        )


async def load_dashboard_state(data_source) -> DashboardState:
    """Прочитать текущие снимки всех коллекций в новое состояние."""
    return DashboardState(
        classes=await data_source.fetch_classes(),
        students=await data_source.fetch_students(),
        alerts=await data_source.fetch_alerts(),
        logs=await data_source.fetch_activity_logs(),
    )
