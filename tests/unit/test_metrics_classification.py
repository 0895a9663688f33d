# -*- coding: utf-8 -*-
"""
Unit тесты для классификации статусов и активности
"""

from datetime import datetime, timedelta, timezone

import pytest

from logicboard.domain.enums import ActivityStatus, MasteryStatus
from logicboard.service.metrics import (activity_breakdown, classify_activity,
                                        classify_status, count_active_today)


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "percentage, expected",
        [
            (0, MasteryStatus.RISK),
            (49.9, MasteryStatus.RISK),
            (50, MasteryStatus.IN_PROGRESS),
            (79.99, MasteryStatus.IN_PROGRESS),
            (80, MasteryStatus.MASTERY),
            (100, MasteryStatus.MASTERY),
            (150, MasteryStatus.MASTERY),
        ],
    )
    def test_threshold_table(self, percentage, expected):
        assert classify_status(percentage) == expected

    def test_monotonic(self):
        """Статус не понижается при росте процента"""
        order = [MasteryStatus.RISK, MasteryStatus.IN_PROGRESS, MasteryStatus.MASTERY]
        ranks = [order.index(classify_status(p)) for p in range(0, 101)]

        assert ranks == sorted(ranks)


class TestClassifyActivity:
    def test_absent_last_seen_is_inactive(self, now):
        assert classify_activity(None, now) == ActivityStatus.INACTIVE

    def test_five_days_ago_is_at_risk(self, now):
        assert classify_activity(now - timedelta(days=5), now) == ActivityStatus.AT_RISK

    @pytest.mark.parametrize(
        "elapsed, expected",
        [
            (timedelta(0), ActivityStatus.ACTIVE),
            (timedelta(days=3) - timedelta(seconds=1), ActivityStatus.ACTIVE),
            (timedelta(days=3), ActivityStatus.AT_RISK),
            (timedelta(days=7) - timedelta(seconds=1), ActivityStatus.AT_RISK),
            (timedelta(days=7), ActivityStatus.INACTIVE),
            (timedelta(days=30), ActivityStatus.INACTIVE),
        ],
    )
    def test_window_boundaries(self, now, elapsed, expected):
        assert classify_activity(now - elapsed, now) == expected

    def test_naive_timestamps_are_utc(self, now):
        last_seen = (now - timedelta(days=1)).replace(tzinfo=None)

        assert classify_activity(last_seen, now) == ActivityStatus.ACTIVE


class TestActivityAggregates:
    def test_breakdown_counts_every_bucket(self, make_student, now):
        students = [
            make_student("+34600000001", last_seen_at=now - timedelta(hours=2)),
            make_student("+34600000002", last_seen_at=now - timedelta(days=4)),
            make_student("+34600000003", last_seen_at=now - timedelta(days=10)),
            make_student("+34600000004"),
        ]

        breakdown = activity_breakdown(students, now)

        assert breakdown == {
            ActivityStatus.ACTIVE: 1,
            ActivityStatus.AT_RISK: 1,
            ActivityStatus.INACTIVE: 2,
        }

    def test_breakdown_of_empty_class(self, now):
        assert sum(activity_breakdown([], now).values()) == 0

    def test_active_today_uses_calendar_date(self, make_student):
        now = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)
        students = [
            make_student("+34600000001", last_seen_at=datetime(2026, 3, 10, 0, 5, tzinfo=timezone.utc)),
            make_student("+34600000002", last_seen_at=datetime(2026, 3, 9, 23, 55, tzinfo=timezone.utc)),
            make_student("+34600000003"),
        ]

        assert count_active_today(students, now) == 1
