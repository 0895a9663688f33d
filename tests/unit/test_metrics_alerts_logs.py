# -*- coding: utf-8 -*-
"""
Unit тесты для алертов и журнала решений
"""

import pytest

from logicboard.service.metrics import (ALL_TOPICS, alerts_for_student,
                                        distinct_topics, filter_logs_by_topic,
                                        logs_for_student, recent_alerts,
                                        unread_alert_count)

VARIABLES = "Variables y Primitivos"
LOOPS = "Ciclos (for, while)"


class TestAlerts:
    def test_unread_count_drops_by_one_after_acknowledge(self, make_alert):
        alerts = [
            make_alert(1, read=False),
            make_alert(2, read=False),
            make_alert(3, read=True),
        ]
        assert unread_alert_count(alerts) == 2

        acknowledged = [
            alert.model_copy(update={"read": True}) if alert.id == 1 else alert
            for alert in alerts
        ]

        assert unread_alert_count(acknowledged) == 1

    def test_acknowledging_read_alert_changes_nothing(self, make_alert):
        alerts = [make_alert(1, read=True), make_alert(2)]
        acknowledged = [alert.model_copy(update={"read": True}) if alert.id == 1 else alert for alert in alerts]

        assert unread_alert_count(acknowledged) == unread_alert_count(alerts) == 1

    def test_alerts_for_student_keeps_order(self, make_alert):
        alerts = [
            make_alert(3, student_id="+34600000001"),
            make_alert(2, student_id="+34600000002"),
            make_alert(1, student_id="+34600000001"),
        ]

        assert [a.id for a in alerts_for_student(alerts, "+34600000001")] == [3, 1]

    def test_recent_alerts_preview(self, make_alert):
        alerts = [make_alert(i) for i in range(7, 0, -1)]

        assert [a.id for a in recent_alerts(alerts, 5)] == [7, 6, 5, 4, 3]
        assert recent_alerts(alerts, 0) == []


class TestLogs:
    @pytest.fixture
    def logs(self, make_log):
        return [
            make_log(4, topic=LOOPS),
            make_log(3, topic=VARIABLES),
            make_log(2, topic=LOOPS, student_id="+34600000002"),
            make_log(1, topic=VARIABLES),
        ]

    @pytest.mark.parametrize("sentinel", [ALL_TOPICS, "All"])
    def test_sentinel_is_identity(self, logs, sentinel):
        assert filter_logs_by_topic(logs, sentinel) == logs

    def test_exact_topic_match_keeps_order(self, logs):
        assert [log.id for log in filter_logs_by_topic(logs, LOOPS)] == [4, 2]
        assert filter_logs_by_topic(logs, "ciclos (for, while)") == []

    def test_logs_for_student(self, logs):
        assert [log.id for log in logs_for_student(logs, "+34600000001")] == [4, 3, 1]

    def test_distinct_topics_first_seen_with_sentinel_first(self, logs):
        assert distinct_topics(logs) == [ALL_TOPICS, LOOPS, VARIABLES]

    def test_distinct_topics_of_empty_log(self):
        assert distinct_topics([]) == [ALL_TOPICS]
