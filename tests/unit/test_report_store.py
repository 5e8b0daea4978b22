# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the session report store."""

import logging
import re

import pytest

from brainmatch_analytics.domains.analytics import (
    SessionReportStore,
    campaign_level_number,
)
from brainmatch_analytics.domains.analytics.models import LevelStats, round_half_up
from brainmatch_analytics.domains.analytics.store import stringify

ISO_MILLIS = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.mark.unit
class TestInitialize:
    """Tests for SessionReportStore.initialize."""

    def test_fresh_report_is_empty(self) -> None:
        """Test that a new session has identity and nothing else."""
        store = SessionReportStore()
        store.initialize("G", "S")

        data = store.get_report_data()

        assert data["gameId"] == "G"
        assert data["sessionId"] == "S"
        assert ISO_MILLIS.match(data["timestamp"])
        assert data["xpEarnedTotal"] == 0
        assert data["xpEarned"] == 0
        assert data["xpTotal"] == 0
        assert data["bestXp"] == 0
        assert data["lastPlayedLevel"] == ""
        assert data["highestLevelPlayed"] == ""
        assert data["perLevelAnalytics"] == {}
        assert data["rawData"] == []
        assert data["diagnostics"] == {"levels": []}

    def test_reinitialize_replaces_everything(self, store: SessionReportStore) -> None:
        """Test that a second initialize discards prior state and identity."""
        store.start_level("campaign_level_1")
        store.end_level("campaign_level_1", True, 1000, 50)
        store.add_raw_metric("turns", 3)

        store.initialize("G2", "S2")
        data = store.get_report_data()

        assert data["gameId"] == "G2"
        assert data["sessionId"] == "S2"
        assert data["xpEarnedTotal"] == 0
        assert data["diagnostics"]["levels"] == []
        assert data["rawData"] == []
        assert data["perLevelAnalytics"] == {}

    def test_is_initialized_flag(self) -> None:
        store = SessionReportStore()
        assert store.is_initialized is False

        store.initialize("G", "S")

        assert store.is_initialized is True


@pytest.mark.unit
class TestUninitializedStore:
    """Tests that mutations before initialize are ignored with a warning."""

    def test_mutations_are_noops(self, caplog: pytest.LogCaptureFixture) -> None:
        store = SessionReportStore()

        with caplog.at_level(logging.WARNING):
            store.start_level("campaign_level_1")
            store.record_task("campaign_level_1", "t", "q", "a", "a", 0, 0)
            store.end_level("campaign_level_1", True, 100, 10)
            store.add_raw_metric("turns", 1)

        data = store.get_report_data()
        assert data["diagnostics"]["levels"] == []
        assert data["rawData"] == []
        assert data["xpEarnedTotal"] == 0
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 4


@pytest.mark.unit
class TestLevels:
    """Tests for start_level, record_task and end_level."""

    def test_start_level_appends_pending_entry(self, store: SessionReportStore) -> None:
        store.start_level("campaign_level_1")

        levels = store.get_report_data()["diagnostics"]["levels"]

        assert levels == [
            {
                "levelId": "campaign_level_1",
                "successful": False,
                "timeTaken": 0,
                "xpEarned": 0,
                "tasks": [],
            }
        ]

    def test_tasks_are_recorded_in_order(self, store: SessionReportStore) -> None:
        """Test a start -> n tasks -> end sequence."""
        store.start_level("campaign_level_2")
        store.record_task("campaign_level_2", "task_1", "Match: cat", "cat", "cat", 120, 5)
        store.record_task("campaign_level_2", "task_2", "Match: dog", "dog", "cow", 80, 0)
        store.record_task("campaign_level_2", "task_3", "Match: owl", "owl", "owl", 60, 5)
        store.end_level("campaign_level_2", False, 9000, 10)

        level = store.get_report_data()["diagnostics"]["levels"][0]

        assert [t["taskId"] for t in level["tasks"]] == ["task_1", "task_2", "task_3"]
        assert [t["successful"] for t in level["tasks"]] == [True, False, True]
        assert level["tasks"][1] == {
            "taskId": "task_2",
            "question": "Match: dog",
            "correctChoice": "dog",
            "choiceMade": "cow",
            "successful": False,
            "timeTaken": 80,
            "xpEarned": 0,
        }
        assert level["successful"] is False
        assert level["timeTaken"] == 9000
        assert level["xpEarned"] == 10

    def test_repeat_attempt_creates_new_entry(self, store: SessionReportStore) -> None:
        """Test that tasks and outcomes go to the newest attempt of a level."""
        store.start_level("reflex_mode")
        store.record_task("reflex_mode", "task_1", "Match: a", "a", "a", 0, 0)
        store.end_level("reflex_mode", False, 3000, 0)

        store.start_level("reflex_mode")
        store.record_task("reflex_mode", "task_1", "Match: b", "b", "b", 0, 0)
        store.record_task("reflex_mode", "task_2", "Match: c", "c", "c", 0, 0)
        store.end_level("reflex_mode", True, 2000, 0)

        levels = store.get_report_data()["diagnostics"]["levels"]

        assert len(levels) == 2
        assert len(levels[0]["tasks"]) == 1
        assert levels[0]["successful"] is False
        assert len(levels[1]["tasks"]) == 2
        assert levels[1]["successful"] is True

    def test_non_string_choices_are_compared_then_stringified(
        self, store: SessionReportStore
    ) -> None:
        store.start_level("campaign_level_2")
        store.record_task("campaign_level_2", "task_1", "Match: 3", 3, 3, 0, 0)
        store.record_task("campaign_level_2", "task_2", "Match: 4", 4, "4", 0, 0)
        store.record_task("campaign_level_2", "task_3", None, 5.0, None, 0, 0)

        tasks = store.get_report_data()["diagnostics"]["levels"][0]["tasks"]

        assert [(t["correctChoice"], t["choiceMade"], t["successful"]) for t in tasks] == [
            ("3", "3", True),
            ("4", "4", False),
            ("5", "null", False),
        ]
        assert tasks[2]["question"] == "null"

    def test_unknown_level_is_ignored(
        self, store: SessionReportStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            store.end_level("campaign_level_9", True, 100, 10)
            store.record_task("campaign_level_9", "t", "q", "a", "a", 0, 0)

        data = store.get_report_data()
        assert data["xpEarnedTotal"] == 0
        assert data["perLevelAnalytics"] == {}
        assert data["lastPlayedLevel"] == ""
        assert "unknown level: campaign_level_9" in caplog.text


@pytest.mark.unit
class TestPerLevelAnalytics:
    """Tests for the rolling per-level statistics."""

    def test_end_level_twice_updates_latest_attempt(self, store: SessionReportStore) -> None:
        """Test that repeated end_level calls accumulate attempts and keep the best time."""
        store.start_level("campaign_level_1")
        store.end_level("campaign_level_1", False, 7000, 0)
        store.end_level("campaign_level_1", True, 4000, 100)

        data = store.get_report_data()
        stats = data["perLevelAnalytics"]["campaign_level_1"]

        assert len(data["diagnostics"]["levels"]) == 1
        assert data["diagnostics"]["levels"][0]["timeTaken"] == 4000
        assert stats == {
            "attempts": 2,
            "wins": 1,
            "losses": 1,
            "totalTimeMs": 11000,
            "bestTimeMs": 4000,
            "totalXp": 100,
            "averageTimeMs": 5500,
        }

    def test_best_time_is_minimum(self, store: SessionReportStore) -> None:
        for time_ms in (5000, 3000, 8000):
            store.start_level("campaign_level_4")
            store.end_level("campaign_level_4", True, time_ms, 10)

        stats = store.get_report_data()["perLevelAnalytics"]["campaign_level_4"]

        assert stats["bestTimeMs"] == 3000
        assert stats["attempts"] == 3
        assert stats["averageTimeMs"] == 5333

    def test_average_rounds_half_up(self, store: SessionReportStore) -> None:
        store.start_level("reflex_mode")
        store.end_level("reflex_mode", True, 1, 0)
        store.start_level("reflex_mode")
        store.end_level("reflex_mode", True, 2, 0)

        stats = store.get_report_data()["perLevelAnalytics"]["reflex_mode"]

        assert stats["averageTimeMs"] == 2

    def test_new_stats_start_with_infinite_best_time(self) -> None:
        assert LevelStats().best_time_ms == float("inf")

    def test_round_half_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4) == 2
        assert round_half_up(5333.33) == 5333


@pytest.mark.unit
class TestSessionTotals:
    """Tests for XP totals and level bookkeeping."""

    def test_xp_aliases_track_running_total(self, store: SessionReportStore) -> None:
        store.start_level("campaign_level_1")
        store.end_level("campaign_level_1", True, 5000, 100)
        store.start_level("campaign_level_2")
        store.end_level("campaign_level_2", True, 6000, 75)

        data = store.get_report_data()

        assert data["xpEarnedTotal"] == 175
        assert data["xpEarned"] == 175
        assert data["xpTotal"] == 175
        assert data["bestXp"] == 175

    def test_highest_level_keeps_numeric_maximum(self, store: SessionReportStore) -> None:
        store.start_level("campaign_level_5")
        store.end_level("campaign_level_5", True, 1000, 10)
        store.start_level("campaign_level_3")
        store.end_level("campaign_level_3", True, 1000, 10)

        data = store.get_report_data()

        assert data["highestLevelPlayed"] == "campaign_level_5"
        assert data["lastPlayedLevel"] == "campaign_level_3"

    def test_highest_level_compares_numbers_not_strings(
        self, store: SessionReportStore
    ) -> None:
        store.start_level("campaign_level_9")
        store.end_level("campaign_level_9", True, 1000, 10)
        store.start_level("campaign_level_10")
        store.end_level("campaign_level_10", True, 1000, 10)

        assert store.get_report_data()["highestLevelPlayed"] == "campaign_level_10"

    def test_non_campaign_level_only_fills_empty_highest(
        self, store: SessionReportStore
    ) -> None:
        store.start_level("reflex_mode")
        store.end_level("reflex_mode", True, 1000, 0)
        assert store.get_report_data()["highestLevelPlayed"] == "reflex_mode"

        store.start_level("campaign_level_1")
        store.end_level("campaign_level_1", True, 1000, 10)
        assert store.get_report_data()["highestLevelPlayed"] == "campaign_level_1"

        store.start_level("reflex_mode")
        store.end_level("reflex_mode", True, 1000, 0)
        data = store.get_report_data()
        assert data["highestLevelPlayed"] == "campaign_level_1"
        assert data["lastPlayedLevel"] == "reflex_mode"

    def test_campaign_level_number(self) -> None:
        assert campaign_level_number("campaign_level_12") == 12
        assert campaign_level_number("reflex_mode") is None
        assert campaign_level_number("") is None


@pytest.mark.unit
class TestRawMetrics:
    """Tests for add_raw_metric."""

    def test_values_are_stringified_and_duplicates_kept(
        self, store: SessionReportStore
    ) -> None:
        store.add_raw_metric("turns", 8)
        store.add_raw_metric("turns", "9")
        store.add_raw_metric("fps", 59.5)

        assert store.get_report_data()["rawData"] == [
            {"key": "turns", "value": "8"},
            {"key": "turns", "value": "9"},
            {"key": "fps", "value": "59.5"},
        ]

    def test_stringify(self) -> None:
        assert stringify(True) == "true"
        assert stringify(None) == "null"
        assert stringify(3.0) == "3"
        assert stringify("x") == "x"


@pytest.mark.unit
class TestSnapshotsAndReset:
    """Tests for get_report_data and reset."""

    def test_snapshots_are_independent(self, store: SessionReportStore) -> None:
        store.start_level("campaign_level_1")
        store.end_level("campaign_level_1", True, 5000, 100)

        first = store.get_report_data()
        second = store.get_report_data()

        assert first == second
        assert first is not second

        first["diagnostics"]["levels"].clear()
        first["perLevelAnalytics"]["campaign_level_1"]["attempts"] = 99
        first["gameId"] = "changed"

        assert store.get_report_data() == second

    def test_reset_keeps_identity(self, store: SessionReportStore) -> None:
        store.start_level("campaign_level_1")
        store.end_level("campaign_level_1", True, 5000, 100)
        store.add_raw_metric("turns", 8)

        store.reset()
        data = store.get_report_data()

        assert store.is_initialized is True
        assert data["gameId"] == "G"
        assert data["sessionId"] == "S"
        assert data["xpEarnedTotal"] == 0
        assert data["bestXp"] == 0
        assert data["lastPlayedLevel"] == ""
        assert data["highestLevelPlayed"] == ""
        assert data["perLevelAnalytics"] == {}
        assert data["rawData"] == []
        assert data["diagnostics"]["levels"] == []

        store.start_level("campaign_level_2")
        assert len(store.get_report_data()["diagnostics"]["levels"]) == 1
