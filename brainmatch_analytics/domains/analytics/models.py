# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Data models for the session report.

This module defines the Pydantic models that make up a session report:
- TaskEntry: one scored action inside a level attempt
- LevelEntry: one level attempt with its tasks
- LevelStats: rolling per-level aggregates
- RawMetric: a free-form key/value metric
- SessionReport: the whole report-in-progress

Python attributes are snake_case; the wire format produced by
``model_dump(by_alias=True)`` uses the camelCase field names the
host applications consume (``xpEarnedTotal``, ``perLevelAnalytics``...).
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Times are milliseconds, XP is whatever the game awards; both keep the
# numeric type the caller passed so integers stay integers on the wire.
Number = int | float


class ReportModel(BaseModel):
    """Base model with camelCase wire aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TaskEntry(ReportModel):
    """A single scored action within a level attempt.

    Attributes:
        task_id: Task identifier, unique within its level attempt.
        question: Prompt shown to the player.
        correct_choice: Expected answer.
        choice_made: Answer the player gave.
        successful: Whether choice_made equals correct_choice.
        time_taken: Time spent on the task in milliseconds.
        xp_earned: XP awarded for the task.
    """

    task_id: str
    question: str
    correct_choice: str
    choice_made: str
    successful: bool
    time_taken: Number = 0
    xp_earned: Number = 0


class LevelEntry(ReportModel):
    """One attempt at a level.

    Created by ``start_level`` with a failed, zero-time outcome and
    completed in place by ``end_level``.
    """

    level_id: str
    successful: bool = False
    time_taken: Number = 0
    xp_earned: Number = 0
    tasks: list[TaskEntry] = Field(default_factory=list)


class LevelStats(ReportModel):
    """Aggregate statistics for every completed attempt of one level.

    Attributes:
        attempts: Number of completed attempts.
        wins: Successful attempts.
        losses: Failed attempts.
        total_time_ms: Sum of attempt times.
        best_time_ms: Fastest attempt; infinity until the first attempt.
        total_xp: Sum of XP awarded across attempts.
        average_time_ms: total_time_ms / attempts, rounded.
    """

    attempts: int = 0
    wins: int = 0
    losses: int = 0
    total_time_ms: Number = 0
    best_time_ms: Number = math.inf
    total_xp: Number = 0
    average_time_ms: int = 0

    def record_attempt(self, successful: bool, time_taken_ms: Number, xp: Number) -> None:
        """Fold one completed attempt into the aggregates."""
        self.attempts += 1
        if successful:
            self.wins += 1
        else:
            self.losses += 1
        self.total_time_ms += time_taken_ms
        self.total_xp += xp

        if time_taken_ms < self.best_time_ms:
            self.best_time_ms = time_taken_ms

        self.average_time_ms = round_half_up(self.total_time_ms / self.attempts)


class RawMetric(ReportModel):
    """A generic key/value metric; values are always strings."""

    key: str
    value: str


class Diagnostics(ReportModel):
    """Per-attempt history of the session."""

    levels: list[LevelEntry] = Field(default_factory=list)


class SessionReport(ReportModel):
    """The report-in-progress for one game session.

    ``xp_earned``, ``xp_total`` and ``best_xp`` are kept equal to
    ``xp_earned_total``; consumers read whichever name they were built
    against.
    """

    game_id: str = ""
    session_id: str = ""
    timestamp: str = ""
    xp_earned_total: Number = 0
    xp_earned: Number = 0
    xp_total: Number = 0
    best_xp: Number = 0
    last_played_level: str = ""
    highest_level_played: str = ""
    per_level_analytics: dict[str, LevelStats] = Field(default_factory=dict)
    raw_data: list[RawMetric] = Field(default_factory=list)
    diagnostics: Diagnostics = Field(default_factory=Diagnostics)

    def add_xp(self, xp: Number) -> None:
        """Increase the running XP total and its aliases."""
        self.xp_earned_total += xp
        self.xp_earned = self.xp_earned_total
        self.xp_total = self.xp_earned_total
        self.best_xp = self.xp_earned_total

    def to_payload(self) -> dict[str, Any]:
        """Serialize to an independent, JSON-compatible wire payload."""
        return self.model_dump(mode="json", by_alias=True)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""
    return math.floor(value + 0.5)
