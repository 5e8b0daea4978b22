# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics domain: the session report and its store.

Usage:
    from brainmatch_analytics.domains.analytics import SessionReportStore

    store = SessionReportStore()
    store.initialize("BrainMatch_Flags", session_id)

Wiring of store, queue and dispatcher lives in
``brainmatch_analytics.domains.analytics.service``.
"""

from brainmatch_analytics.domains.analytics.models import (
    Diagnostics,
    LevelEntry,
    LevelStats,
    RawMetric,
    SessionReport,
    TaskEntry,
)
from brainmatch_analytics.domains.analytics.store import (
    SessionReportStore,
    campaign_level_number,
)

__all__ = [
    "Diagnostics",
    "LevelEntry",
    "LevelStats",
    "RawMetric",
    "SessionReport",
    "SessionReportStore",
    "TaskEntry",
    "campaign_level_number",
]
