# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from brainmatch_analytics.utils.datetime import (
    ensure_utc,
    epoch_millis,
    format_iso_millis,
    utc_now,
    utc_now_iso,
)
from brainmatch_analytics.utils.logging import (
    bind_context,
    clear_context,
    setup_logging,
)

__all__ = [
    # Logging
    "setup_logging",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "format_iso_millis",
    "utc_now_iso",
    "epoch_millis",
]
