# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the analytics bridge.

All timestamps are timezone-aware UTC. Report timestamps use the
millisecond-precision ``Z``-suffixed form that browser hosts emit
(``2025-01-31T09:15:02.417Z``), so payloads queued by either side
compare and sort the same way.

Usage:
    from brainmatch_analytics.utils.datetime import utc_now_iso

    report.timestamp = utc_now_iso()
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware UTC.

    Naive datetimes are assumed to already be UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_iso_millis(dt: datetime) -> str:
    """Format a datetime as an ISO 8601 string with millisecond precision.

    Args:
        dt: Datetime to format.

    Returns:
        String such as ``2025-01-31T09:15:02.417Z``.
    """
    dt_utc = ensure_utc(dt)
    return dt_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Current UTC time formatted by format_iso_millis()."""
    return format_iso_millis(utc_now())


def epoch_millis() -> int:
    """Milliseconds since the Unix epoch, used for elapsed-time bookkeeping."""
    return time.time_ns() // 1_000_000

