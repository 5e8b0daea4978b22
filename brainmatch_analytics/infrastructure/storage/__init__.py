# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Durable storage for undelivered report payloads."""

from brainmatch_analytics.infrastructure.storage.pending_queue import (
    FilePendingQueue,
    InMemoryPendingQueue,
    Payload,
    PendingQueue,
    PendingQueueError,
    RedisPendingQueue,
    create_pending_queue,
)

__all__ = [
    "FilePendingQueue",
    "InMemoryPendingQueue",
    "Payload",
    "PendingQueue",
    "PendingQueueError",
    "RedisPendingQueue",
    "create_pending_queue",
]
