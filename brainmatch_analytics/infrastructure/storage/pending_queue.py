# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Durable queue of report payloads that could not be delivered.

The queue is a single JSON list stored under a fixed namespace key.
Every backend implements the same three primitives (load, save, clear);
appending is a read-modify-write on top of them.

Backends:
- InMemoryPendingQueue: process-local list, for tests and ephemeral hosts
- FilePendingQueue: ``<directory>/<key>.json`` on local disk
- RedisPendingQueue: a JSON string under ``<key>`` in Redis

Example:
    queue = FilePendingQueue(Path(".analytics"), "ignite_pending_sessions_jsplugin")
    queue.append(payload)
    for pending in queue.load():
        ...
    queue.clear()
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from redis import Redis
from redis.exceptions import RedisError

if TYPE_CHECKING:
    from brainmatch_analytics.core.config.settings import Settings

logger = logging.getLogger(__name__)

Payload = dict[str, Any]


class PendingQueueError(Exception):
    """Exception raised when the pending queue cannot be read or written.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying storage error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


def decode_payloads(raw: Optional[str | bytes], key: str) -> list[Payload]:
    """Decode a stored JSON list; a missing value is an empty queue.

    Raises:
        PendingQueueError: If the stored value is not a JSON list.
    """
    if raw is None or raw == "":
        return []
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PendingQueueError(f"Corrupt pending queue '{key}'", e) from e
    if not isinstance(data, list):
        raise PendingQueueError(f"Pending queue '{key}' is not a list")
    return data


def encode_payloads(payloads: list[Payload]) -> str:
    return json.dumps(payloads, ensure_ascii=False)


class PendingQueue(ABC):
    """Contract of a durable, namespaced list of payloads.

    Attributes:
        key: Namespace the list is stored under.
    """

    def __init__(self, key: str) -> None:
        self.key = key

    @abstractmethod
    def load(self) -> list[Payload]:
        """Read every queued payload, oldest first.

        Raises:
            PendingQueueError: If storage is unavailable or corrupt.
        """

    @abstractmethod
    def save(self, payloads: list[Payload]) -> None:
        """Replace the queued payloads.

        Raises:
            PendingQueueError: If storage is unavailable.
        """

    @abstractmethod
    def clear(self) -> None:
        """Remove the queue entirely.

        Raises:
            PendingQueueError: If storage is unavailable.
        """

    def append(self, payload: Payload) -> None:
        """Add one payload at the end of the queue.

        Raises:
            PendingQueueError: If storage is unavailable or corrupt.
        """
        payloads = self.load()
        payloads.append(payload)
        self.save(payloads)
        logger.debug("Queued payload under %s (%d pending)", self.key, len(payloads))


class InMemoryPendingQueue(PendingQueue):
    """Pending queue kept in process memory."""

    def __init__(self, key: str) -> None:
        super().__init__(key)
        self._raw: Optional[str] = None

    def load(self) -> list[Payload]:
        return decode_payloads(self._raw, self.key)

    def save(self, payloads: list[Payload]) -> None:
        self._raw = encode_payloads(payloads)

    def clear(self) -> None:
        self._raw = None


class FilePendingQueue(PendingQueue):
    """Pending queue stored as a JSON file on local disk.

    Attributes:
        path: File holding the queue, ``<directory>/<key>.json``.
    """

    def __init__(self, directory: Path, key: str) -> None:
        super().__init__(key)
        self.path = Path(directory) / f"{key}.json"

    def load(self) -> list[Payload]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise PendingQueueError(f"Failed to read {self.path}", e) from e
        except UnicodeDecodeError as e:
            raise PendingQueueError(f"Corrupt pending queue file {self.path}", e) from e
        return decode_payloads(raw, self.key)

    def save(self, payloads: list[Payload]) -> None:
        tmp_path = self.path.with_suffix(".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(encode_payloads(payloads), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PendingQueueError(f"Failed to write {self.path}", e) from e

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise PendingQueueError(f"Failed to remove {self.path}", e) from e


class RedisPendingQueue(PendingQueue):
    """Pending queue stored as a JSON string in Redis.

    The client must be created with ``decode_responses=True``.
    """

    def __init__(self, client: Redis, key: str) -> None:
        super().__init__(key)
        self._redis = client

    def load(self) -> list[Payload]:
        try:
            raw = self._redis.get(self.key)
        except RedisError as e:
            raise PendingQueueError(f"Failed to read '{self.key}' from Redis", e) from e
        return decode_payloads(raw, self.key)

    def save(self, payloads: list[Payload]) -> None:
        try:
            self._redis.set(self.key, encode_payloads(payloads))
        except RedisError as e:
            raise PendingQueueError(f"Failed to write '{self.key}' to Redis", e) from e

    def clear(self) -> None:
        try:
            self._redis.delete(self.key)
        except RedisError as e:
            raise PendingQueueError(f"Failed to delete '{self.key}' from Redis", e) from e


def create_pending_queue(settings: "Settings") -> PendingQueue:
    """Build the pending queue backend selected in settings.

    Args:
        settings: Application settings.

    Returns:
        A PendingQueue for ``settings.analytics.queue_backend``.
    """
    analytics = settings.analytics
    key = analytics.pending_queue_key

    if analytics.queue_backend == "redis":
        client = Redis.from_url(settings.redis.url, decode_responses=True)
        return RedisPendingQueue(client, key)
    if analytics.queue_backend == "file":
        return FilePendingQueue(analytics.queue_dir, key)
    return InMemoryPendingQueue(key)
