# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Delivery transports for session report payloads.

This module defines the Transport ABC and one implementation per host
channel. Transports are resolved once, when the delivery environment is
built, from whatever host objects happen to be available:

- SiteBridgeTransport: a site-local analytics object exposing
  ``track_game_session(payload)``
- WebViewTransport: an embedding webview bridge exposing
  ``post_message(json_string)``
- ParentFrameTransport: the parent context exposing
  ``post_message(payload, target_origin)``

A transport signals failure by raising; the dispatcher treats any
exception as "this channel did not deliver".

Usage:
    transports = resolve_transports(
        site_bridge=host.analytics,
        webview=host.webview,
        parent=host.parent,
    )
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

logger = logging.getLogger(__name__)

Payload = dict[str, Any]


class Transport(ABC):
    """Abstract base class for a delivery channel.

    Attributes:
        name: Human-readable channel name used in logs.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the channel name."""

    @abstractmethod
    def send(self, payload: Payload, target_origin: str) -> None:
        """Hand a payload to the channel.

        Args:
            payload: JSON-compatible report payload.
            target_origin: Negotiated parent origin. Only channels that
                post across frames use it.

        Raises:
            Exception: Any failure of the underlying host object.
        """


class SiteBridgeTransport(Transport):
    """Channel backed by a site-local analytics bridge object."""

    METHOD = "track_game_session"

    def __init__(self, bridge: Any) -> None:
        self._bridge = bridge

    @property
    def name(self) -> str:
        return "site_bridge"

    @classmethod
    def supports(cls, bridge: Any) -> bool:
        return bridge is not None and callable(getattr(bridge, cls.METHOD, None))

    def send(self, payload: Payload, target_origin: str) -> None:
        self._bridge.track_game_session(payload)


class WebViewTransport(Transport):
    """Channel backed by an embedding webview's message bridge.

    The webview bridge only accepts strings, so the payload is posted
    as serialized JSON.
    """

    METHOD = "post_message"

    def __init__(self, webview: Any) -> None:
        self._webview = webview

    @property
    def name(self) -> str:
        return "webview"

    @classmethod
    def supports(cls, webview: Any) -> bool:
        return webview is not None and callable(getattr(webview, cls.METHOD, None))

    def send(self, payload: Payload, target_origin: str) -> None:
        self._webview.post_message(json.dumps(payload, ensure_ascii=False))


class ParentFrameTransport(Transport):
    """Channel that posts the payload object to the parent context."""

    METHOD = "post_message"

    def __init__(self, parent: Any) -> None:
        self._parent = parent

    @property
    def name(self) -> str:
        return "parent_frame"

    @classmethod
    def supports(cls, parent: Any) -> bool:
        return parent is not None

    def send(self, payload: Payload, target_origin: str) -> None:
        self._parent.post_message(payload, target_origin)


def resolve_transports(
    site_bridge: Any = None,
    webview: Any = None,
    parent: Any = None,
) -> list[Transport]:
    """Probe host objects once and build the channel list in priority order.

    The parent context is accepted whenever it exists; a missing
    ``post_message`` surfaces as a failed send, the same as any other
    host error.

    Args:
        site_bridge: Site-local analytics object, if the page provides one.
        webview: Embedding webview bridge, if running inside one.
        parent: Parent frame/context, if embedded.

    Returns:
        Available transports: site bridge, webview, parent frame.
    """
    transports: list[Transport] = []

    if SiteBridgeTransport.supports(site_bridge):
        transports.append(SiteBridgeTransport(site_bridge))
    if WebViewTransport.supports(webview):
        transports.append(WebViewTransport(webview))
    if ParentFrameTransport.supports(parent):
        transports.append(ParentFrameTransport(parent))

    logger.info(
        "Resolved delivery transports: %s",
        ", ".join(t.name for t in transports) or "none",
    )
    return transports
