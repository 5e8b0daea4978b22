# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Report delivery: transports and the dispatcher that drives them."""

from brainmatch_analytics.infrastructure.delivery.dispatcher import (
    DeliveryEnvironment,
    DeliveryResult,
    ReportDispatcher,
    parse_handshake,
)
from brainmatch_analytics.infrastructure.delivery.transports import (
    ParentFrameTransport,
    SiteBridgeTransport,
    Transport,
    WebViewTransport,
    resolve_transports,
)

__all__ = [
    "DeliveryEnvironment",
    "DeliveryResult",
    "ParentFrameTransport",
    "ReportDispatcher",
    "SiteBridgeTransport",
    "Transport",
    "WebViewTransport",
    "parse_handshake",
    "resolve_transports",
]
