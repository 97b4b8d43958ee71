"""Notifications-specific exceptions."""

from __future__ import annotations


class ChannelDeliveryError(Exception):
    """Raised by a channel adapter when a delivery attempt fails.

    Always captured by the dispatcher and recorded on the notification.
    """
