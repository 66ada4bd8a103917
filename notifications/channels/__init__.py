"""Delivery channel adapters."""

from notifications.channels.base import BaseChannel
from notifications.channels.email import EmailChannel
from notifications.channels.in_app import InAppChannel
from notifications.channels.realtime import RealtimePushChannel

__all__ = ["BaseChannel", "EmailChannel", "InAppChannel", "RealtimePushChannel"]
