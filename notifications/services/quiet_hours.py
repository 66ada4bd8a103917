"""Quiet hours evaluation.

Quiet hours are stored as HH:MM wall-clock strings and evaluated in the
server-configured notification time zone (``NOTIFICATION_TIME_ZONE``,
falling back to ``TIME_ZONE``). A window whose end is earlier than its
start wraps past midnight.
"""

from datetime import datetime, time, timezone, tzinfo
from zoneinfo import ZoneInfo

from django.conf import settings

from notifications.models import NotificationPreference


def parse_time_of_day(value: str) -> time:
    """Parse an HH:MM string into a ``time``."""
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def notification_time_zone() -> tzinfo:
    """Return the zone quiet hours are evaluated in."""
    name = getattr(settings, "NOTIFICATION_TIME_ZONE", None) or settings.TIME_ZONE
    if name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


def is_within_window(local_time: time, start: time, end: time) -> bool:
    """Return whether ``local_time`` falls in the half-open window [start, end).

    An empty window (start == end) never matches.
    """
    if start == end:
        return False
    if start < end:
        return start <= local_time < end
    return local_time >= start or local_time < end


def is_quiet_time(preference: NotificationPreference, now: datetime) -> bool:
    """Return whether quiet hours are active for the preference at ``now``."""
    if not preference.quiet_hours_enabled:
        return False
    if not preference.quiet_hours_start or not preference.quiet_hours_end:
        return False

    local_now = now.astimezone(notification_time_zone()).time().replace(
        second=0, microsecond=0
    )
    return is_within_window(
        local_now,
        parse_time_of_day(preference.quiet_hours_start),
        parse_time_of_day(preference.quiet_hours_end),
    )
