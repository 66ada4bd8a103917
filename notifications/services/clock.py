"""Clock abstraction so time-dependent policy can be tested."""

from datetime import datetime

from django.utils import timezone


class SystemClock:
    """Clock backed by Django's timezone-aware ``now``."""

    def now(self) -> datetime:
        return timezone.now()

