"""NotificationPreference model holding per-user delivery configuration."""

from typing import Any

from django.db import models
from django.utils import timezone

from notifications.enums import DigestFrequency


class NotificationPreference(models.Model):
    """Per-user notification preferences.

    ``preferences`` maps every NotificationCategory value to
    ``{"enabled": bool, "channels": [NotificationChannel values]}``.
    All seven categories are populated on creation; a missing key is a data
    integrity problem, not a way of disabling a category.
    """

    user_id = models.CharField(max_length=255, unique=True)
    is_enabled = models.BooleanField(default=True)
    digest_frequency = models.CharField(
        max_length=16,
        choices=[(f.value, f.value) for f in DigestFrequency],
        default=DigestFrequency.INSTANT.value,
    )
    preferences = models.JSONField(default=dict)
    quiet_hours_enabled = models.BooleanField(default=False)
    quiet_hours_start = models.CharField(max_length=5, null=True, blank=True)
    quiet_hours_end = models.CharField(max_length=5, null=True, blank=True)
    email_digest_time = models.CharField(max_length=5, null=True, blank=True)
    email_digest_days = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Django model metadata."""

        db_table = "notification_preferences"
        managed = False

    def __str__(self) -> str:
        """Return string representation of the preference record."""
        return f"Notification preferences for {self.user_id}"

    def category_setting(self, category: str) -> dict[str, Any] | None:
        """Return the stored setting for a category, or None if absent."""
        return (self.preferences or {}).get(category)
