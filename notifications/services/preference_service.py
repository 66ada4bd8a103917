"""Preference store for per-user notification configuration.

Records are created lazily on first access with the category defaults
below. Concurrent first access is resolved through the unique constraint
on ``user_id``: the loser of the insert race re-reads the winner's row.
"""

from typing import Any

from django.db import IntegrityError, transaction

import structlog

from notifications.enums import (
    DigestFrequency,
    NotificationCategory,
    NotificationChannel,
)
from notifications.exceptions import PreferenceNotFoundError
from notifications.models import NotificationPreference
from notifications.schemas.preference import PreferenceUpdateRequest

logger = structlog.get_logger(__name__)


DEFAULT_CATEGORY_CHANNELS: dict[NotificationCategory, list[NotificationChannel]] = {
    NotificationCategory.MESSAGES: [NotificationChannel.BOTH],
    NotificationCategory.INVOICES: [NotificationChannel.BOTH],
    NotificationCategory.PROJECT_UPDATES: [NotificationChannel.BOTH],
    NotificationCategory.MENTIONS: [NotificationChannel.BOTH],
    NotificationCategory.TASKS: [NotificationChannel.IN_APP],
    NotificationCategory.MILESTONES: [NotificationChannel.IN_APP],
    NotificationCategory.GENERAL: [NotificationChannel.IN_APP],
}


def default_preferences() -> dict[str, dict[str, Any]]:
    """Build the default per-category settings stored on a new record."""
    return {
        category.value: {
            "enabled": True,
            "channels": [channel.value for channel in channels],
        }
        for category, channels in DEFAULT_CATEGORY_CHANNELS.items()
    }


# Fields an update may explicitly set back to null
CLEARABLE_FIELDS = frozenset(
    {"quiet_hours_start", "quiet_hours_end", "email_digest_time"}
)


class PreferenceService:
    """Service owning NotificationPreference records."""

    def get_or_create(self, user_id: str) -> NotificationPreference:
        """Return the user's preferences, creating defaults on first access.

        Args:
            user_id: Identity of the user.

        Returns:
            The stored NotificationPreference.
        """
        preference = NotificationPreference.objects.filter(user_id=user_id).first()
        if preference is not None:
            return preference

        try:
            with transaction.atomic():
                preference = NotificationPreference.objects.create(
                    user_id=user_id,
                    is_enabled=True,
                    digest_frequency=DigestFrequency.INSTANT.value,
                    preferences=default_preferences(),
                    quiet_hours_enabled=False,
                )
        except IntegrityError:
            logger.info("preference_create_race_lost", user_id=user_id)
            return NotificationPreference.objects.get(user_id=user_id)

        logger.info("preference_created", user_id=user_id)
        return preference

    def get(self, user_id: str) -> NotificationPreference:
        """Return the user's preferences without creating them.

        Raises:
            PreferenceNotFoundError: If the user has no record.
        """
        try:
            return NotificationPreference.objects.get(user_id=user_id)
        except NotificationPreference.DoesNotExist as e:
            raise PreferenceNotFoundError(user_id=user_id) from e

    def update(
        self, user_id: str, partial: PreferenceUpdateRequest
    ) -> NotificationPreference:
        """Merge a partial update into the user's preferences.

        Only fields present in ``partial`` are written. Category entries are
        merged field by field, so updating ``channels`` keeps ``enabled``.

        Args:
            user_id: Identity of the user.
            partial: Validated update; unknown categories were already
                rejected during validation.

        Returns:
            The updated NotificationPreference.

        Raises:
            PreferenceNotFoundError: If the user has no record.
        """
        changes = partial.model_dump(exclude_unset=True)

        with transaction.atomic():
            try:
                preference = NotificationPreference.objects.select_for_update().get(
                    user_id=user_id
                )
            except NotificationPreference.DoesNotExist as e:
                raise PreferenceNotFoundError(user_id=user_id) from e

            category_changes = changes.pop("preferences", None) or {}
            for field, value in changes.items():
                if value is None and field not in CLEARABLE_FIELDS:
                    continue
                setattr(preference, field, value)

            if category_changes:
                merged = dict(preference.preferences or {})
                for category, setting in category_changes.items():
                    key = getattr(category, "value", category)
                    current = dict(merged.get(key) or {"enabled": True, "channels": []})
                    current.update(
                        {k: v for k, v in setting.items() if v is not None}
                    )
                    merged[key] = current
                preference.preferences = merged

            preference.save()

        logger.info(
            "preference_updated",
            user_id=user_id,
            fields=sorted(partial.model_fields_set),
        )
        return preference

    def reset_to_defaults(self, user_id: str) -> NotificationPreference:
        """Restore default settings and clear quiet hours.

        The digest delivery time and days are kept.

        Raises:
            PreferenceNotFoundError: If the user has no record.
        """
        with transaction.atomic():
            try:
                preference = NotificationPreference.objects.select_for_update().get(
                    user_id=user_id
                )
            except NotificationPreference.DoesNotExist as e:
                raise PreferenceNotFoundError(user_id=user_id) from e

            preference.is_enabled = True
            preference.digest_frequency = DigestFrequency.INSTANT.value
            preference.preferences = default_preferences()
            preference.quiet_hours_enabled = False
            preference.quiet_hours_start = None
            preference.quiet_hours_end = None
            preference.save()

        logger.info("preference_reset", user_id=user_id)
        return preference


# Global service instance
preference_service = PreferenceService()
