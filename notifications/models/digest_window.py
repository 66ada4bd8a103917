"""DigestWindow model for email digest batching."""

from typing import ClassVar

from django.db import models
from django.db.models import Q
from django.utils import timezone

from notifications.enums import DigestFrequency


class DigestWindow(models.Model):
    """A digest period for one user and frequency.

    The window only records its boundaries; member notifications are found
    at flush time from the user's pending digest deliveries. At most one
    undelivered window may exist per (user_id, frequency).

    Attributes:
        user_id: Recipient of the digest.
        frequency: DigestFrequency value the window was opened for.
        window_start: Start of the window.
        window_end: When the window becomes due for flushing.
        claimed_at: Set while a flush is sending the digest.
        delivered_at: Set once the digest was sent; never cleared.
    """

    user_id = models.CharField(max_length=255)
    frequency = models.CharField(
        max_length=16,
        choices=[(f.value, f.value) for f in DigestFrequency],
    )
    window_start = models.DateTimeField()
    window_end = models.DateTimeField()
    claimed_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        """Django model metadata."""

        db_table = "digest_windows"
        managed = False
        ordering: ClassVar[list[str]] = ["window_end"]
        constraints: ClassVar[list] = [
            models.UniqueConstraint(
                fields=["user_id", "frequency"],
                condition=Q(delivered_at__isnull=True),
                name="uniq_open_digest_window",
            ),
        ]
        indexes: ClassVar[list] = [
            models.Index(fields=["delivered_at", "window_end"]),
        ]

    def __str__(self) -> str:
        """Return string representation of the window."""
        return (
            f"{self.frequency} digest for {self.user_id} "
            f"({self.window_start:%Y-%m-%d %H:%M} - {self.window_end:%Y-%m-%d %H:%M})"
        )

    @property
    def is_delivered(self) -> bool:
        """Whether the digest for this window has been sent."""
        return self.delivered_at is not None
