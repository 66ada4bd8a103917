"""Domain exceptions raised by the notification engine."""


class NotificationError(Exception):
    """Base exception for notification engine errors."""


class NotificationPersistenceError(NotificationError):
    """The canonical notification could not be written.

    This is the only failure that makes a dispatch fail; channel failures
    are reported as warnings instead.
    """

    def __init__(self, user_id: str, reason: str):
        """Initialize persistence error.

        Args:
            user_id: Recipient of the notification that failed to persist.
            reason: Underlying store error description.
        """
        self.user_id = user_id
        super().__init__(f"Failed to persist notification for {user_id}: {reason}")


class PreferenceNotFoundError(NotificationError):
    """No preference record exists for the user."""

    def __init__(self, user_id: str):
        """Initialize preference not found error.

        Args:
            user_id: User whose preferences were requested.
        """
        self.user_id = user_id
        super().__init__(f"Notification preferences for user {user_id} not found")


class NotificationNotFoundError(NotificationError):
    """Notification does not exist or belongs to another user."""

    def __init__(self, notification_id: str):
        """Initialize notification not found error.

        Args:
            notification_id: ID of the notification that was not found.
        """
        self.notification_id = notification_id
        super().__init__(f"Notification with ID {notification_id} not found")
