"""Request schema for dispatching a notification over HTTP."""

from pydantic import ConfigDict

from notifications.schemas.notification.notification_event import NotificationEvent


class DispatchRequest(NotificationEvent):
    """Body of POST /notifications/dispatch.

    Identical to the in-process event descriptor; unknown fields are
    rejected so misspelled options do not silently fall back to defaults.
    """

    model_config = ConfigDict(extra="forbid")
