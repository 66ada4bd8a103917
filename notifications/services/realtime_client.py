"""HTTP client for the realtime pub/sub publish endpoint."""

from typing import Any

from django.conf import settings

import requests
import structlog

logger = structlog.get_logger(__name__)


class RealtimePublishError(Exception):
    """Raised when the pub/sub endpoint rejects or cannot take a publish.

    Attributes:
        kind: Short label for dispatch warnings (``timeout``,
            ``connection``, ``http-<status>``).
    """

    def __init__(self, kind: str, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


class RealtimeClient:
    """Publishes events to per-user topics on the realtime transport.

    The transport is optional: with no ``REALTIME_PUBLISH_URL`` configured,
    ``is_configured`` is False and callers skip the push.
    """

    def __init__(
        self,
        publish_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
    ):
        self.publish_url = (
            publish_url if publish_url is not None else settings.REALTIME_PUBLISH_URL
        )
        self.token = token if token is not None else settings.REALTIME_PUBLISH_TOKEN
        self.timeout = (
            timeout if timeout is not None else settings.REALTIME_PUBLISH_TIMEOUT
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.publish_url)

    def publish(self, topic: str, event_name: str, payload: dict[str, Any]) -> None:
        """Publish one event to a topic.

        Args:
            topic: Channel name, e.g. ``private-user-<user_id>``.
            event_name: Event name clients subscribe to.
            payload: JSON-serializable event body.

        Raises:
            RealtimePublishError: On timeout, connection failure or a
                non-2xx response.
        """
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        body = {"channel": topic, "event": event_name, "data": payload}

        try:
            response = requests.post(
                self.publish_url,
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            logger.warning(
                "realtime_publish_timeout", topic=topic, timeout=self.timeout
            )
            raise RealtimePublishError("timeout", str(e)) from e
        except requests.ConnectionError as e:
            logger.warning("realtime_publish_connection_failed", topic=topic)
            raise RealtimePublishError("connection", str(e)) from e

        if response.status_code >= 300:
            logger.warning(
                "realtime_publish_rejected",
                topic=topic,
                status_code=response.status_code,
            )
            raise RealtimePublishError(
                f"http-{response.status_code}",
                f"Realtime publish returned {response.status_code}",
            )

        logger.debug("realtime_published", topic=topic, event_name=event_name)
