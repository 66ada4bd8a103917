"""Client for the portal user directory."""

from django.conf import settings

import structlog
from pydantic import ValidationError

from notifications.exceptions import DownstreamServiceError, UserNotFoundError
from notifications.schemas.user import RecipientContact
from notifications.services.downstream.base_downstream_client import (
    BaseDownstreamClient,
)

logger = structlog.get_logger(__name__)


class UserClient(BaseDownstreamClient):
    """Resolves user identities to contact details."""

    def __init__(self, base_url: str | None = None, token: str | None = None):
        super().__init__(
            service_name="user-directory",
            base_url=base_url or settings.USER_DIRECTORY_BASE_URL,
            token=token if token is not None else settings.USER_DIRECTORY_TOKEN,
            timeout=settings.USER_DIRECTORY_TIMEOUT,
        )

    def get_contact(self, user_id: str) -> RecipientContact:
        """Fetch the contact details of a user.

        Args:
            user_id: Opaque identity of the user

        Returns:
            RecipientContact with the user's email and display name

        Raises:
            UserNotFoundError: If the directory does not know the user
            DownstreamServiceError: For other client errors or a malformed body
            DownstreamServiceUnavailableError: If the directory is unavailable
        """
        url = f"{self.base_url}/users/{user_id}"
        response = self._make_request("GET", url)

        if response.status_code == 404:
            logger.warning("user_not_found", user_id=user_id)
            raise UserNotFoundError(user_id=user_id)

        try:
            data = response.json()
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            data.setdefault("userId", user_id)
            return RecipientContact.model_validate(data)
        except (ValueError, ValidationError) as e:
            logger.error(
                "user_contact_invalid",
                user_id=user_id,
                error=str(e),
            )
            raise DownstreamServiceError(
                message=f"Malformed user directory response for {user_id}",
                service_name=self.service_name,
            ) from e
