"""Base client for downstream service communication."""

from typing import Any

import requests
import structlog

from notifications.exceptions import (
    DownstreamServiceError,
    DownstreamServiceUnavailableError,
)

logger = structlog.get_logger(__name__)


class BaseDownstreamClient:
    """Base class for downstream service HTTP clients."""

    def __init__(
        self,
        service_name: str,
        base_url: str,
        token: str | None = None,
        timeout: float = 10,
    ):
        """Initialize base downstream client.

        Args:
            service_name: Name of the downstream service (for logging/errors)
            base_url: Base URL for the service
            token: Static bearer token sent with every request, if any
            timeout: Request timeout in seconds
        """
        self.service_name = service_name
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _make_request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json_data: dict[str, Any] | None = None,
        **kwargs,
    ) -> requests.Response:
        """Make HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, etc.)
            url: Full URL for the request
            params: Query parameters
            json_data: JSON body data
            **kwargs: Additional arguments to pass to requests

        Returns:
            Response object; 404 responses are returned for the caller to
            interpret.

        Raises:
            DownstreamServiceError: For client errors (4xx except 404)
            DownstreamServiceUnavailableError: For server errors (5xx),
                timeouts and other transport failures
        """
        headers = self._get_headers()
        if "headers" in kwargs:
            headers.update(kwargs.pop("headers"))
        kwargs.setdefault("timeout", self.timeout)

        logger.debug(
            "downstream_request",
            service=self.service_name,
            method=method,
            url=url,
        )

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                **kwargs,
            )
        except requests.Timeout as e:
            logger.error(
                "downstream_request_timeout",
                service=self.service_name,
                url=url,
                timeout=kwargs["timeout"],
            )
            raise DownstreamServiceUnavailableError(
                service_name=self.service_name,
                message=f"{self.service_name} timed out",
            ) from e
        except requests.ConnectionError as e:
            logger.error(
                "downstream_connection_failed",
                service=self.service_name,
                url=url,
                error=str(e),
            )
            raise DownstreamServiceUnavailableError(
                service_name=self.service_name,
                message=f"Could not connect to {self.service_name}",
            ) from e
        except requests.RequestException as e:
            logger.error(
                "downstream_request_failed",
                service=self.service_name,
                url=url,
                error=str(e),
            )
            raise DownstreamServiceUnavailableError(
                service_name=self.service_name,
                message=f"Request to {self.service_name} failed",
            ) from e

        if response.status_code >= 500:
            logger.error(
                "downstream_server_error",
                service=self.service_name,
                status_code=response.status_code,
                response_text=response.text,
            )
            raise DownstreamServiceUnavailableError(
                service_name=self.service_name,
                status_code=response.status_code,
            )

        if response.status_code >= 400 and response.status_code != 404:
            logger.error(
                "downstream_client_error",
                service=self.service_name,
                status_code=response.status_code,
                response_text=response.text,
            )
            raise DownstreamServiceError(
                message=(
                    f"{self.service_name} returned "
                    f"{response.status_code}: {response.text}"
                ),
                service_name=self.service_name,
                status_code=response.status_code,
            )

        return response
