"""Errors raised by clients of services the engine depends on."""


class DownstreamServiceError(Exception):
    """A dependency rejected a request or answered with an unusable body.

    Attributes:
        service_name: Dependency that failed, e.g. ``user-directory``.
        status_code: HTTP status, when the failure had one.
    """

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.service_name = service_name
        self.status_code = status_code


class UserNotFoundError(DownstreamServiceError):
    """The user directory has no record of the user."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(
            f"User with ID {user_id} not found",
            service_name="user-directory",
            status_code=404,
        )


class DownstreamServiceUnavailableError(DownstreamServiceError):
    """A dependency could not be reached or answered with a 5xx.

    ``status_code`` is None for timeouts and connection failures.
    """

    def __init__(
        self,
        service_name: str,
        status_code: int | None = None,
        message: str | None = None,
    ):
        if message is None:
            message = f"{service_name} service is unavailable"
            if status_code is not None:
                message = f"{message} (status: {status_code})"
        super().__init__(message, service_name=service_name, status_code=status_code)
