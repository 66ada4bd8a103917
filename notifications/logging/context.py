"""Request-scoped logging context.

The request id lives in a ContextVar rather than thread-local storage so
that dispatch fan-out threads, which run inside a copy of the caller's
context, log under the same request id as the request that started them.
"""

from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    """Return the request id of the current context, if any."""
    return _request_id.get()


def clear_request_id() -> None:
    _request_id.set(None)
