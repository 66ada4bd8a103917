"""Request id propagation for log correlation."""

import re
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from notifications.constants import REQUEST_ID_HEADER
from notifications.logging.context import clear_request_id, set_request_id

# Caller-supplied ids end up in log lines; anything else is replaced
ACCEPTED_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class RequestIDMiddleware:
    """Tags every request with an id for logs and the response header.

    Portal services pass their own ``X-Request-ID`` so one user action can
    be followed from the web app through dispatch. Missing or malformed
    ids are replaced with a fresh UUID.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = self._request_id_for(request)
        request.request_id = request_id  # type: ignore[attr-defined]
        set_request_id(request_id)
        try:
            response = self.get_response(request)
        finally:
            clear_request_id()
        response[REQUEST_ID_HEADER] = request_id
        return response

    def _request_id_for(self, request: HttpRequest) -> str:
        supplied = request.headers.get(REQUEST_ID_HEADER, "")
        if ACCEPTED_REQUEST_ID.match(supplied):
            return supplied
        return str(uuid.uuid4())
