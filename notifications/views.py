"""API views for the notifications app."""

from uuid import UUID

import structlog
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.auth.oauth2 import OAuth2Authentication
from notifications.constants import (
    ADMIN_SCOPE,
    DEFAULT_LIST_LIMIT,
    MAX_LIST_LIMIT,
    USER_SCOPE,
)
from notifications.schemas.digest import DigestFlushResponse
from notifications.schemas.notification import (
    DispatchRequest,
    MarkAllReadResponse,
    NotificationListResponse,
    UnreadCountResponse,
    UserNotification,
)
from notifications.schemas.preference import (
    PreferenceResponse,
    PreferenceUpdateRequest,
)
from notifications.services.digest_scheduler import digest_scheduler
from notifications.services.dispatcher import notification_dispatcher
from notifications.services.health_service import health_service
from notifications.services.preference_service import preference_service
from notifications.services.read_state_service import read_state_service

logger = structlog.get_logger(__name__)


def _json(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def _scope_denied(request, *scopes: str) -> Response | None:
    """Return a 403 response unless the caller holds one of ``scopes``."""
    if any(request.user.has_scope(scope) for scope in scopes):
        return None

    logger.warning(
        "scope_denied",
        user_id=request.user.user_id,
        scopes=request.user.scopes,
        required=list(scopes),
    )
    return Response(
        {
            "error": "forbidden",
            "message": "You do not have permission to perform this action",
            "detail": f"Requires {' or '.join(scopes)} scope",
        },
        status=status.HTTP_403_FORBIDDEN,
    )


def _parse_notification_id(notification_id: str) -> UUID | None:
    try:
        return UUID(notification_id)
    except ValueError:
        return None


def _invalid_id_response() -> Response:
    return Response(
        {"error": "bad_request", "message": "Invalid notification ID format"},
        status=status.HTTP_400_BAD_REQUEST,
    )


class LivenessCheckView(APIView):
    """Liveness probe endpoint; never checks external dependencies."""

    authentication_classes = ()
    permission_classes = (AllowAny,)

    def get(self, _request):
        liveness = health_service.get_liveness_status()
        return Response(_json(liveness), status=status.HTTP_200_OK)


class ReadinessCheckView(APIView):
    """Readiness probe endpoint.

    Returns 200 with a degraded status when a dependency is down so the
    in-app feed stays available while the dependency recovers.
    """

    authentication_classes = ()
    permission_classes = (AllowAny,)

    def get(self, _request):
        readiness = health_service.get_readiness_status()
        return Response(_json(readiness), status=status.HTTP_200_OK)


class DispatchNotificationView(APIView):
    """Dispatch one notification event on behalf of another service.

    Requires notification:admin scope.
    """

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        """Handle POST request to dispatch a notification.

        Returns:
            201 Created with DispatchResult
            400 Bad Request if validation fails
            403 Forbidden without notification:admin scope
        """
        denied = _scope_denied(request, ADMIN_SCOPE)
        if denied:
            return denied

        event = DispatchRequest.model_validate(request.data)
        result = notification_dispatcher.dispatch(event)

        logger.info(
            "dispatch_request_completed",
            client_id=request.user.client_id,
            notification_id=str(result.notification_id),
            warnings=result.warnings,
        )
        return Response(_json(result), status=status.HTTP_201_CREATED)


class UserNotificationListView(APIView):
    """The authenticated user's notification feed, newest first.

    Query parameters:
    - limit: Maximum number of notifications (default 50, max 100)
    - unreadOnly: 'true' to only list unread notifications
    """

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        try:
            limit = int(request.query_params.get("limit", DEFAULT_LIST_LIMIT))
        except ValueError:
            return Response(
                {
                    "error": "bad_request",
                    "message": "Invalid limit",
                    "detail": "limit must be an integer",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )
        unread_only = request.query_params.get("unreadOnly", "false").lower() == "true"

        notifications = read_state_service.list_notifications(
            request.user.user_id, limit=limit, unread_only=unread_only
        )
        response = NotificationListResponse(
            notifications=[UserNotification.model_validate(n) for n in notifications],
            count=len(notifications),
            limit=max(1, min(limit, MAX_LIST_LIMIT)),
        )
        return Response(_json(response), status=status.HTTP_200_OK)


class UnreadCountView(APIView):
    """Live unread count for the authenticated user."""

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        count = read_state_service.unread_count(request.user.user_id)
        return Response(
            _json(UnreadCountResponse(unread_count=count)), status=status.HTTP_200_OK
        )


class UserNotificationDetailView(APIView):
    """One notification of the authenticated user."""

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request, notification_id):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        notification_uuid = _parse_notification_id(notification_id)
        if notification_uuid is None:
            return _invalid_id_response()

        notification = read_state_service.get_notification(
            notification_uuid, request.user.user_id
        )
        return Response(
            _json(UserNotification.model_validate(notification)),
            status=status.HTTP_200_OK,
        )


class MarkNotificationReadView(APIView):
    """Mark one of the authenticated user's notifications read.

    Marking an already read notification succeeds without changing it.
    """

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request, notification_id):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        notification_uuid = _parse_notification_id(notification_id)
        if notification_uuid is None:
            return _invalid_id_response()

        notification = read_state_service.mark_read(
            notification_uuid, request.user.user_id
        )
        return Response(
            _json(UserNotification.model_validate(notification)),
            status=status.HTTP_200_OK,
        )


class MarkAllNotificationsReadView(APIView):
    """Mark every unread notification of the authenticated user read."""

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        updated = read_state_service.mark_all_read(request.user.user_id)
        return Response(
            _json(MarkAllReadResponse(updated_count=updated)),
            status=status.HTTP_200_OK,
        )


class NotificationPreferencesView(APIView):
    """Read or partially update the authenticated user's preferences.

    GET creates the default preferences on first access. PATCH only
    applies the fields present in the body and never creates a record.
    """

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def get(self, request):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        preference = preference_service.get_or_create(request.user.user_id)
        return Response(
            _json(PreferenceResponse.model_validate(preference)),
            status=status.HTTP_200_OK,
        )

    def patch(self, request):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        partial = PreferenceUpdateRequest.model_validate(request.data)
        preference = preference_service.update(request.user.user_id, partial)
        return Response(
            _json(PreferenceResponse.model_validate(preference)),
            status=status.HTTP_200_OK,
        )


class ResetNotificationPreferencesView(APIView):
    """Restore the authenticated user's default preferences."""

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        denied = _scope_denied(request, USER_SCOPE, ADMIN_SCOPE)
        if denied:
            return denied

        preference = preference_service.reset_to_defaults(request.user.user_id)
        return Response(
            _json(PreferenceResponse.model_validate(preference)),
            status=status.HTTP_200_OK,
        )


class FlushDigestsView(APIView):
    """Send every due digest now. Requires notification:admin scope."""

    authentication_classes = (OAuth2Authentication,)
    permission_classes = (IsAuthenticated,)

    def post(self, request):
        denied = _scope_denied(request, ADMIN_SCOPE)
        if denied:
            return denied

        delivered = digest_scheduler.flush_due()
        return Response(
            _json(DigestFlushResponse(delivered_count=delivered)),
            status=status.HTTP_200_OK,
        )
