"""URL routing configuration for the notifications app."""

from django.urls import path

from .views import (
    DispatchNotificationView,
    FlushDigestsView,
    LivenessCheckView,
    MarkAllNotificationsReadView,
    MarkNotificationReadView,
    NotificationPreferencesView,
    ReadinessCheckView,
    ResetNotificationPreferencesView,
    UnreadCountView,
    UserNotificationDetailView,
    UserNotificationListView,
)

urlpatterns = [
    # Health check endpoints
    path("health/live", LivenessCheckView.as_view(), name="health-live"),
    path("health/ready", ReadinessCheckView.as_view(), name="health-ready"),
    # Service-to-service endpoints
    path(
        "notifications/dispatch",
        DispatchNotificationView.as_view(),
        name="notification-dispatch",
    ),
    path("digests/flush", FlushDigestsView.as_view(), name="digest-flush"),
    # User feed endpoints (specific routes before generic)
    path(
        "users/me/notifications",
        UserNotificationListView.as_view(),
        name="user-notifications",
    ),
    path(
        "users/me/notifications/unread-count",
        UnreadCountView.as_view(),
        name="user-notifications-unread-count",
    ),
    path(
        "users/me/notifications/read-all",
        MarkAllNotificationsReadView.as_view(),
        name="user-notifications-read-all",
    ),
    path(
        "users/me/notifications/<str:notification_id>/read",
        MarkNotificationReadView.as_view(),
        name="user-notification-read",
    ),
    path(
        "users/me/notifications/<str:notification_id>",
        UserNotificationDetailView.as_view(),
        name="user-notification-detail",
    ),
    # Preference endpoints
    path(
        "users/me/notification-preferences",
        NotificationPreferencesView.as_view(),
        name="notification-preferences",
    ),
    path(
        "users/me/notification-preferences/reset",
        ResetNotificationPreferencesView.as_view(),
        name="notification-preferences-reset",
    ),
]
