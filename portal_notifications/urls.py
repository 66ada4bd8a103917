"""URL configuration for the portal notification engine."""

from django.urls import include, path

urlpatterns = [
    path("api/v1/notification/", include("notifications.urls")),
]
