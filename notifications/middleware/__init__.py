"""Middleware components for the notifications app."""

from notifications.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
