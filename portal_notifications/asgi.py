"""ASGI config for the portal notification engine."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "portal_notifications.settings")

application = get_asgi_application()
