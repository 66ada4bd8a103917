"""WSGI config for the portal notification engine."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "portal_notifications.settings")

application = get_wsgi_application()
