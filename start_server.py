"""Production server startup script for the portal notification engine.

This module provides the entry point for starting the Django application
with Gunicorn in production environments (Docker containers, Kubernetes).
"""

import os
import sys

from gunicorn.app.wsgiapp import run


def build_argv() -> list[str]:
    """Build the Gunicorn command line from the environment.

    Environment Variables:
    - PORT: Port to bind on 0.0.0.0 (default: 8000)
    - GUNICORN_WORKERS: Worker processes (default: 4)
    - GUNICORN_THREADS: Threads per worker (default: 2)
    - GUNICORN_TIMEOUT: Worker timeout in seconds (default: 60)
    """
    return [
        "gunicorn",
        "portal_notifications.wsgi:application",
        "--bind",
        f"0.0.0.0:{os.getenv('PORT', '8000')}",
        "--workers",
        os.getenv("GUNICORN_WORKERS", "4"),
        "--threads",
        os.getenv("GUNICORN_THREADS", "2"),
        "--timeout",
        os.getenv("GUNICORN_TIMEOUT", "60"),
        "--access-logfile",
        "-",
        "--error-logfile",
        "-",
    ]


def main():
    """Start the notification engine using Gunicorn."""
    sys.argv = build_argv()
    run()


if __name__ == "__main__":
    main()
