"""Unit tests for start_server module."""

import os
import unittest
from unittest.mock import patch

import start_server


class TestStartServer(unittest.TestCase):
    """Tests for the Gunicorn entry point."""

    @patch.dict(os.environ, {}, clear=True)
    def test_default_arguments(self):
        argv = start_server.build_argv()

        self.assertEqual(argv[1], "portal_notifications.wsgi:application")
        self.assertIn("0.0.0.0:8000", argv)
        self.assertEqual(argv[argv.index("--workers") + 1], "4")

    @patch.dict(os.environ, {"PORT": "9100", "GUNICORN_WORKERS": "2"})
    def test_environment_overrides(self):
        argv = start_server.build_argv()

        self.assertIn("0.0.0.0:9100", argv)
        self.assertEqual(argv[argv.index("--workers") + 1], "2")

    @patch("start_server.run")
    def test_main_runs_gunicorn(self, mock_run):
        with patch.object(start_server.sys, "argv", []):
            start_server.main()
            self.assertEqual(start_server.sys.argv[0], "gunicorn")

        mock_run.assert_called_once_with()
