"""Component tests for POST /digests/flush."""

from unittest.mock import patch

from django.test import Client, TestCase

from notifications.auth.oauth2 import OAuth2User

URL = "/api/v1/notification/digests/flush"


@patch("notifications.auth.oauth2.OAuth2Authentication.authenticate")
class TestDigestFlushEndpoint(TestCase):
    """Manual digest flush for operators."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = Client()

    @patch("notifications.views.digest_scheduler")
    def test_admin_flush(self, mock_scheduler, mock_authenticate):
        mock_authenticate.return_value = (
            OAuth2User("ops", "ops-console", ["notification:admin"]),
            None,
        )
        mock_scheduler.flush_due.return_value = 4

        response = self.client.post(URL)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"deliveredCount": 4})

    @patch("notifications.views.digest_scheduler")
    def test_user_scope_is_forbidden(self, mock_scheduler, mock_authenticate):
        mock_authenticate.return_value = (
            OAuth2User("user_1", "portal-web", ["notification:user"]),
            None,
        )

        response = self.client.post(URL)

        self.assertEqual(response.status_code, 403)
        mock_scheduler.flush_due.assert_not_called()
