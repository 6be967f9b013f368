from django.test import TestCase, override_settings

from users.models import User


class IndexTest(TestCase):
    def test_index(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b"backend server is running")


class ErrorHandlersTest(TestCase):
    def test_not_found_uses_message_body(self):
        response = self.client.get("/api/posts/424242/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.json(), {"message": "Post matching query does not exist."}
        )

    def test_authentication_error_message(self):
        response = self.client.post(
            "/api/posts/", {"title": "t", "content": "c"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"message": "You need to be authenticated to perform this action."},
        )

    def test_validation_error_lists_errors(self):
        response = self.client.post(
            "/api/users/signup", {"username": "x"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 422)
        self.assertIsInstance(response.json()["message"], list)


class RequestTimingMiddlewareTest(TestCase):
    @override_settings(DEBUG=True)
    def test_logs_timing_when_debug(self):
        with self.assertLogs("forum.middleware", level="INFO") as logs:
            self.client.get("/api/posts/")
        self.assertEqual(len(logs.records), 1)
        self.assertIn("GET /api/posts/ -> 200", logs.output[0])

    def test_silent_without_debug(self):
        User.objects.create_user(
            username="quiet", email="quiet@example.com", password="password123"
        )
        with self.assertNoLogs("forum.middleware", level="INFO"):
            self.client.get("/api/users/quiet")
