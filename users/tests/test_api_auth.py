from django.contrib.auth import SESSION_KEY
from django.core.cache import cache
from django.test import TestCase, override_settings

from users.models import User

SIGNUP_URL = "/api/users/signup"
LOGIN_URL = "/api/users/login"
ME_URL = "/api/users/me"
LOGOUT_URL = "/api/users/logout"


class SignupAPITestCase(TestCase):
    def setUp(self):
        self.payload = {
            "username": "newuser",
            "email": "newuser@example.com",
            "password": "river-Lantern-42",
            "first_name": "New",
            "last_name": "User",
        }

    def signup(self, payload):
        return self.client.post(SIGNUP_URL, payload, content_type="application/json")

    def test_successful_signup(self):
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["message"], "User created successfully")

        user = User.objects.get(username="newuser")
        self.assertEqual(user.email, "newuser@example.com")
        self.assertEqual(user.first_name, "New")
        self.assertTrue(user.is_active)

    def test_password_is_stored_hashed(self):
        self.signup(self.payload)

        user = User.objects.get(username="newuser")
        self.assertNotEqual(user.password, "river-Lantern-42")
        self.assertTrue(user.check_password("river-Lantern-42"))

    def test_names_are_optional(self):
        payload = {
            "username": "plain",
            "email": "plain@example.com",
            "password": "river-Lantern-42",
        }
        response = self.signup(payload)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(User.objects.get(username="plain").first_name, "")

    def test_existing_username(self):
        User.objects.create_user(
            username="newuser", email="existing@example.com", password="pass123"
        )
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Username or email already taken.")
        self.assertEqual(User.objects.filter(username="newuser").count(), 1)

    def test_existing_email(self):
        User.objects.create_user(
            username="existinguser", email="newuser@example.com", password="pass123"
        )
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Username or email already taken.")
        self.assertFalse(User.objects.filter(username="newuser").exists())

    def test_existing_email_different_case(self):
        User.objects.create_user(
            username="existinguser", email="NewUser@Example.com", password="pass123"
        )
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(User.objects.count(), 1)

    def test_invalid_email(self):
        self.payload["email"] = "not-an-email"
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 422)
        self.assertFalse(User.objects.exists())

    def test_missing_password(self):
        del self.payload["password"]
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 422)
        self.assertFalse(User.objects.exists())

    def test_invalid_username_characters(self):
        self.payload["username"] = "bad/name x"
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 422)
        self.assertFalse(User.objects.exists())

    def test_reserved_usernames(self):
        for username in ["me", "login", "signup", "logout", "Me"]:
            self.payload["username"] = username
            self.payload["email"] = f"{username}@example.com"
            response = self.signup(self.payload)
            self.assertEqual(response.status_code, 422, username)
        self.assertFalse(User.objects.exists())

    def test_weak_password(self):
        self.payload["password"] = "pw"
        response = self.signup(self.payload)
        self.assertEqual(response.status_code, 400)
        self.assertIn("too short", response.json()["message"])
        self.assertFalse(User.objects.exists())


class LoginTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.active_user = User.objects.create_user(
            username="activeuser",
            email="active@example.com",
            password="testpass123",
        )
        self.inactive_user = User.objects.create_user(
            username="inactiveuser",
            email="inactive@example.com",
            password="testpass123",
            is_active=False,
        )

    def login(self, username, password):
        return self.client.post(
            LOGIN_URL,
            {"username": username, "password": password},
            content_type="application/json",
        )

    def test_successful_login(self):
        response = self.login("activeuser", "testpass123")
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.content, b"")
        self.assertEqual(self.client.session[SESSION_KEY], str(self.active_user.pk))

    def test_login_sets_session_cookie(self):
        response = self.login("activeuser", "testpass123")
        self.assertIn("sessionid", response.cookies)
        self.assertTrue(response.cookies["sessionid"]["httponly"])

    def test_invalid_password(self):
        response = self.login("activeuser", "wrongpassword")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid username or password.")
        self.assertNotIn(SESSION_KEY, self.client.session)

    def test_unknown_user(self):
        response = self.login("nobody", "testpass123")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid username or password.")

    def test_inactive_account(self):
        response = self.login("inactiveuser", "testpass123")
        self.assertEqual(response.status_code, 401)
        self.assertNotIn(SESSION_KEY, self.client.session)

    def test_missing_fields(self):
        response = self.client.post(
            LOGIN_URL, {"username": "activeuser"}, content_type="application/json"
        )
        self.assertEqual(response.status_code, 422)

    @override_settings(LOGIN_RATE="2/m")
    def test_login_is_rate_limited(self):
        self.assertEqual(self.login("activeuser", "wrong").status_code, 401)
        self.assertEqual(self.login("activeuser", "wrong").status_code, 401)

        response = self.login("activeuser", "testpass123")
        self.assertEqual(response.status_code, 429)
        self.assertEqual(
            response.json()["message"], "Too many requests. Please try again later."
        )

    @override_settings(LOGIN_RATE="1/m", RATELIMIT_ENABLE=False)
    def test_rate_limit_can_be_disabled(self):
        self.assertEqual(self.login("activeuser", "wrong").status_code, 401)
        self.assertEqual(self.login("activeuser", "testpass123").status_code, 204)


class CurrentUserTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="testuser",
            email="testuser@example.com",
            password="testpass123",
            first_name="Test",
            bio="Hello there",
        )

    def test_anonymous(self):
        response = self.client.get(ME_URL)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "User is not authenticated")

    def test_authenticated_returns_full_record(self):
        self.client.force_login(self.user)
        response = self.client.get(ME_URL)
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["id"], self.user.id)
        self.assertEqual(data["username"], "testuser")
        self.assertEqual(data["email"], "testuser@example.com")
        self.assertEqual(data["first_name"], "Test")
        self.assertEqual(data["bio"], "Hello there")
        self.assertNotIn("password", data)

    def test_login_then_me(self):
        cache.clear()
        self.client.post(
            LOGIN_URL,
            {"username": "testuser", "password": "testpass123"},
            content_type="application/json",
        )
        response = self.client.get(ME_URL)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["username"], "testuser")


class LogoutTestCase(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="testuser", email="testuser@example.com", password="testpass123"
        )

    def test_logout_clears_session(self):
        self.client.force_login(self.user)
        self.assertEqual(self.client.get(ME_URL).status_code, 200)

        response = self.client.post(LOGOUT_URL)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Logout successful")
        self.assertNotIn(SESSION_KEY, self.client.session)

        response = self.client.get(ME_URL)
        self.assertEqual(response.status_code, 401)

    def test_logout_when_anonymous(self):
        response = self.client.post(LOGOUT_URL)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["message"], "Logout successful")

    def test_logout_blocks_protected_endpoints(self):
        self.client.force_login(self.user)
        self.client.post(LOGOUT_URL)

        response = self.client.post(
            "/api/posts/",
            {"title": "After logout", "content": "Should fail"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 401)
