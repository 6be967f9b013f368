"""
Session authentication for forum members: login, signup, current user and
logout.

Every function receives the authentication context explicitly (the request or
its principal). The session itself is owned by Django's session middleware.
"""

import logging
from typing import Mapping, Optional

from django.contrib.auth import authenticate, login, logout
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.http import HttpRequest
from ninja.errors import HttpError

from users.models import User

logger = logging.getLogger(__name__)

DUPLICATE_ACCOUNT_MESSAGE = "Username or email already taken."


class InvalidCredentials(Exception):
    """Raised when the authentication backend rejects a username/password pair."""

    def __init__(self, message="Invalid username or password."):
        super().__init__(message)


def login_user(request: HttpRequest, credentials: Mapping[str, str]) -> User:
    """
    Verify ``credentials`` and bind the resulting user to the request session.

    ``credentials`` holds ``username`` and ``password``. Raises
    ``InvalidCredentials`` when the backend rejects them, leaving the session
    untouched.
    """
    username = credentials.get("username")
    password = credentials.get("password")

    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.info(f"Failed login attempt for username '{username}'")
        raise InvalidCredentials()

    # Stores the user id in the session and rotates the session key.
    login(request, user)
    logger.info(f"User '{user.username}' logged in")
    return user


def signup_user(
    username: str, email: str, password: str, first_name: str = "", last_name: str = ""
) -> User:
    """
    Create a new account when both the username and the email are unused.

    The password must pass ``AUTH_PASSWORD_VALIDATORS`` and is stored hashed.
    Raises ``HttpError(400)`` for a weak password or a duplicate username or
    email without writing anything.
    """
    try:
        validate_password(
            password,
            user=User(
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
            ),
        )
    except ValidationError as e:
        raise HttpError(400, " ".join(e.messages))

    if (
        User.objects.filter(username=username).exists()
        or User.objects.filter(email__iexact=email).exists()
    ):
        raise HttpError(400, DUPLICATE_ACCOUNT_MESSAGE)

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=username,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
    except IntegrityError:
        # Lost a race against a concurrent signup with the same identifiers.
        raise HttpError(400, DUPLICATE_ACCOUNT_MESSAGE)

    logger.info(f"Created account for '{user.username}'")
    return user


def get_current_user(principal: Optional[User]) -> User:
    """
    Resolve the full user record behind an authenticated principal.

    Raises ``HttpError(401)`` when there is no authenticated principal and
    ``HttpError(404)`` when its record no longer exists.
    """
    if principal is None or not principal.is_authenticated:
        raise HttpError(401, "User is not authenticated")

    try:
        return User.objects.get(username=principal.get_username())
    except User.DoesNotExist:
        raise HttpError(404, "User not found")


def logout_user(request: HttpRequest) -> None:
    """Flush the session and reset the request principal to anonymous."""
    user = getattr(request, "user", None)
    username = user.get_username() if user is not None and user.is_authenticated else None

    logout(request)

    if username:
        logger.info(f"User '{username}' logged out")
