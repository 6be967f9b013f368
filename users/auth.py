from typing import Optional

from django.http import HttpRequest
from ninja.errors import HttpError
from ninja.security import SessionAuth

from users.models import User


class SessionUserAuth(SessionAuth):
    """
    Resolves the logged-in user from the Django session cookie.

    Returning ``None`` makes ninja raise ``AuthenticationError`` (401).
    """

    def authenticate(self, request: HttpRequest, key: Optional[str]):
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return None
        if not user.is_active:
            raise HttpError(403, "This account is inactive.")
        return user


# For partially protected endpoints: anonymous readers get None.
def get_optional_user(request: HttpRequest) -> Optional[User]:
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return user
    return None
