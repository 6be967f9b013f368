"""
This module defines the input and output schemas for user authentication actions
and other user-related actions.
"""

from datetime import datetime
from typing import List, Optional

from django.contrib.auth.validators import UnicodeUsernameValidator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from ninja import Field, ModelSchema, Schema
from pydantic import field_validator

from forum.schemas import Pagination
from users.models import User

"""
Users's Authentication Schemas
"""

# Path segments of the auth routes, which share the /api/users prefix with profiles.
RESERVED_USERNAMES = {"me", "login", "logout", "signup"}


class UserCreateSchema(Schema):
    """
    Input schema for creating a new user. Requires username, email and
    password; names are optional.
    """

    username: str = Field(..., min_length=1, max_length=150)
    email: str
    password: str = Field(..., min_length=1)
    first_name: str = ""
    last_name: str = ""

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        try:
            UnicodeUsernameValidator()(value)
        except DjangoValidationError:
            raise ValueError(
                "Enter a valid username. Use letters, numbers and @/./+/-/_ only."
            )
        if value.lower() in RESERVED_USERNAMES:
            raise ValueError(f"The username '{value}' is reserved.")
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        try:
            validate_email(value)
        except DjangoValidationError:
            raise ValueError("Enter a valid email address.")
        return value


class LogInSchemaIn(Schema):
    username: str
    password: str


class UserOut(ModelSchema):
    """
    The signed-in user's own record. The password hash is never exposed.
    """

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "bio",
            "date_joined",
        ]


"""
Public Profile Schemas
"""


class UserProfileOut(Schema):
    id: int
    username: str
    first_name: str
    last_name: str
    bio: Optional[str] = None
    date_joined: datetime
    posts_count: int

    @staticmethod
    def resolve_profile(user: User):
        return {
            "id": user.id,
            "username": user.username,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "bio": user.bio,
            "date_joined": user.date_joined,
            "posts_count": user.posts.count(),
        }


class UserPostSummary(Schema):
    id: int
    title: str
    created_at: datetime
    likes_count: int
    comments_count: int


class PaginatedUserPostsResponse(Pagination):
    items: List[UserPostSummary]
