"""
Common schemas shared by the apps
"""

from typing import Optional

from ninja import Schema

from users.models import User


class Message(Schema):
    message: str


class AuthorOut(Schema):
    id: int
    username: str

    @staticmethod
    def from_model(user: User):
        return AuthorOut(id=user.id, username=user.username)


class Pagination(Schema):
    total: int
    page: int
    per_page: int
    num_pages: int
    next_page: Optional[int] = None
