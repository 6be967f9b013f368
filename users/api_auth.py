"""
This file contains the API endpoints related to session authentication.
"""

from django.conf import settings
from django.http import HttpRequest
from django_ratelimit.decorators import ratelimit
from ninja import Router
from ninja.responses import codes_4xx

from forum.schemas import Message
from users import services
from users.schemas import LogInSchemaIn, UserCreateSchema, UserOut

router = Router(tags=["Users Auth"])


def login_rate(group, request):
    return settings.LOGIN_RATE


@router.post("/signup", response={201: Message, codes_4xx: Message})
def signup(request: HttpRequest, payload: UserCreateSchema):
    services.signup_user(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    return 201, {"message": "User created successfully"}


@router.post("/login", response={204: None, codes_4xx: Message})
@ratelimit(key="ip", rate=login_rate, method="POST", block=True)
def login(request: HttpRequest, payload: LogInSchemaIn):
    # Invalid credentials propagate as InvalidCredentials (401 via the API handler).
    services.login_user(request, payload.dict())
    return 204, None


@router.get("/me", response={200: UserOut, codes_4xx: Message})
def get_me(request: HttpRequest):
    return 200, services.get_current_user(getattr(request, "user", None))


@router.post("/logout", response={200: Message})
def logout(request: HttpRequest):
    services.logout_user(request)
    return 200, {"message": "Logout successful"}
