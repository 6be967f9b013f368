import logging

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist
from django_ratelimit.exceptions import Ratelimited
from ninja import NinjaAPI, Router
from ninja.errors import AuthenticationError, HttpError, HttpRequest, ValidationError

from posts.api import router as posts_router
from users.api import router as users_general_router
from users.api_auth import router as users_auth_router
from users.services import InvalidCredentials

logger = logging.getLogger(__name__)

api = NinjaAPI(docs_url="docs/", title="Forum API", urls_namespace="api_v1")

"""
Global Exception Handlers (Error Handlers)
"""


@api.exception_handler(AuthenticationError)
def custom_authentication_error_handler(request, exc):
    return api.create_response(
        request,
        {"message": "You need to be authenticated to perform this action."},
        status=401,
    )


@api.exception_handler(InvalidCredentials)
def invalid_credentials_handler(request, exc):
    return api.create_response(request, {"message": str(exc)}, status=401)


@api.exception_handler(HttpError)
def custom_http_error_handler(request, exc):
    return api.create_response(
        request, {"message": exc.message}, status=exc.status_code
    )


@api.exception_handler(ValidationError)
def validation_error_handler(request: HttpRequest, exc: ValidationError):
    return api.create_response(request, {"message": exc.errors}, status=422)


@api.exception_handler(ObjectDoesNotExist)
def object_not_found_handler(request, exc):
    message = exc.args[0] if exc.args else "Not found."
    return api.create_response(request, {"message": message}, status=404)


@api.exception_handler(Ratelimited)
def ratelimited_handler(request, exc):
    return api.create_response(
        request,
        {"message": "Too many requests. Please try again later."},
        status=429,
    )


@api.exception_handler(Exception)
def generic_error_handler(request: HttpRequest, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.path}")
    if settings.DEBUG:
        error_message = str(exc)
    else:
        error_message = "Internal Server Error"

    return api.create_response(request, {"message": error_message}, status=500)


"""
Registering the routers
"""


# Aggregate auth and profile endpoints under one prefix; auth routes go first
# so that "/me" is matched before "/{username}".
users_parent_router = Router()

users_parent_router.add_router("", users_auth_router)
users_parent_router.add_router("", users_general_router)

api.add_router("/users", users_parent_router)
api.add_router("/posts", posts_router)
