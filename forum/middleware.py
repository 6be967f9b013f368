# middleware file
import logging
import time

from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


class RequestTimingMiddleware:
    """Logs wall-clock and database time per request while DEBUG is on."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if not settings.DEBUG:
            return self.get_response(request)

        start_time = time.perf_counter()
        initial_queries = len(connection.queries)

        response = self.get_response(request)

        total_time = time.perf_counter() - start_time
        queries = connection.queries[initial_queries:]
        db_time = sum(float(q["time"]) for q in queries)

        logger.info(
            "%s %s -> %s | total %.3fs | db %.3fs (%d queries) | app %.3fs",
            request.method,
            request.path,
            response.status_code,
            total_time,
            db_time,
            len(queries),
            total_time - db_time,
        )

        return response
