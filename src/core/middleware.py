"""Core middleware."""
import logging
import time

from django.utils.cache import patch_cache_control

logger = logging.getLogger("crm")

API_PREFIX = "/api/"


class RequestTimingMiddleware:
    """Log method, path, status and duration of every API request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        if request.path.startswith(API_PREFIX):
            logger.debug(
                "%s %s -> %s",
                request.method,
                request.path,
                response.status_code,
                extra={"duration_ms": round((time.monotonic() - started) * 1000, 2)},
            )
        return response


class NoStoreAPIMiddleware:
    """Force no-store headers on API responses."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)
        if request.path.startswith(API_PREFIX):
            patch_cache_control(response, private=True, no_cache=True, no_store=True, max_age=0)
            response["Pragma"] = "no-cache"
        return response
