"""Custom authentication backends for API."""

from django.conf import settings
from django.middleware.csrf import CsrfViewMiddleware
from rest_framework import exceptions
from rest_framework.request import Request
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError


class CookieJWTAuthentication(JWTAuthentication):
    """JWT auth from the ``Authorization`` header or the HttpOnly access cookie.

    An invalid header token fails with 401. A stale cookie token is treated
    as anonymous so that ``AllowAny`` endpoints such as token refresh keep
    working. Cookie-authenticated requests go through the CSRF check.
    """

    def _enforce_csrf(self, request: Request) -> None:
        django_request = request._request
        csrf_check = CsrfViewMiddleware(lambda req: None)
        csrf_check.process_request(django_request)
        reason = csrf_check.process_view(django_request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")

    def authenticate(self, request: Request):
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
            if raw_token is not None:
                validated_token = self.get_validated_token(raw_token)
                return self.get_user(validated_token), validated_token

        cookie_name = getattr(settings, "JWT_AUTH_COOKIE", "access_token")
        raw_cookie_token = request.COOKIES.get(cookie_name)
        if not raw_cookie_token:
            return None

        try:
            validated_token = self.get_validated_token(raw_cookie_token)
        except (InvalidToken, TokenError):
            return None

        self._enforce_csrf(request)
        return self.get_user(validated_token), validated_token
