"""Authentication API views with HttpOnly JWT cookies."""

import logging
from datetime import timedelta

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.middleware import csrf
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import ensure_csrf_cookie
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from accounts.services import register_user
from api.v1.serializers import CustomTokenObtainPairSerializer, MeSerializer, RegisterSerializer

logger = logging.getLogger("crm")


class SafeScopedRateThrottle(ScopedRateThrottle):
    """Scoped throttle that falls back to a strict default if scope config is missing."""

    def get_rate(self):
        try:
            return super().get_rate()
        except ImproperlyConfigured:
            logger.warning("Throttle scope '%s' not configured, applying strict default 5/min.", self.scope)
            return "5/min"


def _cookie_max_age(delta: timedelta) -> int:
    return int(delta.total_seconds())


def _set_auth_cookies(response: Response, *, access: str, refresh: str | None) -> None:
    secure = getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG)
    samesite = getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax")
    path = getattr(settings, "JWT_AUTH_COOKIE_PATH", "/")
    domain = getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None)
    access_cookie = getattr(settings, "JWT_AUTH_COOKIE", "access_token")
    refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")

    response.set_cookie(
        key=access_cookie,
        value=access,
        max_age=_cookie_max_age(settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]),
        httponly=True,
        secure=secure,
        samesite=samesite,
        path=path,
        domain=domain,
    )
    if refresh:
        response.set_cookie(
            key=refresh_cookie,
            value=refresh,
            max_age=_cookie_max_age(settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]),
            httponly=True,
            secure=secure,
            samesite=samesite,
            path=path,
            domain=domain,
        )


def _clear_auth_cookies(response: Response) -> None:
    path = getattr(settings, "JWT_AUTH_COOKIE_PATH", "/")
    domain = getattr(settings, "JWT_AUTH_COOKIE_DOMAIN", None)
    response.delete_cookie(getattr(settings, "JWT_AUTH_COOKIE", "access_token"), path=path, domain=domain)
    response.delete_cookie(getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token"), path=path, domain=domain)


def _token_response(user, *, status_code=status.HTTP_200_OK) -> Response:
    """Profile payload plus fresh auth cookies for ``user``."""
    refresh = CustomTokenObtainPairSerializer.get_token(user)
    access = str(refresh.access_token)
    refresh = str(refresh)

    response_data = {"user": MeSerializer(user).data}
    if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
        response_data.update({"access": access, "refresh": refresh})

    response = Response(response_data, status=status_code)
    _set_auth_cookies(response, access=access, refresh=refresh)
    return response


class RegisterAPIView(APIView):
    """Create an account with the default COORDINATOR role and sign it in."""

    permission_classes = [permissions.AllowAny]
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            user = register_user(**serializer.validated_data)
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return _token_response(user, status_code=status.HTTP_201_CREATED)


class CookieTokenObtainPairView(TokenObtainPairView):
    """Issue JWT and set HttpOnly auth cookies."""

    serializer_class = CustomTokenObtainPairSerializer
    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_burst"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated["refresh"]

        response_data = {"user": validated["user"]}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            response_data.update({"access": access, "refresh": refresh})

        response = Response(response_data, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        logger.info("User %s signed in", validated["user"]["id"])
        return response


class CookieTokenRefreshView(TokenRefreshView):
    """Refresh access token using body token or HttpOnly refresh cookie."""

    throttle_classes = [SafeScopedRateThrottle]
    throttle_scope = "auth_sustained"
    permission_classes = [permissions.AllowAny]

    def post(self, request, *args, **kwargs):
        refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        payload = {"refresh": request.data.get("refresh") or request.COOKIES.get(refresh_cookie)}

        serializer = self.get_serializer(data=payload)
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as e:
            raise InvalidToken(e.args[0]) from e
        validated = serializer.validated_data

        access = validated["access"]
        refresh = validated.get("refresh", payload["refresh"])
        response_data = {"detail": "Token refreshed."}
        if getattr(settings, "JWT_RETURN_TOKENS_IN_BODY", False):
            response_data.update({"access": access, "refresh": refresh})

        response = Response(response_data, status=status.HTTP_200_OK)
        _set_auth_cookies(response, access=access, refresh=refresh)
        return response


class LogoutAPIView(APIView):
    """Clear auth cookies and blacklist the refresh token when one is sent."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        refresh_cookie = getattr(settings, "JWT_AUTH_REFRESH_COOKIE", "refresh_token")
        raw_refresh = request.data.get("refresh") or request.COOKIES.get(refresh_cookie)
        if raw_refresh:
            try:
                RefreshToken(raw_refresh).blacklist()
            except TokenError as exc:
                logger.info("Logout with unusable refresh token: %s", exc)

        response = Response(status=status.HTTP_204_NO_CONTENT)
        _clear_auth_cookies(response)
        return response


class MeAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(MeSerializer(request.user).data)


@method_decorator(ensure_csrf_cookie, name="dispatch")
class CSRFTokenAPIView(APIView):
    """Return a CSRF token and ensure CSRF cookie is set."""

    permission_classes = [permissions.AllowAny]

    def get(self, request):
        token = csrf.get_token(request)
        return Response({"csrf_token": token}, status=status.HTTP_200_OK)
