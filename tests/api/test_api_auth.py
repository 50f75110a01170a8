import pytest
from django.conf import settings
from rest_framework.test import APIClient
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken

from accounts.models import Role, User

pytestmark = pytest.mark.django_db

ACCESS_COOKIE = settings.JWT_AUTH_COOKIE
REFRESH_COOKIE = settings.JWT_AUTH_REFRESH_COOKIE


def _login(client, email="manager@test.com", password="testpass123"):
    return client.post("/api/v1/auth/token/", {"email": email, "password": password}, format="json")


def test_register_creates_coordinator_and_sets_cookies(roles, firm):
    client = APIClient()
    response = client.post(
        "/api/v1/auth/register/",
        {"email": "new@test.com", "password": "Str0ngPass!", "name": "New Person", "firm_id": str(firm.pk)},
        format="json",
    )
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "new@test.com"
    assert body["user"]["roles"] == [Role.COORDINATOR]
    assert body["user"]["firm_id"] == str(firm.pk)
    assert response.cookies[ACCESS_COOKIE]["httponly"]
    assert response.cookies[REFRESH_COOKIE].value
    assert User.objects.get(email="new@test.com").check_password("Str0ngPass!")


def test_register_duplicate_email_is_400(manager_user):
    response = APIClient().post(
        "/api/v1/auth/register/",
        {"email": "manager@test.com", "password": "Str0ngPass!"},
        format="json",
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email address is already registered"


def test_register_rejects_short_password(roles):
    response = APIClient().post(
        "/api/v1/auth/register/", {"email": "short@test.com", "password": "abc"}, format="json",
    )
    assert response.status_code == 400
    assert "password" in response.json()


def test_login_sets_httponly_cookies_and_claims(manager_user, firm):
    client = APIClient()
    response = _login(client)
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["roles"] == [Role.MANAGER]
    assert body["user"]["firm_name"] == firm.name
    assert response.cookies[ACCESS_COOKIE]["httponly"]
    assert response.cookies[REFRESH_COOKIE]["httponly"]
    assert body["access"]


def test_login_with_wrong_password_is_401(manager_user):
    response = _login(APIClient(), password="wrong")
    assert response.status_code == 401


def test_access_token_authorizes_api_calls(manager_user):
    client = APIClient()
    access = _login(client).json()["access"]

    fresh = APIClient()
    fresh.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    response = fresh.get("/api/v1/influencers/")
    assert response.status_code == 200


def test_invalid_bearer_token_is_401(roles):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
    assert client.get("/api/v1/influencers/").status_code == 401


def test_refresh_reads_cookie(manager_user):
    client = APIClient()
    _login(client)
    response = client.post("/api/v1/auth/token/refresh/", {}, format="json")
    assert response.status_code == 200
    assert response.json()["access"]
    assert response.cookies[ACCESS_COOKIE].value


def test_refresh_without_token_is_400(roles):
    response = APIClient().post("/api/v1/auth/token/refresh/", {}, format="json")
    assert response.status_code == 400


def test_refresh_with_garbage_cookie_is_401(roles):
    client = APIClient()
    client.cookies[REFRESH_COOKIE] = "not-a-jwt"
    response = client.post("/api/v1/auth/token/refresh/", {}, format="json")
    assert response.status_code == 401
    assert response.json()["code"] == "token_not_valid"


def test_logout_blacklists_refresh_and_clears_cookies(manager_user):
    client = APIClient()
    refresh = _login(client).json()["refresh"]

    response = client.post("/api/v1/auth/logout/", {"refresh": refresh}, format="json")
    assert response.status_code == 204
    assert response.cookies[ACCESS_COOKIE].value == ""
    assert BlacklistedToken.objects.count() == 1

    again = APIClient().post("/api/v1/auth/token/refresh/", {"refresh": refresh}, format="json")
    assert again.status_code == 401


def test_logout_with_garbage_token_still_succeeds(roles):
    response = APIClient().post("/api/v1/auth/logout/", {"refresh": "garbage"}, format="json")
    assert response.status_code == 204


def test_me_returns_profile(manager_client, manager_user):
    response = manager_client.get("/api/v1/auth/me/")
    assert response.status_code == 200
    assert response.json()["email"] == manager_user.email
    assert response.json()["roles"] == [Role.MANAGER]


def test_me_requires_authentication(anon_client):
    assert anon_client.get("/api/v1/auth/me/").status_code == 401


def test_csrf_endpoint_returns_token(anon_client):
    response = anon_client.get("/api/v1/auth/csrf/")
    assert response.status_code == 200
    assert response.json()["csrf_token"]
    assert "csrftoken" in response.cookies
