import uuid

import pytest
from rest_framework.exceptions import NotAuthenticated, PermissionDenied

from accounts.models import Role
from api.v1.permissions import (
    FIRM_CONTEXT_REQUIRED,
    FIRM_ID_REQUIRED,
    INSUFFICIENT_ROLE,
    OTHER_FIRM,
    CallerClaims,
    RoleScopePermission,
    Scope,
    caller_claims,
    check_role_scope,
    resolve_scoped_firm_id,
)

FIRM_A = str(uuid.uuid4())
FIRM_B = str(uuid.uuid4())


def _caller(*roles, firm_id=FIRM_A):
    return CallerClaims(user_id="u-1", firm_id=firm_id, roles=frozenset(roles))


def _denied_with(message, **kwargs):
    with pytest.raises(PermissionDenied) as excinfo:
        check_role_scope(**kwargs)
    assert str(excinfo.value.detail) == message


# ---------------------------------------------------------------------------
# check_role_scope decision sequence
# ---------------------------------------------------------------------------

def test_route_without_required_roles_allows_anonymous():
    check_role_scope(required_roles=(), scope=Scope.FIRM, caller=None)


def test_missing_identity_is_unauthenticated():
    with pytest.raises(NotAuthenticated):
        check_role_scope(required_roles=(Role.ADMIN,), scope=None, caller=None)


def test_role_mismatch_is_forbidden():
    _denied_with(
        INSUFFICIENT_ROLE,
        required_roles=(Role.ADMIN,),
        scope=None,
        caller=_caller(Role.COORDINATOR),
    )


@pytest.mark.parametrize("scope", [None, Scope.GLOBAL])
def test_global_scope_allows_matching_role_without_firm(scope):
    check_role_scope(
        required_roles=(Role.MANAGER,),
        scope=scope,
        caller=_caller(Role.MANAGER, firm_id=None),
    )


def test_scoped_route_requires_caller_firm():
    _denied_with(
        FIRM_CONTEXT_REQUIRED,
        required_roles=(Role.MANAGER,),
        scope=Scope.FIRM,
        caller=_caller(Role.MANAGER, firm_id=None),
        params={"firm_id": FIRM_A},
    )


def test_scoped_route_requires_firm_identifier():
    _denied_with(
        FIRM_ID_REQUIRED,
        required_roles=(Role.MANAGER,),
        scope=Scope.FIRM,
        caller=_caller(Role.MANAGER),
        params={},
        body={},
        query={},
    )


def test_other_firm_is_forbidden():
    _denied_with(
        OTHER_FIRM,
        required_roles=(Role.MANAGER,),
        scope=Scope.FIRM,
        caller=_caller(Role.MANAGER),
        params={"firm_id": FIRM_B},
    )


def test_same_firm_is_allowed():
    check_role_scope(
        required_roles=(Role.MANAGER,),
        scope=Scope.FIRM,
        caller=_caller(Role.MANAGER),
        query={"firm_id": FIRM_A},
    )


# ---------------------------------------------------------------------------
# scoped firm id lookup order
# ---------------------------------------------------------------------------

def test_firm_scope_prefers_params_then_body_then_query():
    assert resolve_scoped_firm_id(
        Scope.FIRM, params={"firm_id": "p"}, body={"firm_id": "b"}, query={"firm_id": "q"},
    ) == "p"
    assert resolve_scoped_firm_id(
        Scope.FIRM, params={}, body={"firm_id": "b"}, query={"firm_id": "q"},
    ) == "b"
    assert resolve_scoped_firm_id(Scope.FIRM, params={}, body={}, query={"firm_id": "q"}) == "q"


def test_store_scope_uses_store_firm_param_before_body():
    assert resolve_scoped_firm_id(
        Scope.STORE, params={"store_firm_id": "s"}, body={"firm_id": "b"},
    ) == "s"
    assert resolve_scoped_firm_id(
        Scope.STORE, params={"firm_id": "p", "store_firm_id": "s"},
    ) == "p"


def test_firm_scope_ignores_store_firm_param():
    assert resolve_scoped_firm_id(Scope.FIRM, params={"store_firm_id": "s"}) is None


def test_lookup_tolerates_non_mapping_body():
    assert resolve_scoped_firm_id(Scope.FIRM, body=["not", "a", "dict"], query={"firm_id": "q"}) == "q"


# ---------------------------------------------------------------------------
# DRF adapter
# ---------------------------------------------------------------------------

class DummyView:
    def __init__(self, kwargs=None, action=None, **attrs):
        self.kwargs = kwargs or {}
        self.action = action
        for key, value in attrs.items():
            setattr(self, key, value)


class DummyRequest:
    def __init__(self, user, method="GET", query_params=None, data=None, auth=None):
        self.user = user
        self.method = method
        self.query_params = query_params or {}
        self.data = data or {}
        self.auth = auth


@pytest.mark.django_db
def test_caller_claims_fall_back_to_user_row(manager_user, firm):
    claims = caller_claims(DummyRequest(user=manager_user))
    assert claims.firm_id == str(firm.pk)
    assert claims.roles == frozenset({Role.MANAGER})


@pytest.mark.django_db
def test_caller_claims_prefer_token_claims(manager_user):
    token = {"firm_id": FIRM_B, "roles": [Role.ADMIN]}
    claims = caller_claims(DummyRequest(user=manager_user, auth=token))
    assert claims.firm_id == FIRM_B
    assert claims.roles == frozenset({Role.ADMIN})


@pytest.mark.django_db
def test_permission_uses_write_roles_for_unsafe_methods(coordinator_user):
    permission = RoleScopePermission()
    assert permission.has_permission(DummyRequest(coordinator_user), DummyView()) is True
    with pytest.raises(PermissionDenied):
        permission.has_permission(DummyRequest(coordinator_user, method="POST"), DummyView())


@pytest.mark.django_db
def test_permission_resolves_store_firm_for_store_scope(manager_user, store, other_store):
    permission = RoleScopePermission()
    own = DummyView(kwargs={"store_id": store.pk}, role_scope=Scope.STORE)
    assert permission.has_permission(DummyRequest(manager_user), own) is True

    foreign = DummyView(kwargs={"store_id": other_store.pk}, role_scope=Scope.STORE)
    with pytest.raises(PermissionDenied):
        permission.has_permission(DummyRequest(manager_user), foreign)


@pytest.mark.django_db
def test_permission_action_scopes_override_view_scope(manager_user, other_firm):
    permission = RoleScopePermission()
    view = DummyView(
        kwargs={"firm_id": other_firm.pk},
        action="stores",
        action_scopes={"stores": Scope.FIRM},
    )
    with pytest.raises(PermissionDenied):
        permission.has_permission(DummyRequest(manager_user), view)

    view.action = "retrieve"
    assert permission.has_permission(DummyRequest(manager_user), view) is True


# ---------------------------------------------------------------------------
# through the API
# ---------------------------------------------------------------------------

@pytest.mark.django_db
def test_protected_route_without_identity_is_401(anon_client):
    response = anon_client.get("/api/v1/influencers/")
    assert response.status_code == 401


@pytest.mark.django_db
def test_coordinator_cannot_write(coordinator_client):
    response = coordinator_client.post(
        "/api/v1/influencers/",
        {"name": "Nope", "email": "nope@example.com"},
        format="json",
    )
    assert response.status_code == 403
    assert response.json()["detail"] == INSUFFICIENT_ROLE


@pytest.mark.django_db
def test_firm_administration_is_admin_only(manager_client, admin_client):
    payload = {"name": "New Firm"}
    assert manager_client.post("/api/v1/firms/", payload, format="json").status_code == 403
    assert admin_client.post("/api/v1/firms/", payload, format="json").status_code == 201
