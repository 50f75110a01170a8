"""Role and firm-scope permissions for the CRM API."""
from __future__ import annotations

from dataclasses import dataclass, field

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import NotAuthenticated, PermissionDenied
from rest_framework.permissions import SAFE_METHODS, BasePermission

from accounts.models import Role


class Scope:
    GLOBAL = "GLOBAL"
    FIRM = "FIRM"
    STORE = "STORE"


READ_ROLES = (Role.ADMIN, Role.MANAGER, Role.COORDINATOR)
WRITE_ROLES = (Role.ADMIN, Role.MANAGER)
ADMIN_ROLES = (Role.ADMIN,)

AUTHENTICATION_REQUIRED = "Authentication required"
INSUFFICIENT_ROLE = "Insufficient role for this action"
FIRM_CONTEXT_REQUIRED = "Firm context required to access this resource"
FIRM_ID_REQUIRED = "Firm identifier must be provided for scoped routes"
OTHER_FIRM = "Requested resource belongs to another firm"

# Where the scoped firm id is looked up, in order, per scope.
LOOKUP_ORDER = {
    Scope.FIRM: (("params", "firm_id"), ("body", "firm_id"), ("query", "firm_id")),
    Scope.STORE: (
        ("params", "firm_id"),
        ("params", "store_firm_id"),
        ("body", "firm_id"),
        ("query", "firm_id"),
    ),
}


@dataclass(frozen=True)
class CallerClaims:
    """Identity facts the decision needs about the caller."""

    user_id: str | None
    firm_id: str | None
    roles: frozenset = field(default_factory=frozenset)


def _lookup(source, key):
    if not source:
        return None
    try:
        value = source.get(key)
    except AttributeError:
        return None
    return str(value) if value not in (None, "") else None


def resolve_scoped_firm_id(scope: str, *, params=None, body=None, query=None) -> str | None:
    sources = {"params": params, "body": body, "query": query}
    for source_name, key in LOOKUP_ORDER.get(scope, ()):
        value = _lookup(sources[source_name], key)
        if value:
            return value
    return None


def check_role_scope(
    *,
    required_roles,
    scope: str | None,
    caller: CallerClaims | None,
    params=None,
    body=None,
    query=None,
) -> None:
    """Allow the request or raise ``NotAuthenticated`` / ``PermissionDenied``.

    Pure function: it only reads its arguments. ``params`` are the route
    kwargs, ``body`` the parsed request data and ``query`` the query string.
    """
    if not required_roles:
        return
    if caller is None:
        raise NotAuthenticated(AUTHENTICATION_REQUIRED)
    if not set(required_roles) & set(caller.roles):
        raise PermissionDenied(INSUFFICIENT_ROLE)
    if not scope or scope == Scope.GLOBAL:
        return
    if not caller.firm_id:
        raise PermissionDenied(FIRM_CONTEXT_REQUIRED)

    scoped_firm_id = resolve_scoped_firm_id(scope, params=params, body=body, query=query)
    if not scoped_firm_id:
        raise PermissionDenied(FIRM_ID_REQUIRED)
    if scoped_firm_id != str(caller.firm_id):
        raise PermissionDenied(OTHER_FIRM)


def caller_claims(request) -> CallerClaims | None:
    """Read claims from the validated JWT, falling back to the user row."""
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return None

    token = getattr(request, "auth", None)
    if token is not None and hasattr(token, "get") and token.get("roles") is not None:
        return CallerClaims(
            user_id=str(user.pk),
            firm_id=token.get("firm_id"),
            roles=frozenset(token.get("roles") or ()),
        )
    return CallerClaims(
        user_id=str(user.pk),
        firm_id=str(user.firm_id) if user.firm_id else None,
        roles=frozenset(user.role_names),
    )


def required_roles_for(request, view):
    """Per-action roles win; otherwise read / write roles by HTTP method."""
    action_roles = getattr(view, "action_roles", None) or {}
    action = getattr(view, "action", None)
    if action in action_roles:
        return action_roles[action]
    if request.method in SAFE_METHODS:
        return getattr(view, "read_roles", READ_ROLES)
    return getattr(view, "write_roles", WRITE_ROLES)


def scope_for(view):
    action_scopes = getattr(view, "action_scopes", None) or {}
    action = getattr(view, "action", None)
    if action in action_scopes:
        return action_scopes[action]
    return getattr(view, "role_scope", Scope.GLOBAL)


def _route_params(view, scope):
    params = dict(getattr(view, "kwargs", {}) or {})
    if scope == Scope.STORE and params.get("store_id") and not params.get("store_firm_id"):
        from stores.models import Store

        try:
            firm_id = Store.objects.filter(pk=params["store_id"]).values_list("firm_id", flat=True).first()
        except DjangoValidationError:
            firm_id = None
        if firm_id:
            params["store_firm_id"] = firm_id
    return params


class RoleScopePermission(BasePermission):
    """DRF adapter around :func:`check_role_scope`.

    Views declare ``read_roles`` / ``write_roles`` (or ``action_roles``)
    and ``role_scope`` (or ``action_scopes``).
    """

    def has_permission(self, request, view):
        scope = scope_for(view)
        check_role_scope(
            required_roles=required_roles_for(request, view),
            scope=scope,
            caller=caller_claims(request),
            params=_route_params(view, scope),
            body=request.data,
            query=request.query_params,
        )
        return True
