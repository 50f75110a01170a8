"""Account-related helper services."""

from __future__ import annotations

import logging

from django.db import transaction

from accounts.models import Role, User
from stores.models import Firm

logger = logging.getLogger("crm")

DEFAULT_USER_ROLE = Role.COORDINATOR


def ensure_default_roles() -> list[Role]:
    """Create the built-in roles if missing and return them."""
    roles = []
    for name, description in Role.DEFAULT_ROLES.items():
        role, _ = Role.objects.get_or_create(name=name, defaults={"description": description})
        roles.append(role)
    return roles


@transaction.atomic
def register_user(*, email: str, password: str, name: str = "", firm: Firm | None = None) -> User:
    """Create a self-registered user with the default role.

    Raises
    ------
    ValueError
        If the email is already registered.
    """
    email = User.objects.normalize_email(email or "").strip()
    if User.objects.filter(email__iexact=email).exists():
        raise ValueError("Email address is already registered")

    user = User.objects.create_user(
        email=email,
        password=password,
        name=name,
        firm=firm,
        roles=[DEFAULT_USER_ROLE],
    )
    logger.info("User %s registered (firm=%s)", user.pk, getattr(firm, "pk", None))
    return user
