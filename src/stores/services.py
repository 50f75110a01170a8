"""Service / helper functions for the stores app."""
from __future__ import annotations

import logging
from typing import Any

from stores.models import AuditLog, Firm, Store

logger = logging.getLogger("crm")


def create_audit_log(
    actor,
    firm: Firm | None,
    action: str,
    entity_type: str,
    entity_id: str,
    before: dict[str, Any] | None = None,
    after: dict[str, Any] | None = None,
) -> AuditLog:
    """Create and return a new :class:`~stores.models.AuditLog` entry."""
    if actor is not None and not getattr(actor, "is_authenticated", False):
        actor = None
    return AuditLog.objects.create(
        actor=actor,
        firm=firm,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        before_json=before,
        after_json=after,
    )


def store_ids_for_firm(firm_id) -> list:
    """Return the ids of every store owned by ``firm_id``."""
    return list(Store.objects.filter(firm_id=firm_id).values_list("id", flat=True))
