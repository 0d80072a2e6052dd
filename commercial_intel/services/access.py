"""Tenant membership checks shared by gated handlers."""

import logging
from typing import Optional, Iterable

from commercial_intel.core.auth import CallerIdentity
from commercial_intel.core.config import tenant_path
from commercial_intel.core.database import DocumentStore
from commercial_intel.core.errors import Unauthenticated, PermissionDenied
from commercial_intel.models import Role

logger = logging.getLogger(__name__)


def require_caller(caller: Optional[CallerIdentity]) -> CallerIdentity:
    """Return the caller or raise Unauthenticated."""
    if caller is None:
        raise Unauthenticated("Must be authenticated")
    return caller


async def get_member_role(store: DocumentStore, org_id: str, uid: str) -> Optional[Role]:
    """Role of ``uid`` in the tenant, or None for non-members or unknown roles."""
    member = await store.get(tenant_path(org_id, "members"), uid)
    if not member:
        return None
    try:
        return Role(member.get("role"))
    except ValueError:
        logger.warning(f"Unknown role {member.get('role')!r} for member {uid} in org {org_id}")
        return None


async def require_member_role(
    store: DocumentStore,
    caller: Optional[CallerIdentity],
    org_id: str,
    allowed_roles: Iterable[Role]
) -> Role:
    """
    Ensure the caller is authenticated and holds an allowed tenant role.

    Raises:
        Unauthenticated: No verified caller
        PermissionDenied: Not a member, or role outside ``allowed_roles``
    """
    caller = require_caller(caller)
    role = await get_member_role(store, org_id, caller.uid)
    allowed = frozenset(allowed_roles)

    if role is None or role not in allowed:
        logger.info(f"Denied {caller.uid} in org {org_id}: role={role}")
        names = "/".join(sorted((r.value for r in allowed), reverse=True))
        raise PermissionDenied(f"{names} only")
    return role
