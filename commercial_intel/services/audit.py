"""Tenant audit log writer."""

from typing import Optional, Dict, Any

from commercial_intel.core.clock import Clock, utc_now
from commercial_intel.core.config import tenant_path
from commercial_intel.core.database import DocumentStore


async def record_audit_event(
    store: DocumentStore,
    org_id: str,
    event_type: str,
    description: str,
    actor: str,
    target_type: str,
    target_id: str,
    metadata: Optional[Dict[str, Any]] = None,
    clock: Clock = utc_now
) -> str:
    """Append an entry to ``orgs/{orgId}/auditLogs`` and return its id."""
    return await store.create(tenant_path(org_id, "auditLogs"), {
        "orgId": org_id,
        "eventType": event_type,
        "eventDescription": description,
        "actor": actor,
        "targetType": target_type,
        "targetId": target_id,
        "metadata": metadata or {},
        "timestamp": clock().isoformat(),
    })
