"""Access-gated action models."""

from typing import Optional, Dict, Any, FrozenSet
from pydantic import BaseModel, Field

from commercial_intel.models.enums import Role

STAFF_ROLES: FrozenSet[Role] = Role.at_least(Role.STAFF)
ADMIN_ROLES: FrozenSet[Role] = Role.at_least(Role.ADMIN)


class GatedAction(BaseModel):
    """
    A single-document mutation guarded by tenant role.

    The fixed ``updates`` are written together with the caller id under
    ``actor_field`` and the server time under ``timestamp_field``.
    """
    name: str = Field(..., description="Action name used in the route")
    collection: str = Field(..., description="Tenant collection of the target")
    target_type: str = Field(..., description="Audit log target type")
    updates: Dict[str, Any] = Field(default_factory=dict, description="Fixed field values")
    actor_field: str = Field(..., description="Field stamped with the caller id")
    timestamp_field: str = Field(..., description="Field stamped with server time")
    allowed_roles: FrozenSet[Role] = Field(STAFF_ROLES, description="Roles allowed to act")
    not_found_message: str = Field("Target not found", description="NotFound detail")


class ActionRequest(BaseModel):
    """Body of an action call."""
    org_id: Optional[str] = Field(None, alias="orgId", description="Tenant id")
    target_id: Optional[str] = Field(None, alias="targetId", description="Target document id")

    class Config:
        populate_by_name = True


class ActionResponse(BaseModel):
    """Result of a successful action."""
    acknowledged: bool = True
