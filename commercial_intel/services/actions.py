"""Access-gated single-document actions (acknowledgements and approvals)."""

import logging
from typing import Dict, Optional

from commercial_intel.core.auth import CallerIdentity
from commercial_intel.core.clock import Clock, utc_now
from commercial_intel.core.config import tenant_path
from commercial_intel.core.database import DocumentStore
from commercial_intel.core.errors import InvalidArgument, NotFound
from commercial_intel.models import ActionRequest, ActionResponse, GatedAction, PatternStatus
from commercial_intel.models.actions import ADMIN_ROLES, STAFF_ROLES
from commercial_intel.services.access import require_caller, require_member_role
from commercial_intel.services.audit import record_audit_event

logger = logging.getLogger(__name__)


# ===========================================
# Registered Actions
# ===========================================

GATED_ACTIONS: Dict[str, GatedAction] = {
    action.name: action
    for action in (
        GatedAction(
            name="acknowledge-ai-output",
            collection="aiExecutions",
            target_type="ai_execution",
            updates={"humanReviewed": True},
            actor_field="humanReviewedBy",
            timestamp_field="humanReviewedAt",
            allowed_roles=STAFF_ROLES,
            not_found_message="Execution log not found",
        ),
        GatedAction(
            name="acknowledge-operating-summary",
            collection="operatingSummaries",
            target_type="operating_summary",
            updates={"isFinalized": True},
            actor_field="acknowledgedBy",
            timestamp_field="acknowledgedAt",
            allowed_roles=STAFF_ROLES,
            not_found_message="Operating summary not found",
        ),
        GatedAction(
            name="approve-commercial-pattern",
            collection="commercialPatterns",
            target_type="commercial_pattern",
            updates={"status": PatternStatus.APPROVED.value},
            actor_field="reviewedBy",
            timestamp_field="reviewedAt",
            allowed_roles=ADMIN_ROLES,
            not_found_message="Commercial pattern not found",
        ),
        GatedAction(
            name="reject-commercial-pattern",
            collection="commercialPatterns",
            target_type="commercial_pattern",
            updates={"status": PatternStatus.REJECTED.value},
            actor_field="reviewedBy",
            timestamp_field="reviewedAt",
            allowed_roles=ADMIN_ROLES,
            not_found_message="Commercial pattern not found",
        ),
    )
}


def get_action(name: str) -> GatedAction:
    """Look up a registered action by name."""
    action = GATED_ACTIONS.get(name)
    if action is None:
        raise NotFound(f"Unknown action: {name}")
    return action


class GatedActionService:
    """
    Applies a registered action for a verified tenant member.

    Order of checks: caller, input, role, target. The mutation itself is a
    single-document update.
    """

    def __init__(self, store: DocumentStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def perform(
        self,
        action: GatedAction,
        caller: Optional[CallerIdentity],
        request: ActionRequest
    ) -> ActionResponse:
        caller = require_caller(caller)
        if not request.org_id or not request.target_id:
            raise InvalidArgument("orgId and targetId required")

        org_id, target_id = request.org_id, request.target_id
        await require_member_role(self.store, caller, org_id, action.allowed_roles)

        path = tenant_path(org_id, action.collection)
        if await self.store.get(path, target_id) is None:
            raise NotFound(action.not_found_message)

        now = self.clock()
        await self.store.update(path, target_id, {
            **action.updates,
            action.actor_field: caller.uid,
            action.timestamp_field: now.isoformat(),
        })

        await record_audit_event(
            self.store,
            org_id,
            event_type=action.name.replace("-", "_"),
            description=f"{action.name} on {action.target_type} {target_id}",
            actor=caller.uid,
            target_type=action.target_type,
            target_id=target_id,
            metadata=dict(action.updates),
            clock=self.clock
        )

        logger.info(f"{action.name} applied to {path}/{target_id} by {caller.uid}")
        return ActionResponse(acknowledged=True)
