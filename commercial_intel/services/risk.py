"""Project risk service - loads delivery records and evaluates risk signals."""

import logging
from typing import Optional

from commercial_intel.core.auth import CallerIdentity
from commercial_intel.core.clock import Clock, utc_now
from commercial_intel.core.config import tenant_path
from commercial_intel.core.database import DocumentStore
from commercial_intel.core.errors import NotFound
from commercial_intel.intelligence import compute_risk_signals
from commercial_intel.models import Deliverable, Milestone, ProjectUpdate, RiskSignals
from commercial_intel.models.actions import STAFF_ROLES
from commercial_intel.services.access import require_member_role

logger = logging.getLogger(__name__)


class ProjectRiskService:
    """Computes risk signals for one project on demand."""

    def __init__(self, store: DocumentStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def get_risk_signals(
        self,
        org_id: str,
        project_id: str,
        caller: Optional[CallerIdentity]
    ) -> RiskSignals:
        """
        Evaluate risk signals for a project.

        Raises:
            Unauthenticated: No verified caller
            PermissionDenied: Caller is not staff/admin in the tenant
            NotFound: The project does not exist
        """
        await require_member_role(self.store, caller, org_id, STAFF_ROLES)

        if await self.store.get(tenant_path(org_id, "projects"), project_id) is None:
            raise NotFound("Project not found")

        project_path = (org_id, "projects", project_id)
        milestones = await self.store.query(tenant_path(*project_path, "milestones"))
        deliverables = await self.store.query(tenant_path(*project_path, "deliverables"))
        # Newest first; the evaluator takes the first published entry as latest
        updates = await self.store.query(
            tenant_path(*project_path, "updates"),
            filters={"published": True},
            order_by="periodEnd",
            descending=True,
        )

        signals = compute_risk_signals(
            [Milestone.model_validate(m) for m in milestones],
            [Deliverable.model_validate(d) for d in deliverables],
            [ProjectUpdate.model_validate(u) for u in updates],
            now=self.clock()
        )
        logger.debug(f"Risk signals for {org_id}/{project_id}: {signals.model_dump()}")
        return signals
