"""API Routes - Gated actions, proposal snapshots, risk signals and jobs."""

import logging
import secrets
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header
from pydantic import BaseModel

from commercial_intel.core.auth import CallerIdentity, get_caller
from commercial_intel.core.config import Settings, get_settings
from commercial_intel.core.database import DocumentStore, get_document_store
from commercial_intel.core.errors import NotFound, Unauthenticated
from commercial_intel.models import (
    ActionRequest,
    ActionResponse,
    BrandingSnapshot,
    PatternJobResult,
    RiskSignals,
    SnapshotVerification,
)
from commercial_intel.models.actions import STAFF_ROLES
from commercial_intel.services import (
    GatedActionService,
    PatternAggregator,
    ProjectRiskService,
    ProposalSnapshotService,
    get_action,
)
from commercial_intel.services.access import require_member_role

logger = logging.getLogger(__name__)


class SnapshotRequest(BaseModel):
    """Optional body for snapshot creation."""
    branding: Optional[BrandingSnapshot] = None


class JobResponse(BaseModel):
    """Response for scheduled job triggers."""
    status: str
    result: PatternJobResult


# ===========================================
# Gated Actions
# ===========================================

router = APIRouter(prefix="/actions", tags=["actions"])


@router.post(
    "/{action_name}",
    response_model=ActionResponse,
    summary="Apply an access-gated action"
)
async def perform_action(
    action_name: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    caller: Optional[CallerIdentity] = Depends(get_caller),
    store: DocumentStore = Depends(get_document_store)
) -> ActionResponse:
    """
    Acknowledge or review one tenant document.

    Body: ``{"orgId": "...", "targetId": "..."}``.
    """
    action = get_action(action_name)
    request = ActionRequest.model_validate(payload or {})
    return await GatedActionService(store).perform(action, caller, request)


# ===========================================
# Proposal Snapshots
# ===========================================

proposals_router = APIRouter(prefix="/orgs/{org_id}/proposals", tags=["proposals"])


@proposals_router.post(
    "/{proposal_id}/snapshots",
    status_code=201,
    summary="Freeze and send a proposal"
)
async def create_snapshot(
    org_id: str,
    proposal_id: str,
    body: Optional[SnapshotRequest] = None,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    store: DocumentStore = Depends(get_document_store)
) -> Dict[str, Any]:
    """Create an immutable snapshot and lock the proposal."""
    await require_member_role(store, caller, org_id, STAFF_ROLES)

    snapshot = await ProposalSnapshotService(store).create_snapshot(
        org_id,
        proposal_id,
        branding=body.branding if body else None,
        actor=caller.uid
    )
    return snapshot.to_document()


@proposals_router.get(
    "/{proposal_id}/snapshots/latest",
    summary="Get the latest proposal snapshot"
)
async def get_latest_snapshot(
    org_id: str,
    proposal_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    store: DocumentStore = Depends(get_document_store)
) -> Dict[str, Any]:
    """Return the most recent snapshot of a proposal."""
    await require_member_role(store, caller, org_id, STAFF_ROLES)

    snapshot = await ProposalSnapshotService(store).get_latest_snapshot_document(org_id, proposal_id)
    if snapshot is None:
        raise NotFound(f"No snapshots for proposal: {proposal_id}")
    return snapshot


@proposals_router.get(
    "/{proposal_id}/snapshots/latest/verify",
    response_model=SnapshotVerification,
    summary="Verify the latest snapshot checksum"
)
async def verify_latest_snapshot(
    org_id: str,
    proposal_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    store: DocumentStore = Depends(get_document_store)
) -> SnapshotVerification:
    """Re-derive the latest snapshot's checksum from its stored content."""
    await require_member_role(store, caller, org_id, STAFF_ROLES)

    verification = await ProposalSnapshotService(store).verify_latest_snapshot(org_id, proposal_id)
    if verification is None:
        raise NotFound(f"No snapshots for proposal: {proposal_id}")
    return verification


# ===========================================
# Project Risk Signals
# ===========================================

projects_router = APIRouter(prefix="/orgs/{org_id}/projects", tags=["projects"])


@projects_router.get(
    "/{project_id}/risk-signals",
    summary="Compute project risk signals"
)
async def get_risk_signals(
    org_id: str,
    project_id: str,
    caller: Optional[CallerIdentity] = Depends(get_caller),
    store: DocumentStore = Depends(get_document_store)
) -> Dict[str, bool]:
    """Milestone overdue, deliverable stuck and update lag for a project."""
    signals: RiskSignals = await ProjectRiskService(store).get_risk_signals(
        org_id, project_id, caller
    )
    return signals.model_dump(by_alias=True)


# ===========================================
# Scheduled Jobs
# ===========================================

jobs_router = APIRouter(prefix="/jobs", tags=["jobs"])


def require_scheduler(
    x_scheduler_token: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings)
) -> None:
    """Only the scheduler, holding the shared token, may trigger jobs."""
    expected = settings.SCHEDULER_TOKEN
    if not expected or not x_scheduler_token:
        raise Unauthenticated("Scheduler token required")
    if not secrets.compare_digest(expected, x_scheduler_token):
        raise Unauthenticated("Invalid scheduler token")


@jobs_router.post(
    "/identify-cross-project-patterns",
    response_model=JobResponse,
    summary="Run monthly pattern detection",
    dependencies=[Depends(require_scheduler)]
)
async def identify_cross_project_patterns(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings)
) -> JobResponse:
    """Scan completed projects of every active tenant and write draft patterns."""
    logger.info("Pattern detection job triggered over HTTP")
    result = await PatternAggregator(store, settings=settings).run()
    return JobResponse(status="completed", result=result)


# ===========================================
# Health
# ===========================================

health_router = APIRouter(tags=["health"])


@health_router.get("/health")
async def health_check(store: DocumentStore = Depends(get_document_store)) -> Dict[str, str]:
    """Health check endpoint."""
    database = "ok" if await store.health_check() else "unavailable"
    return {"status": "healthy", "service": "commercial-intel", "database": database}
