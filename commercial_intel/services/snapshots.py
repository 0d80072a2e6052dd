"""Proposal snapshot service - freeze, checksum and lock sent proposals."""

import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from commercial_intel.core.clock import Clock, utc_now
from commercial_intel.core.config import tenant_path
from commercial_intel.core.database import DocumentStore
from commercial_intel.core.errors import NotFound
from commercial_intel.intelligence import calc_checksum
from commercial_intel.models import (
    BrandingSnapshot,
    ProposalContent,
    ProposalSnapshot,
    ProposalStatus,
    SnapshotVerification,
)
from commercial_intel.services.audit import record_audit_event

logger = logging.getLogger(__name__)


def snapshot_checksum(content: ProposalContent, branding: Optional[BrandingSnapshot]) -> str:
    """Checksum over the frozen content and branding."""
    return calc_checksum({
        "content": content.to_document(),
        "branding": branding.to_document() if branding else None,
    })


def snapshot_version(created_at: datetime) -> str:
    """
    Version id for a snapshot created at ``created_at``.

    Millisecond ISO-8601 UTC timestamp plus a random suffix, so snapshots
    created in the same millisecond still get distinct keys.
    """
    if created_at.tzinfo is not None:
        created_at = created_at.astimezone(timezone.utc)
    stamp = created_at.strftime("%Y-%m-%dT%H:%M:%S.") + f"{created_at.microsecond // 1000:03d}Z"
    return f"{stamp}-{secrets.token_hex(3)}"


def verify_snapshot(snapshot: Union[ProposalSnapshot, Dict[str, Any]]) -> SnapshotVerification:
    """
    Re-derive a snapshot's checksum from its own content and branding.

    Stored snapshots are checked as raw documents, not through the models:
    keys added to the stored content after sending, or values that no longer
    parse, change the recomputed checksum and make the snapshot invalid.
    """
    if isinstance(snapshot, ProposalSnapshot):
        snapshot = snapshot.to_document()

    checksum = snapshot.get("checksum") or ""
    recomputed = calc_checksum({
        "content": snapshot.get("content"),
        "branding": snapshot.get("branding"),
    })
    return SnapshotVerification(
        version=str(snapshot.get("version") or snapshot.get("id") or ""),
        checksum=checksum,
        recomputed_checksum=recomputed,
        valid=bool(checksum) and recomputed == checksum,
    )


class ProposalSnapshotService:
    """Creates and reads immutable proposal snapshots."""

    def __init__(self, store: DocumentStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def create_snapshot(
        self,
        org_id: str,
        proposal_id: str,
        branding: Optional[BrandingSnapshot] = None,
        actor: str = "system"
    ) -> ProposalSnapshot:
        """
        Freeze a proposal and mark it sent.

        The snapshot write and the proposal update are two separate writes.
        If the second fails the snapshot stays without a back-reference from
        the proposal.

        Raises:
            NotFound: The proposal does not exist; nothing is written
        """
        proposals_path = tenant_path(org_id, "proposals")
        proposal = await self.store.get(proposals_path, proposal_id)
        if proposal is None:
            raise NotFound("Proposal not found")

        content = ProposalContent.from_document(proposal)
        created_at = self.clock()
        version = snapshot_version(created_at)

        snapshot = ProposalSnapshot(
            version=version,
            created_at=created_at,
            proposal_id=proposal_id,
            content=content,
            pricing=content.pricing,
            milestones=content.timeline,
            branding=branding,
            terms=content.terms,
            checksum=snapshot_checksum(content, branding),
        )

        await self.store.set(
            tenant_path(org_id, "proposals", proposal_id, "snapshots"),
            version,
            snapshot.to_document()
        )

        await self.store.update(proposals_path, proposal_id, {
            "status": ProposalStatus.SENT.value,
            "locked": True,
            "currentSnapshotVersion": version,
            "updatedAt": created_at.isoformat(),
        })

        await record_audit_event(
            self.store,
            org_id,
            event_type="proposal_snapshot_created",
            description=f"Proposal {proposal_id} locked at snapshot {version}",
            actor=actor,
            target_type="proposal",
            target_id=proposal_id,
            metadata={"version": version, "checksum": snapshot.checksum},
            clock=self.clock
        )

        logger.info(f"Snapshot {version} created for proposal {proposal_id} in org {org_id}")
        return snapshot

    async def get_latest_snapshot_document(self, org_id: str, proposal_id: str) -> Optional[Dict[str, Any]]:
        """Most recently created snapshot as stored, or None when there are none."""
        documents = await self.store.query(
            tenant_path(org_id, "proposals", proposal_id, "snapshots"),
            order_by="createdAt",
            descending=True,
            limit=1
        )
        return documents[0] if documents else None

    async def get_latest_snapshot(self, org_id: str, proposal_id: str) -> Optional[ProposalSnapshot]:
        """Most recently created snapshot, or None when there are none."""
        document = await self.get_latest_snapshot_document(org_id, proposal_id)
        if document is None:
            return None
        return ProposalSnapshot.model_validate(document)

    async def verify_latest_snapshot(self, org_id: str, proposal_id: str) -> Optional[SnapshotVerification]:
        """Verify the most recent snapshot as stored, or None when there are none."""
        document = await self.get_latest_snapshot_document(org_id, proposal_id)
        if document is None:
            return None

        verification = verify_snapshot(document)
        if not verification.valid:
            logger.warning(
                f"Checksum mismatch for {org_id}/{proposal_id}@{verification.version}"
            )
        return verification
