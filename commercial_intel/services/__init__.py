"""Services module - Store-backed orchestration over the heuristics."""

from commercial_intel.services.patterns import PatternAggregator
from commercial_intel.services.snapshots import ProposalSnapshotService, verify_snapshot
from commercial_intel.services.actions import GatedActionService, GATED_ACTIONS, get_action
from commercial_intel.services.risk import ProjectRiskService

__all__ = [
    "PatternAggregator",
    "ProposalSnapshotService",
    "verify_snapshot",
    "GatedActionService",
    "GATED_ACTIONS",
    "get_action",
    "ProjectRiskService",
]
