"""Models package - All Pydantic models organized by domain."""

from commercial_intel.models.enums import (
    Role,
    OrgStatus,
    ProjectStatus,
    MilestoneStatus,
    DeliverableStatus,
    ConfidenceLevel,
    PatternType,
    PatternStatus,
    ProposalStatus,
)
from commercial_intel.models.project import (
    Project,
    FinancialRecord,
    RiskRecord,
    Milestone,
    Deliverable,
    ProjectUpdate,
)
from commercial_intel.models.signals import FinancialFlags, RiskSignals
from commercial_intel.models.pattern import PatternCandidate, CommercialPattern, PatternJobResult
from commercial_intel.models.proposal import (
    ProposalContent,
    BrandingSnapshot,
    ProposalSnapshot,
    SnapshotVerification,
)
from commercial_intel.models.actions import GatedAction, ActionRequest, ActionResponse

__all__ = [
    # Enums
    "Role",
    "OrgStatus",
    "ProjectStatus",
    "MilestoneStatus",
    "DeliverableStatus",
    "ConfidenceLevel",
    "PatternType",
    "PatternStatus",
    "ProposalStatus",
    # Project models
    "Project",
    "FinancialRecord",
    "RiskRecord",
    "Milestone",
    "Deliverable",
    "ProjectUpdate",
    # Signal models
    "FinancialFlags",
    "RiskSignals",
    # Pattern models
    "PatternCandidate",
    "CommercialPattern",
    "PatternJobResult",
    # Proposal models
    "ProposalContent",
    "BrandingSnapshot",
    "ProposalSnapshot",
    "SnapshotVerification",
    # Action models
    "GatedAction",
    "ActionRequest",
    "ActionResponse",
]
