"""Commercial pattern models - derived, tenant-scoped insights."""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field

from commercial_intel.models.enums import ConfidenceLevel, PatternStatus, PatternType


class PatternCandidate(BaseModel):
    """A qualifying pattern before it is persisted."""
    description: str = Field(..., description="Plain-language pattern description")
    indicators: List[str] = Field(
        default_factory=list,
        description="Evaluated conditions that produced the pattern"
    )
    examples: List[str] = Field(
        default_factory=list,
        description="Contributing project ids, capped"
    )
    pattern_type: PatternType = Field(..., alias="patternType", description="Pattern kind")
    confidence_level: ConfidenceLevel = Field(
        ...,
        alias="confidenceLevel",
        description="Threshold-tier confidence"
    )

    class Config:
        populate_by_name = True


class CommercialPattern(PatternCandidate):
    """Stored commercial pattern document."""
    id: Optional[str] = Field(None, description="Pattern id")
    org_id: str = Field(..., alias="orgId", description="Owning tenant")
    status: PatternStatus = Field(PatternStatus.DRAFT, description="Review state")
    created_by: str = Field("system", alias="createdBy", description="Creator uid or 'system'")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Creation time")
    reviewed_by: Optional[str] = Field(None, alias="reviewedBy", description="Reviewer uid")
    reviewed_at: Optional[datetime] = Field(None, alias="reviewedAt", description="Review time")


class PatternJobResult(BaseModel):
    """Summary of one scheduled pattern detection run."""
    orgs_processed: int = Field(0, description="Tenants scanned to completion")
    patterns_created: int = Field(0, description="Pattern documents written")
    failed_orgs: List[str] = Field(
        default_factory=list,
        description="Tenants skipped after an error (isolation mode only)"
    )
