"""Proposal-related models - mutable proposals and frozen snapshots."""

from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_serializer


class ProposalContent(BaseModel):
    """
    Allowlisted proposal content frozen into a snapshot.

    Fields outside this model never reach a snapshot or its checksum.
    """
    title: Optional[str] = Field(None, description="Proposal title")
    executive_summary: Optional[str] = Field(None, alias="executiveSummary")
    diagnosis: Optional[str] = Field(None, description="Problem diagnosis")
    scope: Optional[str] = Field(None, description="Scope statement")
    methodology: Optional[str] = Field(None, description="Delivery approach")
    deliverables: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Deliverables with name, description, acceptance criteria"
    )
    timeline: Optional[Dict[str, Any]] = Field(
        None,
        description="Estimated duration and milestones"
    )
    pricing: Optional[Dict[str, Any]] = Field(
        None,
        description="Currency, total and line items"
    )
    assumptions: List[str] = Field(default_factory=list)
    exclusions: List[str] = Field(default_factory=list)
    acceptance_criteria: List[str] = Field(default_factory=list, alias="acceptanceCriteria")
    next_steps: List[str] = Field(default_factory=list, alias="nextSteps")
    terms: Optional[str] = Field(None, description="Commercial terms")
    content: Optional[str] = Field(None, description="Free-form body for simple proposals")

    class Config:
        populate_by_name = True

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "ProposalContent":
        """Project a stored proposal onto the allowlist; null lists become empty."""
        data = {key: value for key, value in document.items() if value is not None}
        return cls.model_validate(data)

    def to_document(self) -> Dict[str, Any]:
        """Serialize with stored field names, dropping absent values."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class BrandingSnapshot(BaseModel):
    """Branding applied when the proposal was sent."""
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    primary_color: Optional[str] = Field(None, alias="primaryColor")
    secondary_color: Optional[str] = Field(None, alias="secondaryColor")
    font_family: Optional[str] = Field(None, alias="fontFamily")
    footer_text: Optional[str] = Field(None, alias="footerText")

    class Config:
        populate_by_name = True

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ProposalSnapshot(BaseModel):
    """Immutable, checksummed copy of a proposal at send time."""
    version: str = Field(..., description="Version id, also the document key")
    created_at: datetime = Field(..., alias="createdAt", description="Snapshot instant")
    proposal_id: str = Field(..., alias="proposalId", description="Parent proposal")
    content: ProposalContent = Field(..., description="Frozen content")
    pricing: Optional[Dict[str, Any]] = Field(None, description="Copy of content pricing")
    milestones: Optional[Dict[str, Any]] = Field(None, description="Copy of content timeline")
    branding: Optional[BrandingSnapshot] = Field(None, description="Branding at send time")
    terms: Optional[str] = Field(None, description="Copy of content terms")
    checksum: str = Field(..., description="sha256 of canonical {content, branding}")

    class Config:
        populate_by_name = True

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        # Fixed-width UTC text keeps string ordering chronological
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SnapshotVerification(BaseModel):
    """Result of re-deriving a snapshot checksum."""
    version: str
    checksum: str
    recomputed_checksum: str
    valid: bool
