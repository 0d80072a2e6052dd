"""Project-related models - financials, risks and delivery records."""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class Project(BaseModel):
    """Project document under a tenant."""
    id: str = Field(..., description="Project id")
    name: Optional[str] = Field(None, description="Project name")
    status: Optional[str] = Field(None, description="Lifecycle status")


class FinancialRecord(BaseModel):
    """
    Engagement financials for one project.

    Every numeric is optional in storage. The getters make the defaults used
    by the heuristics explicit at the call site.
    """
    id: Optional[str] = Field(None, description="Financial record id")
    estimated_margin_percent: Optional[float] = Field(
        None,
        alias="estimatedMarginPercent",
        description="Estimated gross margin as a percentage"
    )
    additional_scope_value: Optional[float] = Field(
        None,
        alias="additionalScopeValue",
        description="Value of scope added after the quote"
    )
    quoted_value: Optional[float] = Field(
        None,
        alias="quotedValue",
        description="Originally quoted engagement value"
    )

    class Config:
        populate_by_name = True

    def get_estimated_margin_percent(self, default: float = 0.0) -> float:
        """Estimated margin, or ``default`` when unknown."""
        if self.estimated_margin_percent is None:
            return default
        return self.estimated_margin_percent

    def get_additional_scope_value(self, default: float = 0.0) -> float:
        """Additional scope value, or ``default`` when unknown."""
        if self.additional_scope_value is None:
            return default
        return self.additional_scope_value

    def get_quoted_value(self, default: float = 1.0) -> float:
        """Quoted value, or ``default`` when unknown or zero."""
        # A zero quote falls back like a missing one
        if not self.quoted_value:
            return default
        return self.quoted_value


class RiskRecord(BaseModel):
    """Risk logged against a project."""
    id: Optional[str] = Field(None, description="Risk id")
    category: Optional[str] = Field(None, description="Free-text risk category")
    title: Optional[str] = Field(None, description="Short risk title")

    def get_category(self, default: str = "general") -> str:
        """Risk category, or ``default`` when blank."""
        return self.category or default


class Milestone(BaseModel):
    """Project milestone."""
    id: Optional[str] = Field(None, description="Milestone id")
    name: Optional[str] = Field(None, description="Milestone name")
    due_date: Optional[datetime] = Field(None, alias="dueDate", description="Due date")
    status: Optional[str] = Field(None, description="Progress status")

    class Config:
        populate_by_name = True


class Deliverable(BaseModel):
    """Project deliverable."""
    id: Optional[str] = Field(None, description="Deliverable id")
    name: Optional[str] = Field(None, description="Deliverable name")
    status: Optional[str] = Field(None, description="Review workflow status")


class ProjectUpdate(BaseModel):
    """Periodic status update for a project."""
    id: Optional[str] = Field(None, description="Update id")
    published: bool = Field(False, description="Visible to the client")
    period_end: Optional[datetime] = Field(
        None,
        alias="periodEnd",
        description="End of the reporting period"
    )
    summary: Optional[str] = Field(None, description="Update summary")

    class Config:
        populate_by_name = True
