"""Derived signal models - heuristic outputs over project data."""

from pydantic import BaseModel, Field


class FinancialFlags(BaseModel):
    """Flags derived from one project's financial record."""
    weak_margin: bool = Field(False, description="Estimated margin under threshold")
    scope_creep: bool = Field(False, description="Added scope beyond share of quote")


class RiskSignals(BaseModel):
    """Boolean delivery-risk indicators for one project."""
    milestone_overdue: bool = Field(..., alias="milestoneOverdue")
    deliverable_stuck: bool = Field(..., alias="deliverableStuck")
    update_lag: bool = Field(..., alias="updateLag")

    class Config:
        populate_by_name = True
