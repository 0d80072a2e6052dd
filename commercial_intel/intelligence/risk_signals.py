"""Delivery risk indicators for a single project."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

from commercial_intel.models import (
    Milestone,
    Deliverable,
    ProjectUpdate,
    RiskSignals,
    MilestoneStatus,
    DeliverableStatus,
)

UPDATE_LAG = timedelta(days=7)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from storage are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_risk_signals(
    milestones: Sequence[Milestone],
    deliverables: Sequence[Deliverable],
    updates: Sequence[ProjectUpdate],
    now: Optional[datetime] = None
) -> RiskSignals:
    """
    Compute risk signals for a project.

    ``updates`` must already be ordered newest first: the first published
    entry is taken as the latest update and nothing is re-sorted here.
    """
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)

    milestone_overdue = any(
        m.due_date is not None
        and m.status != MilestoneStatus.COMPLETE.value
        and _as_utc(m.due_date) < now
        for m in milestones
    )

    deliverable_stuck = any(
        d.status == DeliverableStatus.CHANGES_REQUESTED.value for d in deliverables
    )

    latest = next((u for u in updates if u.published), None)
    if latest is None or latest.period_end is None:
        update_lag = True
    else:
        update_lag = _as_utc(latest.period_end) < now - UPDATE_LAG

    return RiskSignals(
        milestone_overdue=milestone_overdue,
        deliverable_stuck=deliverable_stuck,
        update_lag=update_lag,
    )
