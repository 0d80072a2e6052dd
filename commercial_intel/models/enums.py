"""Enumeration types for the commercial intelligence service."""

from enum import Enum
from typing import FrozenSet


class Role(str, Enum):
    """Tenant membership roles, declared from least to most privileged."""
    PUBLIC = "public"
    CLIENT = "client"
    STAFF = "staff"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return list(Role).index(self)

    # str comparisons would order roles alphabetically
    def __lt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Role):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def at_least(cls, minimum: "Role") -> FrozenSet["Role"]:
        """All roles at or above ``minimum``."""
        return frozenset(role for role in cls if role >= minimum)


class OrgStatus(str, Enum):
    """Tenant lifecycle status."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class ProjectStatus(str, Enum):
    """Project lifecycle status."""
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MilestoneStatus(str, Enum):
    """Milestone progress."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class DeliverableStatus(str, Enum):
    """Deliverable review workflow."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    IN_REVIEW = "in_review"
    CHANGES_REQUESTED = "changes_requested"
    APPROVED = "approved"


class ConfidenceLevel(str, Enum):
    """Coarse, threshold-tier confidence label for patterns."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PatternType(str, Enum):
    """Kind of commercial pattern."""
    CONSISTENTLY_STRONG = "consistently_strong"
    CONSISTENTLY_WEAK = "consistently_weak"
    MISPRICED = "mispriced"
    SCOPE_CREEP = "scope_creep"
    WRONG_FIT = "wrong_fit"


class PatternStatus(str, Enum):
    """Human review state of a pattern."""
    DRAFT = "draft"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProposalStatus(str, Enum):
    """Proposal lifecycle status."""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"
