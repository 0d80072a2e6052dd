"""Frequency thresholds that turn per-project signals into patterns."""

import math
from typing import Dict, List, NamedTuple

from commercial_intel.models import PatternCandidate, PatternType, ConfidenceLevel

DEFAULT_EXAMPLE_LIMIT = 10


class PatternRule(NamedTuple):
    """Threshold tier for one kind of pattern."""
    pattern_type: PatternType
    floor: int
    fraction: float
    confidence: ConfidenceLevel


WEAK_MARGIN_RULE = PatternRule(PatternType.CONSISTENTLY_WEAK, 2, 0.2, ConfidenceLevel.MEDIUM)
SCOPE_CREEP_RULE = PatternRule(PatternType.SCOPE_CREEP, 2, 0.2, ConfidenceLevel.MEDIUM)
REPEATED_RISK_RULE = PatternRule(PatternType.WRONG_FIT, 3, 0.25, ConfidenceLevel.LOW)


def required_count(rule: PatternRule, total_projects: int) -> int:
    """Contributing projects needed: ``max(floor, floor(fraction * total))``."""
    return max(rule.floor, math.floor(total_projects * rule.fraction))


def qualifies(rule: PatternRule, contributing: int, total_projects: int) -> bool:
    """Whether ``contributing`` projects make a pattern under ``rule``."""
    return contributing >= required_count(rule, total_projects)


def build_pattern_candidates(
    total_projects: int,
    weak_margin_projects: List[str],
    scope_creep_projects: List[str],
    risk_categories: Dict[str, List[str]],
    example_limit: int = DEFAULT_EXAMPLE_LIMIT,
    weak_margin_threshold: float = 20.0,
    scope_creep_ratio: float = 0.3
) -> List[PatternCandidate]:
    """
    Apply the threshold tiers to aggregated project ids.

    Args:
        total_projects: Number of completed projects scanned
        weak_margin_projects: Ids flagged for weak margin
        scope_creep_projects: Ids flagged for scope creep
        risk_categories: Risk category to ids of projects logging it
        example_limit: Maximum example ids kept per pattern
        weak_margin_threshold: Threshold used, for the indicator text
        scope_creep_ratio: Ratio used, for the indicator text

    Returns:
        Qualifying candidates in emission order: weak margin, scope creep,
        then risk categories in first-seen order
    """
    candidates: List[PatternCandidate] = []

    if qualifies(WEAK_MARGIN_RULE, len(weak_margin_projects), total_projects):
        candidates.append(PatternCandidate(
            description="Consistently weak margins across completed projects",
            indicators=[f"estimatedMarginPercent < {weak_margin_threshold:g}%"],
            examples=weak_margin_projects[:example_limit],
            pattern_type=WEAK_MARGIN_RULE.pattern_type,
            confidence_level=WEAK_MARGIN_RULE.confidence,
        ))

    if qualifies(SCOPE_CREEP_RULE, len(scope_creep_projects), total_projects):
        candidates.append(PatternCandidate(
            description=f"Scope creep exceeding {scope_creep_ratio * 100:g}% of quoted value",
            indicators=[f"additionalScopeValue > {scope_creep_ratio * 100:g}% of quotedValue"],
            examples=scope_creep_projects[:example_limit],
            pattern_type=SCOPE_CREEP_RULE.pattern_type,
            confidence_level=SCOPE_CREEP_RULE.confidence,
        ))

    for category, project_ids in risk_categories.items():
        if qualifies(REPEATED_RISK_RULE, len(project_ids), total_projects):
            candidates.append(PatternCandidate(
                description=f"Repeated risk theme: {category}",
                indicators=[f"risk category {category}"],
                examples=project_ids[:example_limit],
                pattern_type=REPEATED_RISK_RULE.pattern_type,
                confidence_level=REPEATED_RISK_RULE.confidence,
            ))

    return candidates
