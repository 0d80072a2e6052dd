"""Intelligence module - Pure heuristics over tenant documents."""

from commercial_intel.intelligence.financial import evaluate_financials
from commercial_intel.intelligence.risk_signals import compute_risk_signals
from commercial_intel.intelligence.checksum import canonical_json, calc_checksum
from commercial_intel.intelligence.patterns import (
    PatternRule,
    required_count,
    qualifies,
    build_pattern_candidates,
)

__all__ = [
    "evaluate_financials",
    "compute_risk_signals",
    "canonical_json",
    "calc_checksum",
    "PatternRule",
    "required_count",
    "qualifies",
    "build_pattern_candidates",
]
