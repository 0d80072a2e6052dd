"""Financial heuristics over a project's engagement financials."""

from typing import Optional

from commercial_intel.models import FinancialRecord, FinancialFlags

WEAK_MARGIN_PERCENT = 20.0
SCOPE_CREEP_RATIO = 0.3


def evaluate_financials(
    financial: Optional[FinancialRecord],
    weak_margin_threshold: float = WEAK_MARGIN_PERCENT,
    scope_creep_ratio: float = SCOPE_CREEP_RATIO
) -> FinancialFlags:
    """
    Flag weak margin and scope creep for one project.

    An unknown margin counts as 0, so it is weak. An unknown quote counts
    as 1, so any positive additional scope on an unquoted project is creep.

    Args:
        financial: The project's financial record, or None when it has none
        weak_margin_threshold: Margin percentage below which margin is weak
        scope_creep_ratio: Share of quoted value that added scope may reach

    Returns:
        FinancialFlags for the record
    """
    if financial is None:
        financial = FinancialRecord()

    margin = financial.get_estimated_margin_percent(default=0.0)
    additional_scope = financial.get_additional_scope_value(default=0.0)
    quoted = financial.get_quoted_value(default=1.0)

    return FinancialFlags(
        weak_margin=margin < weak_margin_threshold,
        scope_creep=additional_scope > quoted * scope_creep_ratio,
    )
