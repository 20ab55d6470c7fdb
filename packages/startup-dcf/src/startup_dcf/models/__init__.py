"""
Convenience re-exports of data models.

Models are defined next to the code that produces them and re-exported here
for consumers who prefer ``from startup_dcf.models import DCFResult``.
"""

from startup_dcf.adoption import BaseParams, ResolvedSigmoidParams, ScenarioParams
from startup_dcf.assumptions import (
    AllAssumptions,
    CapitalAssumptions,
    COGSAssumptions,
    CorporateAssumptions,
    ExitAssumptions,
    GNAAssumptions,
    MarketingAssumptions,
    RevenueAssumptions,
)
from startup_dcf.cascade import FCFInputs, FCFResult, FCFYearComponents, YearlyProjection
from startup_dcf.discounting import NPVResult, PeriodCashFlow
from startup_dcf.engine import (
    DCFResult,
    FCFComponentBreakdown,
    FCFProjectionResult,
    FCFScenarioComparison,
    ImpliedMultiples,
    ScenarioSummary,
)
from startup_dcf.errors import InputError
from startup_dcf.irr import IRRResult
from startup_dcf.terminal import (
    ComparableCompany,
    TerminalValueBreakdown,
    TerminalValueComparison,
    TerminalValueInputs,
    TerminalValueResult,
)

__all__ = [
    "AllAssumptions",
    "BaseParams",
    "COGSAssumptions",
    "CapitalAssumptions",
    "ComparableCompany",
    "CorporateAssumptions",
    "DCFResult",
    "ExitAssumptions",
    "FCFComponentBreakdown",
    "FCFInputs",
    "FCFProjectionResult",
    "FCFResult",
    "FCFScenarioComparison",
    "FCFYearComponents",
    "GNAAssumptions",
    "IRRResult",
    "ImpliedMultiples",
    "InputError",
    "MarketingAssumptions",
    "NPVResult",
    "PeriodCashFlow",
    "ResolvedSigmoidParams",
    "RevenueAssumptions",
    "ScenarioParams",
    "ScenarioSummary",
    "TerminalValueBreakdown",
    "TerminalValueComparison",
    "TerminalValueInputs",
    "TerminalValueResult",
    "YearlyProjection",
]
