from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class RevenueOverrides(BaseModel):
    price_per_unit: Optional[float] = Field(None, description="List price per unit")
    annual_price_increase: Optional[float] = Field(None, description="Annual price increase (decimal)")
    discount_rate: Optional[float] = Field(None, description="Average discount / returns off gross revenue")

    model_config = ConfigDict(extra="allow")


class COGSOverrides(BaseModel):
    unit_cost: Optional[float] = Field(None, description="Landed manufacturing cost per unit in year 1")
    cost_reduction_per_year: Optional[float] = Field(None, description="Annual unit cost reduction (scale economies)")
    shipping_per_unit: Optional[float] = Field(None, description="Outbound shipping per unit")

    model_config = ConfigDict(extra="allow")


class MarketingOverrides(BaseModel):
    base_budget: Optional[float] = Field(None, description="Fixed annual marketing budget")
    percent_of_revenue: Optional[float] = Field(None, description="Variable marketing as share of net revenue")
    cac_target: Optional[float] = Field(None, description="Target customer acquisition cost")

    model_config = ConfigDict(extra="allow")


class GNAOverrides(BaseModel):
    base_headcount: Optional[float] = Field(None, description="G&A headcount")
    avg_salary: Optional[float] = Field(None, description="Average salary in year 1")
    salary_growth_rate: Optional[float] = Field(None, description="Annual salary growth")
    benefits_multiplier: Optional[float] = Field(None, description="Fully loaded cost multiplier on salary")
    office_and_ops: Optional[float] = Field(None, description="Fixed office and operations cost")

    model_config = ConfigDict(extra="allow")


class CapitalOverrides(BaseModel):
    initial_investment: Optional[float] = Field(None, description="Initial investment (period 0)")
    working_capital_percent: Optional[float] = Field(None, description="Working capital as share of net revenue")
    capex_year1: Optional[float] = Field(None, description="Capital expenditure in year 1")
    capex_growth_rate: Optional[float] = Field(None, description="Annual CapEx growth")

    model_config = ConfigDict(extra="allow")


class CorporateOverrides(BaseModel):
    tax_rate: Optional[float] = Field(None, description="Corporate tax rate")
    discount_rate: Optional[float] = Field(None, description="Discount rate (WACC)")
    terminal_growth_rate: Optional[float] = Field(None, description="Perpetual growth for Gordon Growth TV")
    projection_years: Optional[int] = Field(None, description="Explicit projection horizon in years")

    model_config = ConfigDict(extra="allow")


class ExitOverrides(BaseModel):
    method: Optional[str] = Field(None, description="'gordon-growth' or 'exit-multiple'")
    exit_ebitda_multiple: Optional[float] = Field(None, description="Exit EV/EBITDA multiple")
    exit_revenue_multiple: Optional[float] = Field(None, description="Exit EV/Revenue multiple")

    model_config = ConfigDict(extra="allow")


class AssumptionOverrides(BaseModel):
    """Optional per-section overrides merged over the default assumptions."""

    revenue: Optional[RevenueOverrides] = None
    cogs: Optional[COGSOverrides] = None
    marketing: Optional[MarketingOverrides] = None
    gna: Optional[GNAOverrides] = None
    capital: Optional[CapitalOverrides] = None
    corporate: Optional[CorporateOverrides] = None
    exit: Optional[ExitOverrides] = None
    version: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class DCFRequest(BaseModel):
    """Request body for a single-scenario DCF valuation."""

    scenario: str = Field(..., description="Adoption scenario (max, upside, base, downside, min)")
    assumptions: Optional[AssumptionOverrides] = Field(None, description="Optional assumption overrides")
    terminal_method: Literal["gordon-growth", "exit-multiple"] = Field(
        "gordon-growth", description="Terminal value method"
    )
    exit_multiple: Optional[float] = Field(None, description="EV/EBITDA multiple for the exit-multiple method")
    projection_years: Optional[int] = Field(None, ge=1, le=50, description="Override of corporate.projection_years")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "scenario": "base",
                "terminal_method": "exit-multiple",
                "exit_multiple": 8,
                "assumptions": {
                    "corporate": {"discount_rate": 0.15, "projection_years": 6},
                    "revenue": {"price_per_unit": 950},
                },
            }
        }
    )


class FCFProjectionRequest(BaseModel):
    scenario: str = Field(..., description="Adoption scenario (max, upside, base, downside, min)")
    assumptions: Optional[AssumptionOverrides] = None
    projection_years: Optional[int] = Field(None, ge=1, le=50)


class ScenarioComparisonRequest(BaseModel):
    assumptions: Optional[AssumptionOverrides] = None
    projection_years: Optional[int] = Field(None, ge=1, le=50)


class IRRRequest(BaseModel):
    cash_flows: List[float] = Field(..., description="Cash flows from period 0 (investment) onwards")
    initial_guess: float = Field(0.10, description="Newton-Raphson starting rate")


class MIRRRequest(BaseModel):
    cash_flows: List[float] = Field(..., description="Cash flows from period 0 onwards")
    finance_rate: float = Field(..., description="Rate used to discount negative cash flows")
    reinvest_rate: float = Field(..., description="Rate earned on reinvested positive cash flows")


class TerminalValueComparisonRequest(BaseModel):
    final_year_fcf: float
    final_year_ebitda: float
    growth_rate: float = Field(..., description="Perpetual growth rate (Gordon Growth)")
    discount_rate: float = Field(..., description="Discount rate (WACC)")
    exit_multiple: float = Field(..., description="EV/EBITDA exit multiple")
    projection_years: int = Field(..., ge=0, description="Periods to discount the terminal value over")
