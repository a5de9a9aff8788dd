from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class CategoryBudgetSummary(CamelModel):
    category_id: str
    category_name: str
    category_color: Optional[str] = None
    min_planned: float
    max_planned: float
    projected_min: float
    projected_max: float
    actual_cost: float
    actual_cost_paid: float
    actual_cost_claimed: float
    budget_line_count: int


class SubsidySummary(CamelModel):
    total_reductions: float
    active_subsidy_count: int


class BudgetOverview(CamelModel):
    available_funds: float
    source_count: int
    min_planned: float
    max_planned: float
    projected_min: float
    projected_max: float
    actual_cost: float
    actual_cost_paid: float
    actual_cost_claimed: float
    remaining_vs_min_planned: float
    remaining_vs_max_planned: float
    remaining_vs_projected_min: float
    remaining_vs_projected_max: float
    remaining_vs_actual_cost: float
    remaining_vs_actual_paid: float
    remaining_vs_actual_claimed: float
    category_summaries: List[CategoryBudgetSummary]
    subsidy_summary: SubsidySummary


class BudgetOverviewResponse(CamelModel):
    overview: BudgetOverview


class BudgetSource(CamelModel):
    id: str
    name: str
    source_type: str
    status: str
    total_amount: float
    used_amount: float
    available_amount: float
    claimed_amount: float
    unclaimed_amount: float
    actual_available_amount: float
    budget_line_count: int
    interest_rate: Optional[float] = None
    terms: Optional[str] = None
    notes: Optional[str] = None


class BudgetSourceListResponse(CamelModel):
    budget_sources: List[BudgetSource]


class BudgetSourceResponse(CamelModel):
    budget_source: BudgetSource


class SubsidyPaybackEntry(CamelModel):
    subsidy_program_id: str
    name: str
    reduction_type: str
    reduction_value: float
    min_payback: float
    max_payback: float


class SubsidyPaybackReport(CamelModel):
    work_item_id: str
    min_total_payback: float
    max_total_payback: float
    subsidies: List[SubsidyPaybackEntry]
