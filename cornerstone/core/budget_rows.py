from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

PAID_INVOICE_STATUSES = {"paid", "claimed"}


# Rows read from the store. The engine never writes them back.


@dataclass(frozen=True)
class BudgetLineRow:
    id: str
    work_item_id: str
    planned_amount: Optional[float] = 0.0
    confidence: str = "own_estimate"
    category_id: Optional[str] = None
    source_id: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class InvoiceRow:
    id: str
    budget_line_id: Optional[str]
    amount: Optional[float] = 0.0
    status: str = "pending"
    vendor_id: Optional[str] = None
    date: Optional[str] = None


@dataclass(frozen=True)
class BudgetCategoryRow:
    id: str
    name: str
    color: Optional[str] = None
    sort_order: int = 0


@dataclass(frozen=True)
class BudgetSourceRow:
    id: str
    name: str
    total_amount: Optional[float] = 0.0
    status: str = "active"
    source_type: str = "other"
    interest_rate: Optional[float] = None
    terms: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class SubsidyProgramRow:
    id: str
    name: str
    reduction_type: str
    reduction_value: Optional[float] = 0.0
    application_status: str = "eligible"
    applicable_category_ids: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class WorkItemSubsidyLinkRow:
    work_item_id: str
    subsidy_program_id: str


# Derived figures.


@dataclass(frozen=True)
class BudgetLineProjection:
    line: BudgetLineRow
    has_invoices: bool
    min_planned: float
    max_planned: float
    projected_min: float
    projected_max: float
    actual_cost: float
    actual_cost_paid: float
    actual_cost_claimed: float


@dataclass(frozen=True)
class SubsidyReduction:
    subsidy_program_id: str
    budget_line_id: str
    min_reduction: float
    max_reduction: float

    @property
    def amount(self) -> float:
        # Symmetric margins make the track midpoint equal to the
        # reduction of the line's planned (or invoiced) amount.
        return (self.min_reduction + self.max_reduction) / 2.0


@dataclass(frozen=True)
class SubsidyReductionResult:
    reductions: list[SubsidyReduction]
    min_by_line: dict[str, float]
    max_by_line: dict[str, float]

    @property
    def total_reductions(self) -> float:
        return sum(item.amount for item in self.reductions)

    def program_range(self, subsidy_program_id: str) -> tuple[float, float]:
        min_total = 0.0
        max_total = 0.0
        for item in self.reductions:
            if item.subsidy_program_id != subsidy_program_id:
                continue
            min_total += item.min_reduction
            max_total += item.max_reduction
        return min_total, max_total


# Report structures handed to the HTTP adapter.


@dataclass
class CategoryBudgetSummary:
    category_id: str
    category_name: str
    category_color: Optional[str]
    min_planned: float = 0.0
    max_planned: float = 0.0
    projected_min: float = 0.0
    projected_max: float = 0.0
    actual_cost: float = 0.0
    actual_cost_paid: float = 0.0
    actual_cost_claimed: float = 0.0
    budget_line_count: int = 0


@dataclass
class BudgetSourceSummary:
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

    @property
    def is_in_use(self) -> bool:
        return self.budget_line_count > 0


@dataclass
class SubsidySummary:
    total_reductions: float
    active_subsidy_count: int


@dataclass
class BudgetOverview:
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
    category_summaries: list[CategoryBudgetSummary]
    subsidy_summary: SubsidySummary


@dataclass
class SubsidyPaybackEntry:
    subsidy_program_id: str
    name: str
    reduction_type: str
    reduction_value: float
    min_payback: float
    max_payback: float


@dataclass
class SubsidyPaybackReport:
    work_item_id: str
    min_total_payback: float
    max_total_payback: float
    subsidies: list[SubsidyPaybackEntry]
