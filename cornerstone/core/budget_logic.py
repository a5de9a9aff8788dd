from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import Optional

from .budget_rows import (
    PAID_INVOICE_STATUSES,
    BudgetCategoryRow,
    BudgetLineProjection,
    BudgetLineRow,
    BudgetOverview,
    BudgetSourceRow,
    BudgetSourceSummary,
    CategoryBudgetSummary,
    InvoiceRow,
    SubsidyPaybackEntry,
    SubsidyPaybackReport,
    SubsidyProgramRow,
    SubsidyReduction,
    SubsidyReductionResult,
    SubsidySummary,
    WorkItemSubsidyLinkRow,
)

CONFIDENCE_MARGINS = {
    "own_estimate": 0.20,
    "professional_estimate": 0.10,
    "quote": 0.05,
    "invoice": 0.0,
}

_DEFAULT_CONFIDENCE = "own_estimate"
_REJECTED_STATUS = "rejected"
_ACTIVE_SOURCE_STATUS = "active"


def to_number(value: Optional[float]) -> float:
    # Null money columns count as zero.
    if value is None:
        return 0.0
    return float(value)


def normalize_confidence(confidence: str) -> str:
    value = (confidence or "").strip().lower()
    return value if value in CONFIDENCE_MARGINS else _DEFAULT_CONFIDENCE


def confidence_margin(confidence: str) -> float:
    return CONFIDENCE_MARGINS[normalize_confidence(confidence)]


def _normalize_status(status: str) -> str:
    return (status or "").strip().lower()


def is_active_subsidy(program: SubsidyProgramRow) -> bool:
    return _normalize_status(program.application_status) != _REJECTED_STATUS


def _group_invoices_by_line(invoices: Iterable[InvoiceRow]) -> dict[str, list[InvoiceRow]]:
    grouped: dict[str, list[InvoiceRow]] = {}
    for invoice in invoices:
        # Unlinked invoices never reach a budget line.
        if not invoice.budget_line_id:
            continue
        grouped.setdefault(invoice.budget_line_id, []).append(invoice)
    return grouped


def project_budget_line(line: BudgetLineRow, invoices: Iterable[InvoiceRow]) -> BudgetLineProjection:
    """Project one budget line from its planned amount and its invoices.

    Any invoice on the line (a pending one included) collapses the
    min/max range to the invoiced total. Without invoices the range is the
    planned amount widened by the confidence margin.
    """
    planned = to_number(line.planned_amount)
    margin = confidence_margin(line.confidence)

    has_invoices = False
    actual_cost = 0.0
    actual_cost_paid = 0.0
    actual_cost_claimed = 0.0
    for invoice in invoices:
        if invoice.budget_line_id != line.id:
            continue
        has_invoices = True
        amount = to_number(invoice.amount)
        status = _normalize_status(invoice.status)
        actual_cost += amount
        if status in PAID_INVOICE_STATUSES:
            actual_cost_paid += amount
        if status == "claimed":
            actual_cost_claimed += amount

    if has_invoices:
        min_planned = actual_cost
        max_planned = actual_cost
    else:
        min_planned = planned * (1.0 - margin)
        max_planned = planned * (1.0 + margin)

    return BudgetLineProjection(
        line=line,
        has_invoices=has_invoices,
        min_planned=min_planned,
        max_planned=max_planned,
        projected_min=min_planned,
        projected_max=max_planned,
        actual_cost=actual_cost,
        actual_cost_paid=actual_cost_paid,
        actual_cost_claimed=actual_cost_claimed,
    )


def project_budget_lines(
    lines: Iterable[BudgetLineRow],
    invoices: Iterable[InvoiceRow],
) -> list[BudgetLineProjection]:
    invoices_by_line = _group_invoices_by_line(invoices)
    return [project_budget_line(line, invoices_by_line.get(line.id, [])) for line in lines]


def _linked_work_items(links: Iterable[WorkItemSubsidyLinkRow]) -> dict[str, set[str]]:
    linked: dict[str, set[str]] = {}
    for link in links:
        linked.setdefault(link.subsidy_program_id, set()).add(link.work_item_id)
    return linked


def subsidy_matches_line(
    program: SubsidyProgramRow,
    line: BudgetLineRow,
    linked_work_item_ids: set[str],
) -> bool:
    if not is_active_subsidy(program):
        return False
    if line.work_item_id not in linked_work_item_ids:
        return False
    if not program.applicable_category_ids:
        return True
    return line.category_id is not None and line.category_id in program.applicable_category_ids


def _program_sort_key(program: SubsidyProgramRow) -> tuple[str, str]:
    return ((program.name or "").lower(), program.id)


def compute_subsidy_reductions(
    programs: Iterable[SubsidyProgramRow],
    links: Iterable[WorkItemSubsidyLinkRow],
    projections: Iterable[BudgetLineProjection],
) -> SubsidyReductionResult:
    """Work out every (program, line) reduction on the min and max tracks.

    Percentage programs scale each matching line's pre-reduction min and max
    independently. Fixed programs split their value evenly across all
    their matching lines, the same share on both tracks.
    """
    projection_list = list(projections)
    linked = _linked_work_items(links)

    reductions: list[SubsidyReduction] = []
    min_by_line: dict[str, float] = {}
    max_by_line: dict[str, float] = {}

    for program in sorted(programs, key=_program_sort_key):
        if not is_active_subsidy(program):
            continue
        work_item_ids = linked.get(program.id, set())
        matches = [
            projection
            for projection in projection_list
            if subsidy_matches_line(program, projection.line, work_item_ids)
        ]
        if not matches:
            continue

        value = to_number(program.reduction_value)
        reduction_type = _normalize_status(program.reduction_type)
        for projection in matches:
            if reduction_type == "percentage":
                rate = value / 100.0
                min_reduction = projection.min_planned * rate
                max_reduction = projection.max_planned * rate
            elif reduction_type == "fixed":
                min_reduction = max_reduction = value / len(matches)
            else:
                continue

            line_id = projection.line.id
            reductions.append(
                SubsidyReduction(
                    subsidy_program_id=program.id,
                    budget_line_id=line_id,
                    min_reduction=min_reduction,
                    max_reduction=max_reduction,
                )
            )
            min_by_line[line_id] = min_by_line.get(line_id, 0.0) + min_reduction
            max_by_line[line_id] = max_by_line.get(line_id, 0.0) + max_reduction

    return SubsidyReductionResult(
        reductions=reductions,
        min_by_line=min_by_line,
        max_by_line=max_by_line,
    )


def apply_subsidy_reductions(
    projections: Iterable[BudgetLineProjection],
    reduction_result: SubsidyReductionResult,
) -> list[BudgetLineProjection]:
    adjusted: list[BudgetLineProjection] = []
    for projection in projections:
        min_reduction = reduction_result.min_by_line.get(projection.line.id, 0.0)
        max_reduction = reduction_result.max_by_line.get(projection.line.id, 0.0)
        if not min_reduction and not max_reduction:
            adjusted.append(projection)
            continue
        adjusted.append(
            replace(
                projection,
                min_planned=max(0.0, projection.min_planned - min_reduction),
                max_planned=max(0.0, projection.max_planned - max_reduction),
                projected_min=max(0.0, projection.projected_min - min_reduction),
                projected_max=max(0.0, projection.projected_max - max_reduction),
            )
        )
    return adjusted


def summarize_categories(
    categories: Iterable[BudgetCategoryRow],
    projections: Iterable[BudgetLineProjection],
) -> list[CategoryBudgetSummary]:
    ordered = sorted(categories, key=lambda row: (row.sort_order, (row.name or "").lower()))
    summaries = {
        category.id: CategoryBudgetSummary(
            category_id=category.id,
            category_name=category.name,
            category_color=category.color,
        )
        for category in ordered
    }

    for projection in projections:
        # Uncategorized lines and dangling category ids stay out of every row.
        summary = summaries.get(projection.line.category_id or "")
        if summary is None:
            continue
        summary.min_planned += projection.min_planned
        summary.max_planned += projection.max_planned
        summary.projected_min += projection.projected_min
        summary.projected_max += projection.projected_max
        summary.actual_cost += projection.actual_cost
        summary.actual_cost_paid += projection.actual_cost_paid
        summary.actual_cost_claimed += projection.actual_cost_claimed
        summary.budget_line_count += 1

    return [summaries[category.id] for category in ordered]


def summarize_budget_source(
    source: BudgetSourceRow,
    projections: Iterable[BudgetLineProjection],
) -> BudgetSourceSummary:
    used_amount = 0.0
    claimed_amount = 0.0
    unclaimed_amount = 0.0
    line_count = 0
    for projection in projections:
        if projection.line.source_id != source.id:
            continue
        line_count += 1
        used_amount += projection.actual_cost
        claimed_amount += projection.actual_cost_claimed
        unclaimed_amount += projection.actual_cost_paid - projection.actual_cost_claimed

    total_amount = to_number(source.total_amount)
    return BudgetSourceSummary(
        id=source.id,
        name=source.name,
        source_type=source.source_type,
        status=source.status,
        total_amount=total_amount,
        used_amount=used_amount,
        available_amount=total_amount - used_amount,
        claimed_amount=claimed_amount,
        unclaimed_amount=unclaimed_amount,
        actual_available_amount=total_amount - claimed_amount,
        budget_line_count=line_count,
        interest_rate=source.interest_rate,
        terms=source.terms,
        notes=source.notes,
    )


def summarize_budget_sources(
    sources: Iterable[BudgetSourceRow],
    projections: Iterable[BudgetLineProjection],
) -> list[BudgetSourceSummary]:
    projection_list = list(projections)
    ordered = sorted(sources, key=lambda row: ((row.name or "").lower(), row.id))
    return [summarize_budget_source(source, projection_list) for source in ordered]


def assemble_budget_overview(
    sources: Iterable[BudgetSourceRow],
    category_summaries: list[CategoryBudgetSummary],
    adjusted_projections: Iterable[BudgetLineProjection],
    reduction_result: SubsidyReductionResult,
    programs: Iterable[SubsidyProgramRow],
) -> BudgetOverview:
    active_sources = [
        source for source in sources if _normalize_status(source.status) == _ACTIVE_SOURCE_STATUS
    ]
    available_funds = sum(to_number(source.total_amount) for source in active_sources)

    totals = {
        "min_planned": 0.0,
        "max_planned": 0.0,
        "projected_min": 0.0,
        "projected_max": 0.0,
        "actual_cost": 0.0,
        "actual_cost_paid": 0.0,
        "actual_cost_claimed": 0.0,
    }
    for projection in adjusted_projections:
        for field_name in totals:
            totals[field_name] += getattr(projection, field_name)

    return BudgetOverview(
        available_funds=available_funds,
        source_count=len(active_sources),
        min_planned=totals["min_planned"],
        max_planned=totals["max_planned"],
        projected_min=totals["projected_min"],
        projected_max=totals["projected_max"],
        actual_cost=totals["actual_cost"],
        actual_cost_paid=totals["actual_cost_paid"],
        actual_cost_claimed=totals["actual_cost_claimed"],
        remaining_vs_min_planned=available_funds - totals["min_planned"],
        remaining_vs_max_planned=available_funds - totals["max_planned"],
        remaining_vs_projected_min=available_funds - totals["projected_min"],
        remaining_vs_projected_max=available_funds - totals["projected_max"],
        remaining_vs_actual_cost=available_funds - totals["actual_cost"],
        remaining_vs_actual_paid=available_funds - totals["actual_cost_paid"],
        remaining_vs_actual_claimed=available_funds - totals["actual_cost_claimed"],
        category_summaries=category_summaries,
        subsidy_summary=SubsidySummary(
            total_reductions=reduction_result.total_reductions,
            active_subsidy_count=sum(1 for program in programs if is_active_subsidy(program)),
        ),
    )


def build_budget_overview(
    lines: Iterable[BudgetLineRow],
    invoices: Iterable[InvoiceRow],
    categories: Iterable[BudgetCategoryRow],
    sources: Iterable[BudgetSourceRow],
    programs: Iterable[SubsidyProgramRow],
    links: Iterable[WorkItemSubsidyLinkRow],
) -> BudgetOverview:
    program_list = list(programs)
    projections = project_budget_lines(lines, invoices)
    reduction_result = compute_subsidy_reductions(program_list, links, projections)
    adjusted = apply_subsidy_reductions(projections, reduction_result)
    return assemble_budget_overview(
        sources,
        summarize_categories(categories, adjusted),
        adjusted,
        reduction_result,
        program_list,
    )


def compute_subsidy_payback(
    work_item_id: str,
    lines: Iterable[BudgetLineRow],
    invoices: Iterable[InvoiceRow],
    programs: Iterable[SubsidyProgramRow],
    links: Iterable[WorkItemSubsidyLinkRow],
) -> SubsidyPaybackReport:
    """Min/max payback of every non-rejected program linked to one work item.

    Matching is scoped to the work item's own lines, so a fixed program
    linked to several work items is split only among this item's matches.
    """
    scoped_links = [link for link in links if link.work_item_id == work_item_id]
    linked_ids = {link.subsidy_program_id for link in scoped_links}
    linked_programs = sorted(
        (program for program in programs if program.id in linked_ids and is_active_subsidy(program)),
        key=_program_sort_key,
    )
    scoped_lines = [line for line in lines if line.work_item_id == work_item_id]
    projections = project_budget_lines(scoped_lines, invoices)
    reduction_result = compute_subsidy_reductions(linked_programs, scoped_links, projections)

    entries: list[SubsidyPaybackEntry] = []
    min_total = 0.0
    max_total = 0.0
    for program in linked_programs:
        min_payback, max_payback = reduction_result.program_range(program.id)
        entries.append(
            SubsidyPaybackEntry(
                subsidy_program_id=program.id,
                name=program.name,
                reduction_type=program.reduction_type,
                reduction_value=to_number(program.reduction_value),
                min_payback=min_payback,
                max_payback=max_payback,
            )
        )
        min_total += min_payback
        max_total += max_payback

    return SubsidyPaybackReport(
        work_item_id=work_item_id,
        min_total_payback=min_total,
        max_total_payback=max_total,
        subsidies=entries,
    )
