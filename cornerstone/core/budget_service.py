from __future__ import annotations

from sqlalchemy.orm import Session

from ..database import read_snapshot
from .budget_logic import (
    build_budget_overview,
    compute_subsidy_payback,
    project_budget_lines,
    summarize_budget_source,
    summarize_budget_sources,
)
from .budget_reader import (
    read_budget_categories,
    read_budget_lines,
    read_budget_source,
    read_budget_sources,
    read_linked_invoices,
    read_subsidy_programs,
    read_work_item_subsidy_links,
    work_item_exists,
)
from .budget_rows import BudgetOverview, BudgetSourceSummary, SubsidyPaybackReport
from .errors import NotFoundError


def get_budget_overview(db: Session) -> BudgetOverview:
    with read_snapshot(db):
        lines = read_budget_lines(db)
        invoices = read_linked_invoices(db)
        categories = read_budget_categories(db)
        sources = read_budget_sources(db)
        programs = read_subsidy_programs(db)
        links = read_work_item_subsidy_links(db)

    return build_budget_overview(lines, invoices, categories, sources, programs, links)


def list_budget_sources(db: Session) -> list[BudgetSourceSummary]:
    with read_snapshot(db):
        sources = read_budget_sources(db)
        lines = read_budget_lines(db)
        invoices = read_linked_invoices(db)

    return summarize_budget_sources(sources, project_budget_lines(lines, invoices))


def get_budget_source_by_id(db: Session, source_id: str) -> BudgetSourceSummary:
    with read_snapshot(db):
        source = read_budget_source(db, source_id)
        if source is None:
            raise NotFoundError("Budget source not found", {"budgetSourceId": source_id})
        lines = [line for line in read_budget_lines(db) if line.source_id == source_id]
        invoices = read_linked_invoices(db)

    return summarize_budget_source(source, project_budget_lines(lines, invoices))


def get_work_item_subsidy_payback(db: Session, work_item_id: str) -> SubsidyPaybackReport:
    with read_snapshot(db):
        if not work_item_exists(db, work_item_id):
            raise NotFoundError("Work item not found", {"workItemId": work_item_id})
        lines = read_budget_lines(db, work_item_id=work_item_id)
        invoices = read_linked_invoices(db, work_item_id=work_item_id)
        programs = read_subsidy_programs(db)
        links = read_work_item_subsidy_links(db, work_item_id=work_item_id)

    return compute_subsidy_payback(work_item_id, lines, invoices, programs, links)
