from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from .. import models
from .budget_rows import (
    BudgetCategoryRow,
    BudgetLineRow,
    BudgetSourceRow,
    InvoiceRow,
    SubsidyProgramRow,
    WorkItemSubsidyLinkRow,
)


def read_budget_lines(db: Session, work_item_id: Optional[str] = None) -> list[BudgetLineRow]:
    query = db.query(models.WorkItemBudget)
    if work_item_id is not None:
        query = query.filter(models.WorkItemBudget.work_item_id == work_item_id)
    return [
        BudgetLineRow(
            id=row.id,
            work_item_id=row.work_item_id,
            planned_amount=row.planned_amount,
            confidence=row.confidence,
            category_id=row.budget_category_id,
            source_id=row.budget_source_id,
            description=row.description,
        )
        for row in query.order_by(models.WorkItemBudget.id.asc()).all()
    ]


def read_linked_invoices(db: Session, work_item_id: Optional[str] = None) -> list[InvoiceRow]:
    query = db.query(models.Invoice).filter(models.Invoice.work_item_budget_id.isnot(None))
    if work_item_id is not None:
        query = query.join(
            models.WorkItemBudget,
            models.WorkItemBudget.id == models.Invoice.work_item_budget_id,
        ).filter(models.WorkItemBudget.work_item_id == work_item_id)
    return [
        InvoiceRow(
            id=row.id,
            budget_line_id=row.work_item_budget_id,
            amount=row.amount,
            status=row.status,
            vendor_id=row.vendor_id,
            date=row.date,
        )
        for row in query.order_by(models.Invoice.id.asc()).all()
    ]


def read_budget_categories(db: Session) -> list[BudgetCategoryRow]:
    rows = (
        db.query(models.BudgetCategory)
        .order_by(models.BudgetCategory.sort_order.asc(), models.BudgetCategory.name.asc())
        .all()
    )
    return [
        BudgetCategoryRow(
            id=row.id,
            name=row.name,
            color=row.color,
            sort_order=int(row.sort_order or 0),
        )
        for row in rows
    ]


def _to_source_row(row: models.BudgetSource) -> BudgetSourceRow:
    return BudgetSourceRow(
        id=row.id,
        name=row.name,
        total_amount=row.total_amount,
        status=row.status,
        source_type=row.source_type,
        interest_rate=row.interest_rate,
        terms=row.terms,
        notes=row.notes,
    )


def read_budget_sources(db: Session) -> list[BudgetSourceRow]:
    rows = db.query(models.BudgetSource).order_by(models.BudgetSource.name.asc()).all()
    return [_to_source_row(row) for row in rows]


def read_budget_source(db: Session, source_id: str) -> Optional[BudgetSourceRow]:
    row = db.query(models.BudgetSource).filter(models.BudgetSource.id == source_id).first()
    return _to_source_row(row) if row is not None else None


def read_subsidy_programs(db: Session) -> list[SubsidyProgramRow]:
    category_ids_by_program: dict[str, set[str]] = {}
    for link in db.query(models.SubsidyProgramCategory).all():
        category_ids_by_program.setdefault(link.subsidy_program_id, set()).add(link.budget_category_id)

    rows = db.query(models.SubsidyProgram).order_by(models.SubsidyProgram.name.asc()).all()
    return [
        SubsidyProgramRow(
            id=row.id,
            name=row.name,
            reduction_type=row.reduction_type,
            reduction_value=row.reduction_value,
            application_status=row.application_status,
            applicable_category_ids=frozenset(category_ids_by_program.get(row.id, set())),
        )
        for row in rows
    ]


def read_work_item_subsidy_links(db: Session, work_item_id: Optional[str] = None) -> list[WorkItemSubsidyLinkRow]:
    query = db.query(models.WorkItemSubsidy)
    if work_item_id is not None:
        query = query.filter(models.WorkItemSubsidy.work_item_id == work_item_id)
    return [
        WorkItemSubsidyLinkRow(work_item_id=row.work_item_id, subsidy_program_id=row.subsidy_program_id)
        for row in query.all()
    ]


def work_item_exists(db: Session, work_item_id: str) -> bool:
    return (
        db.query(models.WorkItem.id)
        .filter(models.WorkItem.id == work_item_id)
        .first()
        is not None
    )
