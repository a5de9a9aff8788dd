#!/usr/bin/env python3
"""Reset budget tables and seed a small renovation project for demos."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime, timezone

from sqlalchemy import text

from cornerstone import models
from cornerstone.core.budget_service import get_budget_overview
from cornerstone.database import SessionLocal, ensure_runtime_schema

RESET_TABLES = (
    "work_item_subsidies",
    "subsidy_program_categories",
    "subsidy_programs",
    "invoices",
    "work_item_budgets",
    "vendors",
    "budget_sources",
    "work_items",
)


def main() -> None:
    ensure_runtime_schema()
    session = SessionLocal()
    try:
        for table_name in RESET_TABLES:
            session.execute(text(f"DELETE FROM {table_name}"))
        session.commit()

        now_iso = datetime.now(timezone.utc).isoformat()
        session.add_all(
            [
                models.WorkItem(id="wi-kitchen", title="Kitchen remodel", created_at=now_iso, updated_at=now_iso),
                models.WorkItem(id="wi-roof", title="Roof insulation", created_at=now_iso, updated_at=now_iso),
                models.Vendor(id="vendor-builder", name="Northside Builders", specialty="General contracting"),
                models.Vendor(id="vendor-roofer", name="Topline Roofing", specialty="Roofing"),
                models.BudgetSource(
                    id="src-savings",
                    name="Savings",
                    source_type="savings",
                    total_amount=25000,
                    status="active",
                    created_at=now_iso,
                    updated_at=now_iso,
                ),
                models.BudgetSource(
                    id="src-loan",
                    name="Renovation loan",
                    source_type="bank_loan",
                    total_amount=40000,
                    interest_rate=3.9,
                    terms="10 years",
                    status="active",
                    created_at=now_iso,
                    updated_at=now_iso,
                ),
            ]
        )
        session.flush()

        session.add_all(
            [
                models.WorkItemBudget(
                    id="line-cabinets",
                    work_item_id="wi-kitchen",
                    description="Cabinets and worktops",
                    planned_amount=12000,
                    confidence="quote",
                    budget_category_id="bc-materials",
                    budget_source_id="src-savings",
                    vendor_id="vendor-builder",
                ),
                models.WorkItemBudget(
                    id="line-fitting",
                    work_item_id="wi-kitchen",
                    description="Fitting labor",
                    planned_amount=6000,
                    confidence="own_estimate",
                    budget_category_id="bc-labor",
                    budget_source_id="src-savings",
                ),
                models.WorkItemBudget(
                    id="line-insulation",
                    work_item_id="wi-roof",
                    description="Insulation boards",
                    planned_amount=9000,
                    confidence="professional_estimate",
                    budget_category_id="bc-materials",
                    budget_source_id="src-loan",
                    vendor_id="vendor-roofer",
                ),
            ]
        )
        session.flush()

        session.add_all(
            [
                models.Invoice(
                    id="inv-cabinets-1",
                    vendor_id="vendor-builder",
                    work_item_budget_id="line-cabinets",
                    invoice_number="NB-1001",
                    amount=11800,
                    date="2026-03-14",
                    status="paid",
                ),
                models.Invoice(
                    id="inv-roof-1",
                    vendor_id="vendor-roofer",
                    work_item_budget_id="line-insulation",
                    invoice_number="TR-220",
                    amount=4000,
                    date="2026-04-02",
                    status="pending",
                ),
                models.SubsidyProgram(
                    id="sp-energy",
                    name="Energy efficiency grant",
                    reduction_type="percentage",
                    reduction_value=15,
                    application_status="approved",
                    created_at=now_iso,
                    updated_at=now_iso,
                ),
                models.SubsidyProgramCategory(subsidy_program_id="sp-energy", budget_category_id="bc-materials"),
                models.WorkItemSubsidy(work_item_id="wi-roof", subsidy_program_id="sp-energy"),
            ]
        )
        session.commit()

        overview = get_budget_overview(session)
        print(json.dumps(asdict(overview), ensure_ascii=False, indent=2))
    finally:
        session.close()


if __name__ == "__main__":
    main()
