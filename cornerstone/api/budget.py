from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..core.budget_service import (
    get_budget_overview,
    get_budget_source_by_id,
    list_budget_sources,
)
from ..core.errors import AppError
from ..database import get_db

router = APIRouter(prefix="/budget", tags=["budget"])


@router.get("/overview", response_model=schemas.BudgetOverviewResponse)
def read_budget_overview(db: Session = Depends(get_db)):
    return {"overview": get_budget_overview(db)}


@router.get("/sources", response_model=schemas.BudgetSourceListResponse)
def read_budget_sources(db: Session = Depends(get_db)):
    return {"budget_sources": list_budget_sources(db)}


@router.get("/sources/{source_id}", response_model=schemas.BudgetSourceResponse)
def read_budget_source(source_id: str, db: Session = Depends(get_db)):
    try:
        summary = get_budget_source_by_id(db, source_id)
    except AppError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
    return {"budget_source": summary}
