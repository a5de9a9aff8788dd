from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..core.budget_service import get_work_item_subsidy_payback
from ..core.errors import AppError
from ..database import get_db

router = APIRouter(prefix="/work-items", tags=["work-items"])


@router.get("/{work_item_id}/subsidy-payback", response_model=schemas.SubsidyPaybackReport)
def read_subsidy_payback(work_item_id: str, db: Session = Depends(get_db)):
    try:
        return get_work_item_subsidy_payback(db, work_item_id)
    except AppError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
