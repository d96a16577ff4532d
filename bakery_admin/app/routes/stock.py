from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.analytics_models import StockReport
from ...services.stock_tracker import StockTracker
from ..auth import require_admin

router = APIRouter(prefix="/stock", tags=["stock"], dependencies=[Depends(require_admin)])


@router.get("", response_model=StockReport)
def stock_report(
    date: Optional[date_type] = Query(None),
    range_type: str = Query("day", alias="range"),
    db: Session = Depends(get_db),
):
    return StockTracker(db).report(day=date, range_type=range_type)
