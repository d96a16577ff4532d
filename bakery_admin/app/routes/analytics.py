from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.analytics_models import AnalyticsResponse, AnalyticsRow, Heatmap
from ...services import analytics
from ...services.order_workflow import OrderService
from ..auth import require_admin

router = APIRouter(prefix="/analytics", tags=["analytics"], dependencies=[Depends(require_admin)])


def _all_rows(db: Session):
    return analytics.build_rows(OrderService(db).all_orders())


@router.get("", response_model=AnalyticsResponse)
def get_analytics(
    date: Optional[str] = Query(None, description="Specific day (YYYY-MM-DD); wins over the range"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    mode: str = Query("overall"),
    item: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return analytics.build_analytics(
        _all_rows(db), filter_date=date, date_from=date_from, date_to=date_to, mode=mode, item=item
    )


@router.get("/rows", response_model=List[AnalyticsRow])
def get_rows(
    date: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    sort_key: str = Query("order_date"),
    sort_dir: str = Query("desc"),
    db: Session = Depends(get_db),
):
    """Flattened order-item rows behind the analytics charts."""
    rows = analytics.filter_rows(_all_rows(db), date, date_from, date_to)
    return [asdict(r) for r in analytics.sort_rows(rows, sort_key, sort_dir)]


@router.get("/heatmaps/weekly", response_model=Heatmap)
def weekly_heatmap(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None),
    week: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    defaults = analytics.today_defaults()
    return analytics.weekly_heatmap(
        _all_rows(db),
        year or defaults["year"],
        month or defaults["month"],
        week or defaults["week"],
    )


@router.get("/heatmaps/monthly", response_model=Heatmap)
def monthly_heatmap(year: Optional[int] = Query(None, ge=1, le=9999), db: Session = Depends(get_db)):
    return analytics.monthly_heatmap(_all_rows(db), year or analytics.today_defaults()["year"])
