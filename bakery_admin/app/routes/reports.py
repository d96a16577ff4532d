from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.analytics_models import DailyReportRow
from ...services.daily_report import filter_report, group_orders_by_day, sort_report, to_csv
from ...services.order_workflow import OrderService
from ..auth import require_admin

router = APIRouter(prefix="/reports", tags=["reports"], dependencies=[Depends(require_admin)])


def _daily_rows(db: Session, search: str, date: Optional[str], date_from: Optional[str],
                date_to: Optional[str], sort_key: str, sort_dir: str) -> List[dict]:
    rows = group_orders_by_day(OrderService(db).all_orders())
    rows = filter_report(rows, search=search, date=date, date_from=date_from, date_to=date_to)
    return sort_report(rows, sort_key, sort_dir)


@router.get("/daily", response_model=List[DailyReportRow])
def daily_report(
    search: str = Query(""),
    date: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    sort_key: str = Query("date"),
    sort_dir: str = Query("desc"),
    db: Session = Depends(get_db),
):
    return _daily_rows(db, search, date, date_from, date_to, sort_key, sort_dir)


@router.get("/daily.csv")
def daily_report_csv(
    search: str = Query(""),
    date: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    sort_key: str = Query("date"),
    sort_dir: str = Query("desc"),
    db: Session = Depends(get_db),
):
    """Same table as /reports/daily, as a CSV download."""
    rows = _daily_rows(db, search, date, date_from, date_to, sort_key, sort_dir)
    return Response(
        content=to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="daily_report.csv"'},
    )
