from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.analytics_models import DashboardStats
from ...services.analytics import dashboard_stats
from ..auth import require_admin

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(require_admin)])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    return dashboard_stats(db)
