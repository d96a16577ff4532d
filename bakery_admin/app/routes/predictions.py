from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.analytics_models import PredictionOut
from ...services.predictions import PredictionClient
from ..auth import require_admin

router = APIRouter(prefix="/predictions", tags=["predictions"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[PredictionOut])
def list_predictions(date: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return PredictionClient(db).list_stored(date)


@router.post("", response_model=List[PredictionOut])
def refresh_predictions(db: Session = Depends(get_db)):
    """Pull tomorrow's predictions from the prediction API and store them."""
    return PredictionClient(db).refresh_tomorrow()
