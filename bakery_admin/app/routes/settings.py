from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.settings_models import StoreSettingsModel, StoreSettingsUpdate
from ...services.store_settings import SettingsStore
from ..auth import require_admin

router = APIRouter(prefix="/settings", tags=["settings"], dependencies=[Depends(require_admin)])


@router.get("", response_model=StoreSettingsModel)
def get_settings(db: Session = Depends(get_db)):
    return SettingsStore(db).get()


@router.put("", response_model=StoreSettingsModel)
def save_settings(update: StoreSettingsUpdate, db: Session = Depends(get_db)):
    return SettingsStore(db).save(update)
