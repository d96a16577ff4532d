"""Settings panel persistence: one 'general' document merged over defaults."""
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ..app.exceptions import ValidationError
from ..data.models import StoreSettings
from ..schemas.settings_models import StoreSettingsModel, StoreSettingsUpdate
from ..utils.logger import get_logger

logger = get_logger()

SETTINGS_KEY = "general"


class SettingsStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self) -> StoreSettingsModel:
        row = self.db.get(StoreSettings, SETTINGS_KEY)
        stored = dict(row.document or {}) if row else {}
        merged = {**StoreSettingsModel().model_dump(), **stored}
        # drop keys written by older versions of the settings page
        known = {k: v for k, v in merged.items() if k in StoreSettingsModel.model_fields}
        return StoreSettingsModel(**known)

    def save(self, update: StoreSettingsUpdate) -> StoreSettingsModel:
        current = self.get().model_dump()
        current.update(update.model_dump(exclude_unset=True, exclude_none=True))
        try:
            settings = StoreSettingsModel(**current)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first.get("loc", ())) or None
            raise ValidationError(first.get("msg", "Invalid settings"), field=field)

        row = self.db.get(StoreSettings, SETTINGS_KEY)
        if row is None:
            row = StoreSettings(key=SETTINGS_KEY, document=settings.model_dump())
            self.db.add(row)
        else:
            row.document = settings.model_dump()
        self.db.commit()
        logger.info("Settings saved: fields=%s", sorted(update.model_dump(exclude_unset=True)))
        return settings
