#!/usr/bin/env python3
"""
Demand predictions client.

Pulls next-day forecasts from the external prediction API and keeps a copy
of every fetched prediction in the stored_predictions table.
"""

import requests
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session

from ..app.config import Config
from ..app.exceptions import UpstreamError
from ..data.models import StoredPrediction
from ..utils.logger import get_logger

logger = get_logger()


def tomorrow_utc(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return (now + timedelta(days=1)).strftime("%Y-%m-%d")


class PredictionClient:
    """Client for the bakery demand prediction API."""

    def __init__(self, db: Session, api_url: Optional[str] = None):
        self.db = db
        self.api_url = api_url or Config.PREDICTION_API_URL

    def fetch_all(self) -> List[Dict[str, Any]]:
        """
        Fetch every prediction the API currently serves.

        Returns:
            List of raw prediction dicts

        Raises:
            UpstreamError: on network failure, non-2xx status or a non-list body
        """
        try:
            response = requests.get(self.api_url, timeout=Config.PREDICTION_TIMEOUT)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error("Prediction API request failed: %s", e)
            raise UpstreamError("Prediction API", str(e))
        except ValueError as e:
            logger.error("Prediction API returned invalid JSON: %s", e)
            raise UpstreamError("Prediction API", "invalid JSON")

        if not isinstance(payload, list):
            raise UpstreamError("Prediction API", "expected a list of predictions")
        return payload

    def refresh_tomorrow(self, now: Optional[datetime] = None) -> List[StoredPrediction]:
        """Fetch predictions, keep tomorrow's, store and return them."""
        target = tomorrow_utc(now)
        stored_at = datetime.now()
        stored = []
        for pred in self.fetch_all():
            if not isinstance(pred, dict) or pred.get("date") != target:
                continue
            try:
                value = float(pred.get("predicted_value"))
            except (TypeError, ValueError):
                logger.warning("Skipping prediction without a numeric value: %s", pred)
                continue
            row = StoredPrediction(
                prediction_type=str(pred.get("prediction_type") or "unknown"),
                item_name=pred.get("item_name") or None,
                date=target,
                predicted_value=value,
                stored_at=stored_at,
            )
            self.db.add(row)
            stored.append(row)
        self.db.commit()
        logger.info("Stored %d predictions for %s", len(stored), target)
        return stored

    def list_stored(self, date: Optional[str] = None) -> List[StoredPrediction]:
        query = self.db.query(StoredPrediction)
        if date:
            query = query.filter(StoredPrediction.date == date)
        return query.order_by(StoredPrediction.stored_at.desc(), StoredPrediction.id).all()
