"""Customer records: users with the 'user' role and their order counts."""
from datetime import datetime
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..app.exceptions import NotFoundError, ValidationError
from ..data.models import Order, User, UserRole
from ..schemas.customer_models import CustomerUpdate
from ..utils.dates import format_date
from ..utils.logger import get_logger
from ..utils.security import mask_pii

logger = get_logger()

SORT_OPTIONS = ("recent", "name", "orders")


class CustomerDirectory:
    def __init__(self, db: Session):
        self.db = db

    def _order_counts(self) -> Dict[int, int]:
        rows = (
            self.db.query(Order.user_id, func.count(Order.id))
            .filter(Order.user_id.isnot(None))
            .group_by(Order.user_id)
            .all()
        )
        return {user_id: count for user_id, count in rows}

    def _to_record(self, user: User, order_count: int) -> Dict:
        return {
            "id": user.id,
            "name": user.name or "",
            "email": user.email,
            "phone": user.phone,
            "address": user.address,
            "photo_url": user.photo_url,
            "created_at": user.created_at,
            "order_count": order_count,
            "joined_display": format_date(user.created_at),
        }

    def list_customers(self, search: str = "", sort_by: str = "recent") -> List[Dict]:
        if sort_by not in SORT_OPTIONS:
            raise ValidationError(f"Unknown sort option '{sort_by}'", field="sort_by")

        counts = self._order_counts()
        users = self.db.query(User).filter(User.role == UserRole.user).all()
        records = [self._to_record(u, counts.get(u.id, 0)) for u in users]

        term = (search or "").strip().lower()
        if term:
            records = [r for r in records if term in r["name"].lower() or term in r["email"].lower()]

        if sort_by == "name":
            records.sort(key=lambda r: r["name"].lower())
        elif sort_by == "orders":
            records.sort(key=lambda r: r["order_count"], reverse=True)
        else:
            records.sort(key=lambda r: r["created_at"] or datetime.min, reverse=True)
        return records

    def _get_user(self, customer_id: int) -> User:
        user = self.db.get(User, customer_id)
        if user is None or user.role != UserRole.user:
            raise NotFoundError("Customer", customer_id)
        return user

    def get_customer(self, customer_id: int) -> Dict:
        user = self._get_user(customer_id)
        return self._to_record(user, self._order_counts().get(user.id, 0))

    def update_customer(self, customer_id: int, update: CustomerUpdate) -> Dict:
        user = self._get_user(customer_id)
        changes = update.model_dump(exclude_unset=True)

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Name is required", field="name")
            user.name = name
        if "email" in changes:
            email = (changes["email"] or "").strip().lower()
            if not email or "@" not in email:
                raise ValidationError("Valid email is required", field="email")
            user.email = email
        if "phone" in changes:
            user.phone = (changes["phone"] or "").strip() or None
        if "address" in changes:
            address = dict(user.address or {})
            address.update({k: v for k, v in (changes["address"] or {}).items() if v is not None})
            user.address = address
        user.updated_at = datetime.now()

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValidationError("Email is already in use", field="email")
        self.db.refresh(user)
        logger.info("Customer updated: id=%s email=%s", user.id, mask_pii(user.email))
        return self.get_customer(user.id)
