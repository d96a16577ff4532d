"""Stock tracker: units sold per product over a day, week or month."""
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from ..app.exceptions import ValidationError
from ..data.models import Order, Product
from ..utils.dates import end_of_day, start_of_day

TIME_RANGES = ("day", "week", "month")


def get_range(day: date, range_type: str = "day") -> Tuple[datetime, datetime]:
    """Inclusive bounds of the period containing `day`. Weeks start on Sunday."""
    if range_type not in TIME_RANGES:
        raise ValidationError(f"Unknown range '{range_type}'", field="range")
    if range_type == "week":
        # date.weekday() is Monday=0; shift so Sunday opens the week
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return start_of_day(start), end_of_day(start + timedelta(days=6))
    if range_type == "month":
        first = day.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        return start_of_day(first), end_of_day(next_month - timedelta(days=1))
    return start_of_day(day), end_of_day(day)


class StockTracker:
    def __init__(self, db: Session):
        self.db = db

    def orders_in_range(self, start: datetime, end: datetime) -> List[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.created_at >= start, Order.created_at <= end)
            .order_by(Order.created_at)
            .all()
        )

    @staticmethod
    def sold_by_product(orders: List[Order]) -> Dict[int, int]:
        sold: Dict[int, int] = {}
        for order in orders:
            for item in order.items:
                if item.product_id is None:
                    continue
                sold[item.product_id] = sold.get(item.product_id, 0) + (int(item.quantity or 0) or 1)
        return sold

    def report(self, day: Optional[date] = None, range_type: str = "day") -> Dict:
        start, end = get_range(day or date.today(), range_type)
        orders = self.orders_in_range(start, end)
        sold = self.sold_by_product(orders)

        products = []
        for product in self.db.query(Product).order_by(Product.name).all():
            units = sold.get(product.id, 0)
            products.append({
                "product_id": product.id,
                "name": product.name,
                "category": product.category,
                "stock": product.quantity or 0,
                "sold": units,
                "available": (product.quantity or 0) - units,
            })

        return {
            "start": start,
            "end": end,
            "range": range_type,
            "products": products,
            "orders": [
                {
                    "id": o.id,
                    "short_id": o.short_id,
                    "customer_name": o.customer_name,
                    "order_status": o.order_status.value,
                    "created_at": o.created_at,
                    "items": [f"{i.name} x{i.quantity}" for i in o.items],
                }
                for o in orders
            ],
        }
