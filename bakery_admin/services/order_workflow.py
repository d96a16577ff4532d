"""Order lifecycle: status transitions, order list/search and order intake.

Status flow: pending -> confirmed -> processing -> shipped -> delivered, and
any non-terminal status may move to cancelled. Delivered and cancelled are
terminal. A client cannot skip a step or revive a closed order.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from ..app.config import Config
from ..app.exceptions import InvalidTransitionError, NotFoundError, ValidationError
from ..data.models import Order, OrderItem, OrderStatus, PaymentStatus, Product
from ..schemas.order_models import OrderCreate
from ..utils.dates import format_date, relative_time
from ..utils.logger import get_logger
from .store_settings import SettingsStore

logger = get_logger()

ORDER_STATUS_CONFIG: Dict[OrderStatus, Dict] = {
    OrderStatus.pending: {
        "label": "Order Pending",
        "next_status": [OrderStatus.confirmed, OrderStatus.cancelled],
    },
    OrderStatus.confirmed: {
        "label": "Order Confirmed",
        "next_status": [OrderStatus.processing, OrderStatus.cancelled],
    },
    OrderStatus.processing: {
        "label": "Processing",
        "next_status": [OrderStatus.shipped, OrderStatus.cancelled],
    },
    OrderStatus.shipped: {
        "label": "Shipped",
        "next_status": [OrderStatus.delivered, OrderStatus.cancelled],
    },
    OrderStatus.delivered: {
        "label": "Delivered",
        "next_status": [],
    },
    OrderStatus.cancelled: {
        "label": "Cancelled",
        "next_status": [],
    },
}

STATUS_FLOW = [
    OrderStatus.pending,
    OrderStatus.confirmed,
    OrderStatus.processing,
    OrderStatus.shipped,
    OrderStatus.delivered,
]

SORT_FIELDS = ("date", "total")


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus((value or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown order status '{value}'", field="status")


def status_label(status) -> str:
    config = ORDER_STATUS_CONFIG.get(parse_status(status))
    return config["label"]


def next_statuses(status) -> List[OrderStatus]:
    return list(ORDER_STATUS_CONFIG[parse_status(status)]["next_status"])


def can_transition(current, requested) -> bool:
    return parse_status(requested) in next_statuses(current)


def progress_step(status) -> Optional[int]:
    """Position in STATUS_FLOW for the progress bar; None for cancelled."""
    status = parse_status(status)
    return STATUS_FLOW.index(status) if status in STATUS_FLOW else None


def _search_matches(order: Order, term: str) -> bool:
    email = (order.address or {}).get("email") or ""
    return (
        term in order.id.lower()
        or term in (order.customer_name or "").lower()
        or term in email.lower()
    )


class OrderService:
    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: str) -> Order:
        order = self.db.get(Order, order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    def all_orders(self) -> List[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .order_by(Order.created_at.desc())
            .all()
        )

    def list_orders(
        self,
        status: str = "all",
        search: str = "",
        sort_by: str = "date",
        sort_order: str = "desc",
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Tuple[List[Order], int, bool]:
        """Filter, sort and 'load more' paginate the orders table.

        Returns (rows for pages 1..page, number of matching orders, has_more).
        """
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"Unknown sort field '{sort_by}'", field="sort_by")
        if sort_order not in ("asc", "desc"):
            raise ValidationError(f"Unknown sort order '{sort_order}'", field="sort_order")
        if page < 1:
            raise ValidationError("Page must be at least 1", field="page")
        page_size = page_size or Config.ORDERS_PAGE_SIZE

        orders = self.all_orders()
        if status and status != "all":
            wanted = parse_status(status)
            orders = [o for o in orders if o.order_status == wanted]

        term = (search or "").strip().lower()
        if term:
            orders = [o for o in orders if _search_matches(o, term)]

        if sort_by == "total":
            key = lambda o: o.total or 0  # noqa: E731
        else:
            key = lambda o: o.created_at or datetime.min  # noqa: E731
        orders.sort(key=key, reverse=(sort_order == "desc"))

        visible = orders[: page * page_size]
        return visible, len(orders), len(orders) > len(visible)

    def update_order_status(self, order_id: str, new_status: str) -> Order:
        order = self.get_order(order_id)
        requested = parse_status(new_status)
        current = order.order_status
        if not can_transition(current, requested):
            logger.warning("Rejected status change for order %s: %s -> %s", order.short_id, current.value, requested.value)
            raise InvalidTransitionError(current.value, requested.value, [s.value for s in next_statuses(current)])

        order.order_status = requested
        if requested == OrderStatus.delivered:
            order.payment_status = PaymentStatus.confirmed
        elif requested == OrderStatus.cancelled and order.payment_status != PaymentStatus.confirmed:
            order.payment_status = PaymentStatus.cancelled
        order.updated_at = datetime.now()
        self.db.commit()
        self.db.refresh(order)
        logger.info("Order status updated: id=%s status=%s", order.short_id, requested.value)
        return order

    def order_detail(self, order_id: str, now: Optional[datetime] = None) -> Dict:
        order = self.get_order(order_id)
        items_subtotal = sum(item.price * item.quantity for item in order.items)
        return {
            **{c.name: getattr(order, c.name) for c in Order.__table__.columns},
            "short_id": order.short_id,
            "items": [
                {"product_id": i.product_id, "name": i.name, "price": i.price, "quantity": i.quantity}
                for i in order.items
            ],
            "status_label": status_label(order.order_status),
            "items_subtotal": round(items_subtotal, 2),
            "next_statuses": [s.value for s in next_statuses(order.order_status)],
            "progress_step": progress_step(order.order_status),
            "created_relative": relative_time(order.created_at, now=now),
            "created_display": format_date(order.created_at),
            "updated_display": format_date(order.updated_at or order.created_at),
        }

    def create_order(self, data: OrderCreate) -> Order:
        settings = SettingsStore(self.db).get()

        items: List[OrderItem] = []
        for line in data.items:
            product = self.db.get(Product, line.product_id)
            if product is None:
                raise NotFoundError("Product", line.product_id)
            items.append(OrderItem(product_id=product.id, name=product.name, price=product.price, quantity=line.quantity))

        subtotal = round(sum(i.price * i.quantity for i in items), 2)
        shipping = 0.0 if subtotal >= settings.free_delivery_threshold else float(settings.delivery_charges)
        total = round(subtotal + shipping + data.tax, 2)
        if total < settings.minimum_order_amount:
            raise ValidationError(f"Order total must be at least {settings.minimum_order_amount:.2f}", field="items")
        if total > settings.maximum_order_amount:
            raise ValidationError(f"Order total cannot exceed {settings.maximum_order_amount:.2f}", field="items")

        now = datetime.now()
        order = Order(
            user_id=data.user_id,
            customer_name=(data.customer_name or "").strip() or "Anonymous",
            payment_method=data.payment_method or "COD",
            subtotal=subtotal,
            shipping=shipping,
            tax=data.tax,
            total=total,
            delivery_date=data.delivery_date,
            address=data.address.model_dump(exclude_none=True) if data.address else None,
            notes=data.notes,
            created_at=now,
            updated_at=now,
            items=items,
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        logger.info("Order created: id=%s items=%d total=%.2f", order.short_id, len(items), total)
        return order
