"""Sales analytics over the order history.

Orders are flattened into one row per ordered item and every chart is
computed from those rows in memory. Datasets are small (one bakery), so
nothing here is pushed down into SQL.

Revenue only counts delivered orders. A delivered order worth less than
ANALYTICS_FREE_SHIPPING_ABOVE is counted with ANALYTICS_SHIPPING_FEE added,
mirroring the flat delivery fee the storefront charges on small orders.
"""
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..app.config import Config
from ..app.exceptions import ValidationError
from ..data.models import Order, OrderStatus, Product, User, UserRole

VALID_STATUSES = frozenset({"confirmed", "delivered", "processing", "shipped"})
HEATMAP_EXCLUDED = frozenset({"cancelled", "pending"})
WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
HOUR_LABELS = [f"{h}:00" for h in range(24)]
STRING_SORT_KEYS = ("order_date", "order_time", "order_id")
ANALYSIS_MODES = ("overall", "item")


@dataclass
class OrderItemRow:
    order_id: str
    user_id: str
    item_name: str
    quantity: int
    price: float
    total_price: float
    order_status: str
    payment_method: str
    created_at: datetime
    order_date: str
    order_time: str


def _status_value(status) -> str:
    if status is None:
        return "unknown"
    value = status.value if isinstance(status, OrderStatus) else str(status)
    return value.lower() or "unknown"


def build_rows(orders: Iterable[Order]) -> List[OrderItemRow]:
    rows = []
    for order in orders:
        created = order.created_at or datetime.now()
        for item in order.items:
            quantity = int(item.quantity or 0) or 1
            price = float(item.price or 0)
            if item.name:
                name = item.name
            elif item.product_id is not None:
                name = str(item.product_id)
            else:
                name = "Unknown"
            rows.append(OrderItemRow(
                order_id=order.id,
                user_id=str(order.user_id) if order.user_id is not None else "",
                item_name=name,
                quantity=quantity,
                price=price,
                total_price=round(quantity * price, 2),
                order_status=_status_value(order.order_status),
                payment_method=order.payment_method or "unknown",
                created_at=created,
                order_date=created.strftime("%Y-%m-%d"),
                order_time=created.strftime("%H:%M"),
            ))
    return rows


def filter_rows(rows: List[OrderItemRow], filter_date: Optional[str] = None,
                date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[OrderItemRow]:
    """A specific date wins over the from/to range; bounds are inclusive."""
    if filter_date:
        return [r for r in rows if r.order_date == filter_date]
    result = rows
    if date_from:
        result = [r for r in result if r.order_date >= date_from]
    if date_to:
        result = [r for r in result if r.order_date <= date_to]
    return list(result)


def sort_rows(rows: List[OrderItemRow], key: str = "order_date", direction: str = "desc") -> List[OrderItemRow]:
    if key not in OrderItemRow.__dataclass_fields__:
        raise ValidationError(f"Unknown sort key '{key}'", field="sort_key")
    reverse = direction == "desc"
    if key in STRING_SORT_KEYS:
        return sorted(rows, key=lambda r: str(getattr(r, key)), reverse=reverse)
    if all(isinstance(getattr(r, key), (int, float)) for r in rows):
        return sorted(rows, key=lambda r: getattr(r, key), reverse=reverse)
    return sorted(rows, key=lambda r: str(getattr(r, key)), reverse=reverse)


def is_single_day(filter_date: Optional[str] = None, date_from: Optional[str] = None,
                  date_to: Optional[str] = None) -> bool:
    if filter_date:
        return True
    return bool(date_from and date_to and date_from == date_to)


def select_rows(rows: List[OrderItemRow], mode: str = "overall", item: Optional[str] = None) -> List[OrderItemRow]:
    """Rows that count towards KPIs and charts: valid statuses, optionally one item."""
    if mode not in ANALYSIS_MODES:
        raise ValidationError(f"Unknown analysis mode '{mode}'", field="mode")
    valid = [r for r in rows if r.order_status in VALID_STATUSES]
    if mode == "item" and item:
        valid = [r for r in valid if r.item_name == item]
    return valid


def _delivered_revenue(rows: List[OrderItemRow]) -> Dict[str, float]:
    per_order: Dict[str, float] = {}
    for r in rows:
        if r.order_status == "delivered":
            per_order[r.order_id] = per_order.get(r.order_id, 0.0) + r.total_price
    return per_order


def revenue_with_shipping(order_revenue: float) -> float:
    if order_revenue < Config.ANALYTICS_FREE_SHIPPING_ABOVE:
        return order_revenue + Config.ANALYTICS_SHIPPING_FEE
    return order_revenue


def summarize(rows: List[OrderItemRow], mode: str = "overall", item: Optional[str] = None) -> Optional[Dict]:
    """KPI cards. None when the filtered view holds no rows at all."""
    if not rows:
        return None
    data = select_rows(rows, mode, item)
    unique_orders = {r.order_id for r in data}
    total_revenue = sum(revenue_with_shipping(v) for v in _delivered_revenue(data).values())
    # anonymous rows share the empty id and count as one user
    unique_users = {r.user_id for r in rows}
    return {
        "total_orders": len(unique_orders),
        "total_revenue": round(total_revenue, 2),
        "total_quantity": sum(r.quantity for r in data),
        "unique_users": len(unique_users),
        "avg_order_value": round(total_revenue / len(unique_orders), 2) if unique_orders else 0.0,
    }


def status_counts(rows: List[OrderItemRow]) -> Dict[str, int]:
    """Orders per status, counting each order once."""
    first_status: Dict[str, str] = {}
    for r in rows:
        first_status.setdefault(r.order_id, r.order_status)
    counts: Dict[str, int] = {}
    for status in first_status.values():
        counts[status] = counts.get(status, 0) + 1
    return counts


def categorize_status_counts(counts: Dict[str, int]) -> Dict[str, int]:
    categorized = {"delivered": 0, "pending": 0, "cancelled": 0, "others": 0}
    for status, count in counts.items():
        key = status.lower()
        if key in ("delivered", "pending", "cancelled"):
            categorized[key] += count
        else:
            categorized["others"] += count
    return categorized


def _chart(labels: List[str], *datasets: Tuple[str, List[float]]) -> Dict:
    return {
        "labels": [str(label) for label in labels],
        "datasets": [{"label": label, "data": data} for label, data in datasets],
    }


def daily_series(rows: List[OrderItemRow]) -> Dict:
    """Quantity sold and average order value per day."""
    orders: Dict[str, Dict] = {}
    for r in rows:
        entry = orders.setdefault(r.order_id, {"date": r.order_date, "quantity": 0, "revenue": 0.0})
        entry["quantity"] += r.quantity
        entry["revenue"] += r.total_price

    qty_by_date: Dict[str, int] = {}
    rev_by_date: Dict[str, float] = {}
    orders_by_date: Dict[str, int] = {}
    for entry in orders.values():
        d = entry["date"]
        qty_by_date[d] = qty_by_date.get(d, 0) + entry["quantity"]
        rev_by_date[d] = rev_by_date.get(d, 0.0) + entry["revenue"]
        orders_by_date[d] = orders_by_date.get(d, 0) + 1

    dates = sorted(qty_by_date)
    return _chart(
        dates,
        ("Quantity Sold", [qty_by_date[d] for d in dates]),
        ("Avg Order Value", [round(rev_by_date[d] / orders_by_date[d], 2) for d in dates]),
    )


def top_products(rows: List[OrderItemRow], limit: Optional[int] = None) -> Dict:
    limit = limit or Config.TOP_PRODUCTS_LIMIT
    counts: Dict[str, int] = {}
    for r in rows:
        counts[r.item_name] = counts.get(r.item_name, 0) + r.quantity
    # stable sort keeps first-seen order among equal quantities
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return _chart([name for name, _ in ranked], ("Quantity Sold", [qty for _, qty in ranked]))


def order_status_chart(counts: Dict[str, int]) -> Dict:
    labels = list(counts)
    return _chart(labels, ("Order Count", [counts[label] for label in labels]))


def payment_methods(rows: List[OrderItemRow]) -> Dict:
    counts: Dict[str, int] = {}
    for r in rows:
        method = r.payment_method or "unknown"
        counts[method] = counts.get(method, 0) + 1
    labels = list(counts)
    return _chart(labels, ("Count", [counts[label] for label in labels]))


def customer_frequency(rows: List[OrderItemRow]) -> Dict:
    """How many customers have N purchase rows, for each N."""
    per_user: Dict[str, int] = {}
    for r in rows:
        if not r.user_id:
            continue
        per_user[r.user_id] = per_user.get(r.user_id, 0) + 1
    buckets: Dict[int, int] = {}
    for count in per_user.values():
        buckets[count] = buckets.get(count, 0) + 1
    keys = sorted(buckets)
    return _chart([str(k) for k in keys], ("Number of Customers", [buckets[k] for k in keys]))


def _heatmap(matrix: List[List[int]], x_labels: List[str], y_labels: List[str]) -> Dict:
    points = [
        {"x": x, "y": y, "v": matrix[y][x]}
        for y in range(len(y_labels))
        for x in range(len(x_labels))
    ]
    return {
        "x_labels": x_labels,
        "y_labels": y_labels,
        "points": points,
        "max_value": max([p["v"] for p in points] + [1]),
    }


def weekday_hour_heatmap(rows: List[OrderItemRow], exclude: Iterable[str] = ()) -> Dict:
    """Quantity sold by weekday (Mon first) and hour of day."""
    excluded = set(exclude)
    matrix = [[0] * 24 for _ in WEEKDAYS]
    for r in rows:
        if r.order_status in excluded:
            continue
        matrix[r.created_at.weekday()][r.created_at.hour] += r.quantity
    return _heatmap(matrix, [str(h) for h in range(24)], WEEKDAYS)


def default_week(day_of_month: int) -> int:
    return min(4, (day_of_month - 1) // 7 + 1)


def week_range(year: int, month: int, week: int) -> Tuple[datetime, datetime]:
    """Week 1-3 are 7-day blocks from the 1st; week 4 runs to the end of the month."""
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12", field="month")
    if not 1 <= week <= 4:
        raise ValidationError("Week must be between 1 and 4", field="week")
    days_in_month = monthrange(year, month)[1]
    start_day = 1 + (week - 1) * 7
    end_day = start_day + 6 if week < 4 else days_in_month
    start = datetime(year, month, start_day)
    end = datetime(year, month, end_day, 23, 59, 59, 999999)
    return start, end


def weekly_heatmap(rows: List[OrderItemRow], year: int, month: int, week: int) -> Dict:
    start, end = week_range(year, month, week)
    in_range = [r for r in rows if start <= r.created_at <= end]
    return weekday_hour_heatmap(in_range, exclude=HEATMAP_EXCLUDED)


def monthly_heatmap(rows: List[OrderItemRow], year: int) -> Dict:
    """Quantity sold by day of month (1-31) and month for one year."""
    matrix = [[0] * 12 for _ in range(31)]
    for r in rows:
        if r.order_status in HEATMAP_EXCLUDED or r.created_at.year != year:
            continue
        matrix[r.created_at.day - 1][r.created_at.month - 1] += r.quantity
    return _heatmap(matrix, MONTHS, [str(d) for d in range(1, 32)])


def hourly_charts(rows: List[OrderItemRow]) -> Tuple[Dict, Dict]:
    """Orders placed and delivered revenue per hour, each order counted once."""
    first_row: Dict[str, OrderItemRow] = {}
    for r in rows:
        first_row.setdefault(r.order_id, r)
    delivered = _delivered_revenue(rows)

    orders_count = [0] * 24
    revenue = [0.0] * 24
    for order_id, r in first_row.items():
        if r.order_status in VALID_STATUSES:
            orders_count[r.created_at.hour] += 1
        if order_id in delivered:
            revenue[r.created_at.hour] += delivered[order_id]
    return (
        _chart(HOUR_LABELS, ("Orders", orders_count)),
        _chart(HOUR_LABELS, ("Revenue", [round(v, 2) for v in revenue])),
    )


def unique_items(rows: List[OrderItemRow]) -> List[str]:
    return sorted({r.item_name for r in rows})


def build_analytics(all_rows: List[OrderItemRow], filter_date: Optional[str] = None,
                    date_from: Optional[str] = None, date_to: Optional[str] = None,
                    mode: str = "overall", item: Optional[str] = None) -> Dict:
    """Everything the analytics page shows for one set of filters."""
    filtered = filter_rows(all_rows, filter_date, date_from, date_to)
    data = select_rows(filtered, mode, item)
    counts = status_counts(filtered)
    single_day = is_single_day(filter_date, date_from, date_to)
    orders_by_hour = revenue_by_hour = None
    if single_day:
        orders_by_hour, revenue_by_hour = hourly_charts(data)

    return {
        "summary": summarize(filtered, mode, item),
        "status_counts": counts,
        "categorized_status_counts": categorize_status_counts(counts),
        "daily": daily_series(data),
        "top_products": top_products(data),
        "order_status": order_status_chart(counts),
        "payment_methods": payment_methods(data),
        "customer_frequency": customer_frequency(all_rows),
        "heatmap": weekday_hour_heatmap(all_rows),
        "orders_by_hour": orders_by_hour,
        "revenue_by_hour": revenue_by_hour,
        "items": unique_items(all_rows),
        "single_day": single_day,
    }


def dashboard_stats(db: Session, now: Optional[datetime] = None) -> Dict:
    """Headline counters for the dashboard landing page."""
    orders = db.query(Order).filter(Order.order_status != OrderStatus.cancelled).all()
    products = db.query(Product).all()
    customers = db.query(User).filter(User.role == UserRole.user).count()

    revenue = round(sum(float(o.total or 0) for o in orders), 2)
    in_stock = sum(1 for p in products if p.in_stock)
    return {
        "revenue": {"total": revenue, "formatted": f"${revenue:.2f}"},
        "orders": {
            "total": len(orders),
            "completed": sum(1 for o in orders if o.order_status == OrderStatus.delivered),
            "pending": sum(1 for o in orders if o.order_status == OrderStatus.pending),
        },
        "products": {
            "total": len(products),
            "in_stock": in_stock,
            "out_of_stock": len(products) - in_stock,
        },
        "customers": {"total": customers},
        "last_updated": now or datetime.now(),
    }


def today_defaults(today: Optional[date] = None) -> Dict[str, int]:
    today = today or date.today()
    return {"year": today.year, "month": today.month, "week": default_week(today.day)}

