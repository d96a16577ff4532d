"""Per-day order summary table with search, sort and CSV export."""
import csv
import io
from typing import Dict, Iterable, List, Optional

from ..app.exceptions import ValidationError
from ..data.models import Order, OrderStatus

TABLE_HEADERS = [
    ("date", "Date"),
    ("total_orders", "Total Orders"),
    ("delivered_orders", "Delivered Orders"),
    ("most_ordered_item", "Most Ordered Item"),
    ("most_ordered_qty", "Most Ordered Qty"),
    ("most_delivered_item", "Most Delivered Item"),
    ("most_delivered_qty", "Most Delivered Qty"),
    ("total_items_sold", "Total Items Sold"),
    ("total_delivered_items", "Total Delivered Items"),
    ("total_order_amt", "Total Order Amount"),
    ("total_revenue_delivered", "Revenue (Delivered)"),
    ("highest_order_amt", "Highest Order Amount (non-cancelled)"),
]
COLUMN_KEYS = [key for key, _ in TABLE_HEADERS]


def _most_common(stats: Dict[str, int]):
    # first item to reach the maximum keeps the title on ties
    best_name, best_qty = "", 0
    for name, qty in stats.items():
        if qty > best_qty:
            best_name, best_qty = name, qty
    return best_name, best_qty


def group_orders_by_day(orders: Iterable[Order]) -> List[Dict]:
    days: Dict[str, Dict] = {}
    for order in orders:
        if order.created_at is None:
            continue
        key = order.created_at.strftime("%Y-%m-%d")
        day = days.setdefault(key, {
            "orders": 0,
            "delivered_orders": 0,
            "total_items": 0,
            "delivered_items": 0,
            "revenue": 0.0,
            "highest_order_amt": 0.0,
            "total_order_amt": 0.0,
            "item_stats": {},
            "delivered_item_stats": {},
        })
        amount = float(order.total or 0)

        if order.order_status != OrderStatus.cancelled:
            day["orders"] += 1
            for item in order.items:
                qty = int(item.quantity or 0) or 1
                day["item_stats"][item.name] = day["item_stats"].get(item.name, 0) + qty
                day["total_items"] += qty
            day["total_order_amt"] += amount
            day["highest_order_amt"] = max(day["highest_order_amt"], amount)

        if order.order_status == OrderStatus.delivered:
            day["delivered_orders"] += 1
            for item in order.items:
                qty = int(item.quantity or 0) or 1
                day["delivered_item_stats"][item.name] = day["delivered_item_stats"].get(item.name, 0) + qty
                day["delivered_items"] += qty
            day["revenue"] += amount

    rows = []
    for date_key, day in days.items():
        most_ordered, most_ordered_qty = _most_common(day["item_stats"])
        most_delivered, most_delivered_qty = _most_common(day["delivered_item_stats"])
        rows.append({
            "date": date_key,
            "total_orders": day["orders"],
            "delivered_orders": day["delivered_orders"],
            "most_ordered_item": most_ordered,
            "most_ordered_qty": most_ordered_qty,
            "most_delivered_item": most_delivered,
            "most_delivered_qty": most_delivered_qty,
            "total_items_sold": day["total_items"],
            "total_delivered_items": day["delivered_items"],
            "total_order_amt": round(day["total_order_amt"], 2),
            "total_revenue_delivered": round(day["revenue"], 2),
            "highest_order_amt": round(day["highest_order_amt"], 2),
        })
    rows.sort(key=lambda r: r["date"], reverse=True)
    return rows


def filter_report(rows: List[Dict], search: str = "", date: Optional[str] = None,
                  date_from: Optional[str] = None, date_to: Optional[str] = None) -> List[Dict]:
    result = list(rows)
    term = (search or "").lower()
    if term:
        result = [r for r in result if any(term in str(r[k]).lower() for k in COLUMN_KEYS)]
    if date:
        result = [r for r in result if r["date"] == date]
    if date_from:
        result = [r for r in result if r["date"] >= date_from]
    if date_to:
        result = [r for r in result if r["date"] <= date_to]
    return result


def sort_report(rows: List[Dict], sort_key: str = "date", sort_dir: str = "desc") -> List[Dict]:
    if sort_key not in COLUMN_KEYS:
        raise ValidationError(f"Unknown column '{sort_key}'", field="sort_key")
    reverse = sort_dir == "desc"
    if sort_key != "date" and rows and isinstance(rows[0][sort_key], (int, float)):
        return sorted(rows, key=lambda r: r[sort_key], reverse=reverse)
    return sorted(rows, key=lambda r: str(r[sort_key]), reverse=reverse)


def to_csv(rows: List[Dict]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([label for _, label in TABLE_HEADERS])
    for row in rows:
        writer.writerow(["" if row.get(k) is None else row.get(k) for k in COLUMN_KEYS])
    return buf.getvalue()
