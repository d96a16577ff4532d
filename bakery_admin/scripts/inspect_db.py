#!/usr/bin/env python3
"""
Inspect the bakery admin database: print products, customers and orders with their items.

Usage:
  python -m bakery_admin.scripts.inspect_db

Read-only; makes no writes.
"""

from datetime import datetime

from sqlalchemy.orm import selectinload

from ..data.database import SessionLocal
from ..data.models import Order, Product, User, UserRole
from ..services.order_workflow import status_label
from ..utils.dates import format_date


def line(ch: str = "-", width: int = 60) -> str:
    return ch * width


def print_products(session):
    print(line("="))
    print("Products")
    print(line("="))
    products = session.query(Product).order_by(Product.id).all()
    print(f"Total products: {len(products)}")
    for p in products:
        stock = "in stock" if p.in_stock else "out of stock"
        print(f"- #{p.id} {p.name} | price={p.price:.2f} | qty={p.quantity} ({stock}) | category={p.category}")
    print()


def print_customers(session):
    print(line("="))
    print("Customers")
    print(line("="))
    customers = session.query(User).filter(User.role == UserRole.user).order_by(User.id).all()
    print(f"Total customers: {len(customers)}")
    for c in customers:
        print(f"- #{c.id} {c.name or '(no name)'} | email={c.email} | phone={c.phone or '(none)'}")
    print()


def print_orders(session):
    print(line("="))
    print("Orders (with items)")
    print(line("="))
    orders = session.query(Order).options(selectinload(Order.items)).order_by(Order.created_at).all()
    print(f"Total orders: {len(orders)}")
    for o in orders:
        print(
            f"\nOrder #{o.short_id} | customer={o.customer_name} (user_id={o.user_id}) | "
            f"status={status_label(o.order_status)} | payment={o.payment_status.value} | total={o.total:.2f}"
        )
        print(f"  Placed: {format_date(o.created_at)}")
        print(f"  Items: {len(o.items)}")
        for it in o.items:
            print(f"    - {it.quantity} x {it.name} (product_id={it.product_id}) @ {it.price:.2f}")
    print()


def main():
    session = SessionLocal()
    try:
        print(f"DB Inspection at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print_products(session)
        print_customers(session)
        print_orders(session)
        print(line("="))
        print("End of database inspection")
        print(line("="))
    finally:
        session.close()


if __name__ == "__main__":
    main()
