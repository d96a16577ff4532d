"""
Shared fixtures for the bakery admin test suite.

Each test case gets its own in-memory SQLite database (StaticPool keeps the
single connection alive across sessions) and, for API tests, a TestClient
whose database and session-store dependencies point at that database.
"""

import os
import sys
from datetime import datetime

# Make the package importable when running from a source checkout
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("USE_REDIS", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bakery_admin.data.database import create_tables, get_db
from bakery_admin.data.models import Order, OrderItem, OrderStatus, PaymentStatus, Product, User, UserRole
from bakery_admin.utils.security import hash_password

ADMIN_EMAIL = "owner@bakery.test"
ADMIN_PASSWORD = "s3cret-pass"


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_product(db, name="Chocolate Cake", category="cakes", price=250.0, quantity=10, **extra):
    product = Product(
        name=name,
        category=category,
        price=price,
        quantity=quantity,
        in_stock=quantity > 0,
        description=extra.pop("description", ""),
        **extra,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


def add_user(db, name="Asha", email="asha@example.com", role=UserRole.user, password=None, created_at=None):
    user = User(
        name=name,
        email=email,
        role=role,
        password_hash=hash_password(password) if password else None,
        created_at=created_at or datetime.now(),
        updated_at=created_at or datetime.now(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_admin(db, email=ADMIN_EMAIL, password=ADMIN_PASSWORD):
    return add_user(db, name="Owner", email=email, role=UserRole.admin, password=password)


def add_order(db, items, status=OrderStatus.pending, created_at=None, user=None,
              payment_method="COD", payment_status=PaymentStatus.pending, customer_name=None,
              address=None, total=None):
    """Insert an order directly. `items` is a list of (name, price, quantity[, product]) tuples."""
    created_at = created_at or datetime.now()
    order_items = []
    for entry in items:
        name, price, quantity = entry[:3]
        product = entry[3] if len(entry) > 3 else None
        order_items.append(OrderItem(
            name=name,
            price=price,
            quantity=quantity,
            product_id=product.id if product is not None else None,
        ))
    subtotal = round(sum(i.price * i.quantity for i in order_items), 2)
    order = Order(
        user_id=user.id if user is not None else None,
        customer_name=customer_name or (user.name if user is not None else "Anonymous"),
        order_status=status,
        payment_status=payment_status,
        payment_method=payment_method,
        subtotal=subtotal,
        total=subtotal if total is None else total,
        address=address,
        created_at=created_at,
        updated_at=created_at,
        items=order_items,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    return order


def make_client(session_factory):
    """TestClient wired to the given database plus an in-memory session store."""
    from fastapi.testclient import TestClient

    from bakery_admin.app.main import app
    from bakery_admin.app.session import SessionManager, get_session_manager

    sessions = SessionManager(use_redis=False)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_manager] = lambda: sessions
    return TestClient(app), sessions


def clear_overrides():
    from bakery_admin.app.main import app
    app.dependency_overrides.clear()
