from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, Boolean, JSON, Text
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base
import enum
import uuid

class UserRole(str, enum.Enum):
    admin = "admin"
    user = "user"

class OrderStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"

class PaymentStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"

PRODUCT_CATEGORIES = ("cakes", "pastries", "breads", "cookies", "beverages", "other")


def _new_order_id() -> str:
    return uuid.uuid4().hex


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default="other")
    price = Column(Float, nullable=False, default=0.0)
    quantity = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, nullable=False, default=False)
    is_new = Column(Boolean, nullable=False, default=False)
    image_url = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, default="")
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    address = Column(JSON, nullable=True)  # street, city, state, zip_code
    photo_url = Column(String, nullable=True)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.user)
    password_hash = Column(String, nullable=True)  # only admins sign in
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    orders = relationship("Order", back_populates="user")

class Order(Base):
    __tablename__ = "orders"

    id = Column(String(32), primary_key=True, default=_new_order_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    customer_name = Column(String, nullable=False, default="Anonymous")
    order_status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.pending, index=True)
    payment_status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.pending)
    payment_method = Column(String, nullable=False, default="COD")
    subtotal = Column(Float, nullable=False, default=0.0)
    shipping = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    total = Column(Float, nullable=False, default=0.0)
    delivery_date = Column(DateTime, nullable=True)
    address = Column(JSON, nullable=True)  # street, city, state, zip_code, email, mobile
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

    @property
    def short_id(self) -> str:
        return self.id[-8:]

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(32), ForeignKey("orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False, default="")
    price = Column(Float, nullable=False, default=0.0)
    quantity = Column(Integer, nullable=False, default=1)

    order = relationship("Order", back_populates="items")

class StoreSettings(Base):
    __tablename__ = "store_settings"

    key = Column(String, primary_key=True)
    document = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

class StoredPrediction(Base):
    __tablename__ = "stored_predictions"

    id = Column(Integer, primary_key=True, index=True)
    prediction_type = Column(String, nullable=False)
    item_name = Column(String, nullable=True)
    date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    predicted_value = Column(Float, nullable=False)
    stored_at = Column(DateTime, nullable=False, default=datetime.now)
