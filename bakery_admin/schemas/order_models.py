"""Order related pydantic models with stricter types.

- Use Enum for statuses to prevent invalid values on output.
- Status updates take a plain string so the workflow can report unknown
  statuses itself.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional

from ..data.models import OrderStatus, PaymentStatus

class OrderAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None

class OrderItemIn(BaseModel):
    product_id: int
    quantity: int = Field(default=1, ge=1)

class OrderCreate(BaseModel):
    items: List[OrderItemIn] = Field(min_length=1)
    user_id: Optional[int] = None
    customer_name: Optional[str] = None
    payment_method: str = "COD"
    address: Optional[OrderAddress] = None
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    tax: float = Field(default=0.0, ge=0)

class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: Optional[int] = None
    name: str
    price: float
    quantity: int

class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    short_id: str
    user_id: Optional[int] = None
    customer_name: str
    order_status: OrderStatus
    payment_status: PaymentStatus
    payment_method: str
    subtotal: float
    shipping: float
    tax: float
    total: float
    delivery_date: Optional[datetime] = None
    address: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    items: List[OrderItemOut] = Field(default_factory=list)

class OrderDetail(OrderOut):
    status_label: str
    progress_step: Optional[int] = None
    items_subtotal: float
    next_statuses: List[str]
    created_relative: str
    created_display: str
    updated_display: str

class OrderListResponse(BaseModel):
    items: List[OrderOut]
    total: int
    page: int
    page_size: int
    has_more: bool

class StatusUpdate(BaseModel):
    status: str

class StatusInfo(BaseModel):
    value: str
    label: str
    next_statuses: List[str]
    step: Optional[int] = None
