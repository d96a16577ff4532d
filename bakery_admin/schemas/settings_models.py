"""Store settings document.

Field defaults are the values the settings page starts from before anything
has been saved.
"""
from pydantic import BaseModel, Field, model_validator
from typing import Optional

class StoreSettingsModel(BaseModel):
    # Store Information
    store_name: str = ""
    store_email: str = ""
    store_phone: str = ""
    store_address: str = ""

    # Regional Settings
    timezone: str = "Asia/Kolkata"
    currency: str = "INR"
    date_format: str = "DD/MM/YYYY"
    time_format: str = "24"

    # Order Settings
    minimum_order_amount: float = Field(default=0, ge=0)
    maximum_order_amount: float = Field(default=10000, ge=0)
    order_cancellation_time: int = Field(default=30, ge=0)  # minutes

    # Delivery Settings
    delivery_radius: float = Field(default=10, ge=0)  # km
    delivery_charges: float = Field(default=40, ge=0)
    free_delivery_threshold: float = Field(default=500, ge=0)

    # Notification Settings
    enable_order_notifications: bool = True
    enable_low_stock_alerts: bool = True
    enable_customer_review_notifications: bool = True

    # System Settings
    maintenance_mode: bool = False
    debug_mode: bool = False
    enable_backups: bool = True

    @model_validator(mode="after")
    def check_order_bounds(self):
        if self.minimum_order_amount > self.maximum_order_amount:
            raise ValueError("minimum_order_amount cannot exceed maximum_order_amount")
        return self

class StoreSettingsUpdate(BaseModel):
    store_name: Optional[str] = None
    store_email: Optional[str] = None
    store_phone: Optional[str] = None
    store_address: Optional[str] = None
    timezone: Optional[str] = None
    currency: Optional[str] = None
    date_format: Optional[str] = None
    time_format: Optional[str] = None
    minimum_order_amount: Optional[float] = None
    maximum_order_amount: Optional[float] = None
    order_cancellation_time: Optional[int] = None
    delivery_radius: Optional[float] = None
    delivery_charges: Optional[float] = None
    free_delivery_threshold: Optional[float] = None
    enable_order_notifications: Optional[bool] = None
    enable_low_stock_alerts: Optional[bool] = None
    enable_customer_review_notifications: Optional[bool] = None
    maintenance_mode: Optional[bool] = None
    debug_mode: Optional[bool] = None
    enable_backups: Optional[bool] = None
