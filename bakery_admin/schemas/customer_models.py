from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional

class CustomerAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[CustomerAddress] = None
    photo_url: Optional[str] = None
    created_at: datetime
    order_count: int = 0
    joined_display: str = ""

class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[CustomerAddress] = None
