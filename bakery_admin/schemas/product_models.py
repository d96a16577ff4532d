"""Product catalog models.

Input fields are kept loose (optional, coercible) so the catalog service can
report the same field-level messages the dashboard form shows.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

class ProductIn(BaseModel):
    name: str = ""
    category: Optional[str] = None
    price: Optional[float] = None
    quantity: int = 0
    description: str = ""
    is_new: bool = False
    image_url: str = ""

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    price: float
    quantity: int
    description: str
    in_stock: bool
    is_new: bool
    image_url: str
    created_at: datetime
    updated_at: datetime
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

class ProductListResponse(BaseModel):
    items: List[ProductOut]
    total: int
    category_counts: Dict[str, int] = Field(default_factory=dict)

class Category(BaseModel):
    id: str
    name: str
    count: int = 0
