"""Pydantic models for API I/O shared across routers.

Entity-specific request/response models live in their own modules
(product_models, order_models, customer_models, ...).
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

class ErrorResponse(BaseModel):
    detail: str
    code: str
    details: Dict[str, Any] = Field(default_factory=dict)

class MessageResponse(BaseModel):
    success: bool = True
    message: str

class LoginRequest(BaseModel):
    email: str
    password: str

class AdminUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str

class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: AdminUser

class HealthResponse(BaseModel):
    status: str
    time: Optional[datetime] = None
