from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime

from storefront.models.order import PayType
from storefront.schemas.common import Money


class OrderCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1)
    email: EmailStr
    pay_type: PayType


class OrderUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    pay_type: Optional[PayType] = None


class OrderItemResponse(BaseModel):
    product_id: Optional[int]
    product_name: str
    quantity: int
    unit_price: Money
    total_price: Money

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    name: str
    address: str
    email: str
    pay_type: PayType
    total_amount: Money
    created_at: datetime
    items: List[OrderItemResponse]

    class Config:
        from_attributes = True
