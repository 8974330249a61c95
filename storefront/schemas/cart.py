from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from storefront.schemas.common import Money


class LineItemCreate(BaseModel):
    product_id: int


class LineItemResponse(BaseModel):
    id: int
    product_id: int
    cart_id: int
    quantity: int

    class Config:
        from_attributes = True


class CartLineResponse(BaseModel):
    id: int
    product_id: int
    product_name: Optional[str]
    quantity: int
    unit_price: Optional[Money]
    line_price: Money


class CartResponse(BaseModel):
    id: int
    created_at: datetime
    line_items: List[CartLineResponse]
    total_items: int
    total_price: Money
