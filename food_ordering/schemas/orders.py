from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictInt


class OrderLineIn(BaseModel):
    menu_item_id: StrictInt
    # range is checked by the order service so the error names the item
    quantity: StrictInt


class OrderCreate(BaseModel):
    items: List[OrderLineIn] = Field(default_factory=list)
    payment_method: Optional[str] = None
    discount_type: Optional[str] = None


class OrderSummaryOut(BaseModel):
    id: int
    totalAmount: float
    discountAmount: float
    finalAmount: float


class OrderCreatedOut(BaseModel):
    success: bool = True
    message: str
    order: OrderSummaryOut


class OrderLineOut(BaseModel):
    id: int
    menu_item_id: int
    quantity: int
    price: float
    name: str


class OrderOut(BaseModel):
    id: int
    items: List[OrderLineOut]
    totalAmount: float
    discountAmount: float
    finalAmount: float
    payment_method: str
    discount_type: Optional[str] = None
    created_at: Optional[datetime] = None
