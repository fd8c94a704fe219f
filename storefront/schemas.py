from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# Order-status email payload. Orders are owned by the checkout service;
# this is only what the notification needs to render.
class ShippingInfo(BaseModel):
    address: str
    city: str
    state: str
    country: str


class OrderItem(BaseModel):
    name: str
    image: Optional[str] = None
    quantity: int = Field(..., ge=1)
    size: Optional[int] = None
    price: float


class OrderNotification(BaseModel):
    id: str
    order_status: str
    created_at: datetime
    shipping_info: ShippingInfo
    order_items: List[OrderItem]
    items_price: float
    shipping_price: float
    total_price: float
