from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ShippingAddressOut(BaseModel):
    name: str
    phone: str
    zip_code: str
    address: str
    detail_address: Optional[str] = None


class OrderItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: Optional[int] = None
    product_name: str
    quantity: int
    price: int


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    status: str
    total_amount: int
    shipping_fee: int
    shipping_address: Optional[ShippingAddressOut] = None
    order_note: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class OrderDetailOut(OrderOut):
    items: List[OrderItemOut] = []
