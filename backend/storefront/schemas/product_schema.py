# backend/storefront/schemas/product_schema.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from pydantic import ConfigDict

class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    name: str
    description: Optional[str] = None
    price: int
    image_url: Optional[str] = None
    stock_quantity: int
    category: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

class CategoryOut(BaseModel):
    id: str
    label: str
    description: str
