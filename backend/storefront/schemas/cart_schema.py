from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from storefront.schemas.product_schema import ProductOut


class CartLineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    created_at: Optional[datetime] = None
    product: ProductOut


class CartSummaryOut(BaseModel):
    item_count: int
    subtotal: int
    shipping_fee: int
    total: int
    free_shipping_remaining: int
    # "NAME (current stock: N)" / "NAME (no longer on sale)" lines left out of the subtotal
    unavailable: List[str] = []
