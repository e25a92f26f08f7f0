from fastapi import APIRouter, Depends
from typing import Optional
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session
from storefront.api.auth import get_current_user_id
from storefront.api.responses import failure, success, unexpected
from storefront.db import get_db
from storefront.schemas.order_schema import OrderDetailOut, OrderOut
from storefront.services.errors import StorefrontError
from storefront.services.order_service import OrderService, ShippingInfo
from storefront.utils.logging import get_logger

router = APIRouter(tags=["orders"])
log = get_logger("storefront.api.order")

class PlaceOrderIn(BaseModel):
    name: str = Field(..., min_length=2)
    phone: str = Field(..., pattern=r"^010-\d{4}-\d{4}$")
    zip_code: str = Field(..., pattern=r"^\d{5}$")
    address: str = Field(..., min_length=5)
    detail_address: Optional[str] = None
    order_note: Optional[str] = None

@router.post("", summary="Place an order from the cart (checkout)")
def place_order(payload: PlaceOrderIn, db: Session = Depends(get_db), user_id: Optional[str] = Depends(get_current_user_id)):
    svc = OrderService(db)
    try:
        order = svc.place_order(user_id, ShippingInfo(**payload.model_dump()))
        return success({"order_id": order.id, "order_number": order.order_number}, message="Order placed.")
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("place_order failed")
        return unexpected()

@router.get("", summary="List my orders, newest first")
def list_orders(db: Session = Depends(get_db), user_id: Optional[str] = Depends(get_current_user_id)):
    svc = OrderService(db)
    try:
        return success([OrderOut.model_validate(o) for o in svc.list_orders(user_id)])
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("list_orders failed")
        return unexpected()

@router.get("/{order_id}", summary="Get one of my orders with its items")
def get_order(order_id: int, db: Session = Depends(get_db), user_id: Optional[str] = Depends(get_current_user_id)):
    svc = OrderService(db)
    try:
        return success(OrderDetailOut.model_validate(svc.get_order(user_id, order_id)))
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("get_order failed")
        return unexpected()
