from typing import Optional

from storefront.api.auth import get_current_user_id
from storefront.api.responses import failure, success, unexpected
from storefront.db import get_db
from storefront.schemas.cart_schema import CartLineOut, CartSummaryOut
from storefront.services.cart_service import CartService
from storefront.services.errors import StorefrontError
from storefront.utils.logging import get_logger
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

router = APIRouter(prefix="/api/cart", tags=["cart"])
log = get_logger("storefront.api.cart")


class AddItemIn(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class UpdateQuantityIn(BaseModel):
    # zero or negative removes the line
    quantity: int


@router.get("", summary="Get cart")
def get_cart(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    svc = CartService(db)
    try:
        lines = svc.get_cart(user_id)
        return success([CartLineOut.model_validate(line) for line in lines])
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("get_cart failed")
        return unexpected()


@router.get("/count", summary="Number of cart lines")
def get_cart_count(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    try:
        return {"count": CartService(db).count(user_id)}
    except Exception:
        log.exception("get_cart_count failed")
        return {"count": 0, "error": "Failed to load the cart count."}


@router.get("/summary", summary="Checkout preview: subtotal, shipping and total")
def get_cart_summary(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    svc = CartService(db)
    try:
        s = svc.summary(user_id)
        return success(CartSummaryOut(**s.__dict__))
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("get_cart_summary failed")
        return unexpected()


@router.post("/items", summary="Add item to cart")
def add_item(
    payload: AddItemIn,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    svc = CartService(db)
    try:
        item, msg = svc.add_item(user_id, payload.product_id, payload.quantity)
        return success(
            {"item_id": item.id, "product_id": item.product_id, "quantity": item.quantity},
            message=msg,
        )
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("add_item failed")
        return unexpected()


@router.patch("/items/{item_id}", summary="Change item quantity")
def update_quantity(
    item_id: int,
    payload: UpdateQuantityIn,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    svc = CartService(db)
    try:
        item, msg = svc.update_quantity(user_id, item_id, payload.quantity)
        data = {"item_id": item.id, "quantity": item.quantity} if item else None
        return success(data, message=msg)
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("update_quantity failed")
        return unexpected()


@router.delete("/items/{item_id}", summary="Remove item")
def remove_item(
    item_id: int,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    svc = CartService(db)
    try:
        return success(message=svc.remove_item(user_id, item_id))
    except StorefrontError as e:
        return failure(e)
    except Exception:
        log.exception("remove_item failed")
        return unexpected()
