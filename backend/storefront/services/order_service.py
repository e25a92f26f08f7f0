from dataclasses import dataclass
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.order import Order
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.services import pricing
from storefront.services.errors import EmptyCart, InsufficientStock, NotFound, OrderFailed
from storefront.services.identity import require_user
from storefront.utils.logging import get_logger
from storefront.utils.transactions import smart_transaction

log = get_logger("storefront.order")


@dataclass
class ShippingInfo:
    name: str
    phone: str
    zip_code: str
    address: str
    detail_address: Optional[str] = None
    order_note: Optional[str] = None

    def address_snapshot(self) -> Dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "zip_code": self.zip_code,
            "address": self.address,
            "detail_address": self.detail_address,
        }


class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.order_repo = OrderRepository(db)

    def place_order(self, user_id: Optional[str], shipping: ShippingInfo) -> Order:
        """
        Turn the caller's cart into a pending order.

        Every cart line (active products only) is checked against current stock
        first; if any line is short the whole order is refused and all short
        products are reported together. Otherwise the order header, its items
        and the removal of the ordered cart lines are written in a single
        transaction: either all three land or none do.
        """
        user_id = require_user(user_id)

        lines = self.cart_repo.lines_with_products(user_id, active_only=True)
        if not lines:
            raise EmptyCart()

        short = [
            f"{line.product.name} (current stock: {line.product.stock_quantity})"
            for line in lines
            if line.product.stock_quantity < line.quantity
        ]
        if short:
            raise InsufficientStock(
                "Not enough stock for the following products:\n" + "\n".join(short),
                items=short,
            )

        subtotal = pricing.subtotal_of((line.product.price, line.quantity) for line in lines)
        fee = pricing.shipping_fee(subtotal)
        total = subtotal + fee

        # snapshot name/price now; later catalogue edits must not alter the order
        items: List[Dict] = [
            {
                "product_id": line.product_id,
                "product_name": line.product.name,
                "quantity": line.quantity,
                "price": line.product.price,
            }
            for line in lines
        ]
        ordered_ids = [line.product_id for line in lines]

        try:
            with smart_transaction(self.db):
                order = self.order_repo.create(
                    user_id=user_id,
                    total_amount=total,
                    shipping_fee=fee,
                    shipping_address=shipping.address_snapshot(),
                    order_note=shipping.order_note or None,
                )
                self.order_repo.add_items(order, items)
                self.cart_repo.remove_products(user_id, ordered_ids)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("order placement rolled back for user=%s", user_id)
            raise OrderFailed() from e

        self.db.refresh(order)
        log.info(
            "order placed id=%s number=%s user=%s lines=%d total=%d",
            order.id,
            order.order_number,
            user_id,
            len(items),
            total,
        )
        return order

    def get_order(self, user_id: Optional[str], order_id: int) -> Order:
        user_id = require_user(user_id)
        order = self.order_repo.get_for_user(order_id, user_id)
        if not order:
            # same answer for "missing" and "someone else's"
            raise NotFound("Order not found.")
        return order

    def list_orders(self, user_id: Optional[str]) -> List[Order]:
        user_id = require_user(user_id)
        return self.order_repo.list_for_user(user_id)
