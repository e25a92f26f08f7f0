from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.cart_item import CartItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.services import pricing
from storefront.services.errors import (
    CartUpdateFailed,
    Forbidden,
    InsufficientStock,
    InvalidQuantity,
    NotFound,
    ProductInactive,
)
from storefront.services.identity import require_user
from storefront.utils.logging import get_logger
from storefront.utils.transactions import smart_transaction

log = get_logger("storefront.cart")


@dataclass
class CartSummary:
    item_count: int
    subtotal: int
    shipping_fee: int
    total: int
    free_shipping_remaining: int
    unavailable: List[str]


class CartService:
    def __init__(self, db: Session):
        self.db = db
        self.cart_repo = CartRepository(db)
        self.product_repo = ProductRepository(db)

    def _owned_line(self, user_id: str, item_id: int) -> CartItem:
        item = self.cart_repo.get(item_id)
        if not item:
            raise NotFound("Cart item not found.")
        if item.user_id != user_id:
            raise Forbidden("This cart item belongs to another user.")
        return item

    def _write(self, fn, *args):
        """Run a repository write in a transaction and commit it."""
        try:
            with smart_transaction(self.db):
                result = fn(*args)
            self.db.commit()
            return result
        except SQLAlchemyError as e:
            self.db.rollback()
            log.exception("cart write failed")
            raise CartUpdateFailed() from e

    def add_item(
        self, user_id: Optional[str], product_id: int, quantity: int
    ) -> Tuple[CartItem, str]:
        user_id = require_user(user_id)
        if quantity < 1:
            raise InvalidQuantity()

        product = self.product_repo.get(product_id)
        if not product:
            raise NotFound("Product not found.")
        if not product.is_active:
            raise ProductInactive(f"{product.name} is no longer on sale.")

        existing = self.cart_repo.get_line(user_id, product_id)
        new_qty = (existing.quantity if existing else 0) + quantity
        if new_qty > product.stock_quantity:
            raise InsufficientStock(
                f"Not enough stock for {product.name}. "
                f"(current stock: {product.stock_quantity})"
            )

        if existing:
            item = self._write(self.cart_repo.set_quantity, existing, new_qty)
            msg = f"Added {quantity} x {product.name} to the cart. (total {new_qty})"
        else:
            item = self._write(self.cart_repo.add_line, user_id, product_id, quantity)
            msg = f"Added {quantity} x {product.name} to the cart."
        return item, msg

    def update_quantity(
        self, user_id: Optional[str], item_id: int, quantity: int
    ) -> Tuple[Optional[CartItem], str]:
        """
        Set a line to an absolute quantity. Zero or less removes the line and
        returns (None, message).
        """
        user_id = require_user(user_id)
        if quantity <= 0:
            return None, self.remove_item(user_id, item_id)

        item = self._owned_line(user_id, item_id)
        product = self.product_repo.get(item.product_id)
        if not product:
            raise NotFound("Product not found.")
        if quantity > product.stock_quantity:
            raise InsufficientStock(
                f"Not enough stock for {product.name}. "
                f"(current stock: {product.stock_quantity})"
            )

        item = self._write(self.cart_repo.set_quantity, item, quantity)
        return item, f"Quantity changed to {quantity}."

    def remove_item(self, user_id: Optional[str], item_id: int) -> str:
        user_id = require_user(user_id)
        item = self._owned_line(user_id, item_id)
        self._write(self.cart_repo.remove, item)
        return "Item removed from the cart."

    def get_cart(self, user_id: Optional[str]) -> List[CartItem]:
        user_id = require_user(user_id)
        return self.cart_repo.lines_with_products(user_id)

    def count(self, user_id: Optional[str]) -> int:
        if not user_id:
            return 0
        return self.cart_repo.count(user_id)

    def summary(self, user_id: Optional[str]) -> CartSummary:
        """
        Checkout preview. Only lines whose product is on sale and has enough
        stock count towards the subtotal; the rest are reported as unavailable.
        """
        lines = self.get_cart(user_id)
        priced = []
        unavailable = []
        for line in lines:
            p = line.product
            if not p.is_active:
                unavailable.append(f"{p.name} (no longer on sale)")
            elif p.stock_quantity < line.quantity:
                unavailable.append(f"{p.name} (current stock: {p.stock_quantity})")
            else:
                priced.append((p.price, line.quantity))

        b = pricing.price_breakdown(pricing.subtotal_of(priced))
        return CartSummary(
            item_count=len(lines),
            subtotal=b.subtotal,
            shipping_fee=b.shipping_fee,
            total=b.total,
            free_shipping_remaining=b.free_shipping_remaining,
            unavailable=unavailable,
        )
