from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, contains_eager

from storefront.models.cart_item import CartItem
from storefront.models.product import Product


class CartRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, item_id: int) -> Optional[CartItem]:
        return self.db.get(CartItem, item_id)

    def get_line(self, user_id: str, product_id: int) -> Optional[CartItem]:
        return (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .first()
        )

    def lines_with_products(
        self, user_id: str, active_only: bool = False
    ) -> List[CartItem]:
        """
        Cart lines joined with their product, oldest first. The inner join drops
        lines whose product row no longer exists.
        """
        qry = (
            self.db.query(CartItem)
            .join(CartItem.product)
            .options(contains_eager(CartItem.product))
            .filter(CartItem.user_id == user_id)
        )
        if active_only:
            qry = qry.filter(Product.is_active == True)
        return qry.order_by(CartItem.created_at, CartItem.id).all()

    def count(self, user_id: str) -> int:
        return self.db.query(CartItem).filter(CartItem.user_id == user_id).count()

    def add_line(self, user_id: str, product_id: int, quantity: int) -> CartItem:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
        self.db.add(item)
        self.db.flush()
        return item

    def set_quantity(self, item: CartItem, quantity: int) -> CartItem:
        item.quantity = quantity
        self.db.flush()
        return item

    def remove(self, item: CartItem):
        self.db.delete(item)
        self.db.flush()

    def remove_products(self, user_id: str, product_ids: Iterable[int]) -> int:
        """Delete the user's lines for exactly these products; returns rows deleted."""
        ids = list(product_ids)
        if not ids:
            return 0
        n = (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.product_id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return n

    def remove_all_for_user(self, user_id: str) -> int:
        n = (
            self.db.query(CartItem)
            .filter(CartItem.user_id == user_id)
            .delete(synchronize_session=False)
        )
        self.db.flush()
        return n
