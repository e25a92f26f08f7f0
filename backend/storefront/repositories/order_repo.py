from typing import Dict, List, Optional
from uuid import uuid4

from sqlalchemy.orm import Session, selectinload

from storefront.models.order import Order, OrderItem, OrderStatus


class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def _gen_order_number(self) -> str:
        return f"ORD-{uuid4().hex[:10].upper()}"

    def create(
        self,
        user_id: str,
        total_amount: int,
        shipping_fee: int,
        shipping_address: Dict,
        order_note: Optional[str] = None,
    ) -> Order:
        order = Order(
            order_number=self._gen_order_number(),
            user_id=user_id,
            status=OrderStatus.PENDING.value,
            total_amount=total_amount,
            shipping_fee=shipping_fee,
            shipping_address=shipping_address,
            order_note=order_note,
        )
        self.db.add(order)
        self.db.flush()  # assigns order.id for the item rows
        return order

    def add_items(self, order: Order, items: List[Dict]) -> List[OrderItem]:
        """items: list of {product_id, product_name, quantity, price}"""
        rows = [OrderItem(order_id=order.id, **it) for it in items]
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def get_for_user(self, order_id: int, user_id: str) -> Optional[Order]:
        # the owner filter lives in the query: someone else's order is simply absent
        return (
            self.db.query(Order)
            .options(selectinload(Order.items))
            .filter(Order.id == order_id, Order.user_id == user_id)
            .first()
        )

    def list_for_user(self, user_id: str) -> List[Order]:
        return (
            self.db.query(Order)
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def remove_all_for_user(self, user_id: str) -> int:
        orders = self.db.query(Order).filter(Order.user_id == user_id).all()
        for o in orders:
            self.db.delete(o)  # items go with it (delete-orphan cascade)
        self.db.flush()
        return len(orders)
