from typing import List, Optional, Tuple

from storefront.models.product import Product
from sqlalchemy import func
from sqlalchemy.orm import Session

SORT_OPTIONS = {
    "newest": (Product.created_at.desc(), Product.id.desc()),
    "price_asc": (Product.price.asc(), Product.id.asc()),
    "price_desc": (Product.price.desc(), Product.id.asc()),
    "name_asc": (Product.name.asc(), Product.id.asc()),
}


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get(self, product_id: int) -> Optional[Product]:
        """Return the product whatever its is_active flag (callers decide)."""
        return self.db.get(Product, product_id)

    def get_active(self, product_id: int) -> Optional[Product]:
        return (
            self.db.query(Product)
            .filter(Product.id == product_id, Product.is_active == True)
            .first()
        )

    def list(
        self,
        category: Optional[str] = None,
        sort_by: str = "newest",
        q: Optional[str] = None,
        page: int = 1,
        size: int = 20,
    ) -> Tuple[List[Product], int]:
        query = self.db.query(Product).filter(Product.is_active == True)
        if category:
            query = query.filter(Product.category == category)
        if q:
            like = f"%{q}%"
            query = query.filter(
                (Product.name.ilike(like)) | (Product.description.ilike(like))
            )
        total = query.with_entities(func.count()).scalar() or 0
        order = SORT_OPTIONS.get(sort_by, SORT_OPTIONS["newest"])
        items = query.order_by(*order).offset((page - 1) * size).limit(size).all()
        return items, total

    def featured(self, limit: int = 6) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.is_active == True)
            .order_by(*SORT_OPTIONS["newest"])
            .limit(limit)
            .all()
        )

    def create_or_update(
        self,
        name: str,
        price: int,
        stock_quantity: int = 0,
        category: str = None,
        description: str = None,
        image_url: str = None,
        is_active: bool = True,
    ) -> Product:
        # products have no natural key besides the name in seed data
        p = self.db.query(Product).filter(Product.name == name).first()
        if p:
            p.price = price
            p.stock_quantity = stock_quantity
            p.category = category
            p.description = description
            p.image_url = image_url
            p.is_active = is_active
        else:
            p = Product(
                name=name,
                price=price,
                stock_quantity=stock_quantity,
                category=category,
                description=description,
                image_url=image_url,
                is_active=is_active,
            )
            self.db.add(p)
        self.db.flush()
        return p
