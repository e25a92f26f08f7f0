from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, Text

from storefront.db import Base

# (id, label, description) of every catalogue category
PRODUCT_CATEGORIES = [
    ("electronics", "Electronics", "The latest electronics and gadgets"),
    ("clothing", "Clothing", "Fashion items and apparel"),
    ("books", "Books", "Books and study material"),
    ("food", "Food", "Fresh food and drinks"),
    ("sports", "Sports", "Sports goods and fitness gear"),
    ("beauty", "Beauty", "Cosmetics and beauty products"),
    ("home", "Home & Living", "Home decor and household goods"),
]
CATEGORY_IDS = [c[0] for c in PRODUCT_CATEGORIES]


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint(
            "stock_quantity >= 0", name="ck_products_stock_non_negative"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(256), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False, default=0)
    image_url = Column(String(512), nullable=True)
    stock_quantity = Column(Integer, nullable=False, default=0)
    category = Column(String(32), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"
