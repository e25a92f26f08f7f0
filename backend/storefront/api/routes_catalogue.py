from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Literal, Optional
from sqlalchemy.orm import Session
from storefront.config import settings
from storefront.db import get_db
from storefront.models.product import PRODUCT_CATEGORIES
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product_schema import CategoryOut, ProductOut

router = APIRouter(tags=["catalogue"])

def _to_dict(p):
    return ProductOut.model_validate(p).model_dump(mode="json")

@router.get("", summary="List products")
def list_products(
    category: Optional[str] = Query(None, description="category id, e.g. books"),
    sort_by: Literal["newest", "price_asc", "price_desc", "name_asc"] = Query("newest"),
    q: Optional[str] = Query(None, description="search term"),
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
):
    repo = ProductRepository(db)
    items, total = repo.list(category=category, sort_by=sort_by, q=q, page=page, size=size)
    return {
        "items": [_to_dict(p) for p in items],
        "total": total,
    }

@router.get("/featured", summary="Newest products for the home page")
def featured_products(
    limit: int = Query(settings.FEATURED_LIMIT, ge=1, le=50),
    db: Session = Depends(get_db),
):
    repo = ProductRepository(db)
    return {"items": [_to_dict(p) for p in repo.featured(limit=limit)]}

@router.get("/categories", summary="Product categories")
def list_categories():
    return [CategoryOut(id=cid, label=label, description=desc).model_dump() for cid, label, desc in PRODUCT_CATEGORIES]

@router.get("/{product_id}", summary="Get product by id")
def get_product(product_id: int, db: Session = Depends(get_db)):
    repo = ProductRepository(db)
    p = repo.get_active(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="Product not found")
    return _to_dict(p)
