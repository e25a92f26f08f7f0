#!/usr/bin/env python3
"""
Seed the catalogue, either from a JSON file or from the built-in sample set.

The JSON may be a list of product entries or an object with an "items" list.
Each entry needs a name and a price; stock_quantity, category, description,
image_url and is_active are optional.

Usage:
    python scripts/seed_products.py                    # built-in sample catalogue
    python scripts/seed_products.py --file products.json
    python scripts/seed_products.py --reset            # drop & recreate tables first
"""
import argparse
import json
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from storefront.db import SessionLocal, init_db
from storefront.models.product import CATEGORY_IDS
from storefront.repositories.product_repo import ProductRepository

SAMPLE_PRODUCTS = [
    {"name": "Wireless Earbuds", "price": 89000, "stock_quantity": 40, "category": "electronics"},
    {"name": "USB-C Charger 65W", "price": 35000, "stock_quantity": 120, "category": "electronics"},
    {"name": "Cotton Crew T-Shirt", "price": 19000, "stock_quantity": 200, "category": "clothing"},
    {"name": "Denim Jacket", "price": 79000, "stock_quantity": 15, "category": "clothing"},
    {"name": "Intro to Algorithms", "price": 42000, "stock_quantity": 30, "category": "books"},
    {"name": "Pocket Poetry", "price": 9800, "stock_quantity": 60, "category": "books"},
    {"name": "Single Origin Coffee 500g", "price": 24000, "stock_quantity": 80, "category": "food"},
    {"name": "Green Tea 100 bags", "price": 12000, "stock_quantity": 0, "category": "food"},
    {"name": "Yoga Mat", "price": 31000, "stock_quantity": 25, "category": "sports"},
    {"name": "Running Socks 3-pack", "price": 8900, "stock_quantity": 150, "category": "sports"},
    {"name": "Daily Moisturizer", "price": 27000, "stock_quantity": 45, "category": "beauty"},
    {"name": "Linen Throw Pillow", "price": 23000, "stock_quantity": 35, "category": "home"},
    {"name": "Ceramic Mug (retired)", "price": 11000, "stock_quantity": 10, "category": "home", "is_active": False},
]


def _normalize_entry(entry):
    """Return a normalized dict with the ProductRepository.create_or_update keywords."""
    name = entry.get("name") or entry.get("title") or ""
    try:
        price = int(entry.get("price", 0) or 0)
    except (TypeError, ValueError):
        price = 0
    try:
        stock = int(entry.get("stock_quantity", entry.get("stock", 0)) or 0)
    except (TypeError, ValueError):
        stock = 0
    category = entry.get("category")
    if category not in CATEGORY_IDS:
        category = None

    return {
        "name": name,
        "price": max(price, 0),
        "stock_quantity": max(stock, 0),
        "category": category,
        "description": entry.get("description") or None,
        "image_url": entry.get("image_url") or entry.get("image"),
        "is_active": bool(entry.get("is_active", True)),
    }


def load_entries(path: str):
    if not os.path.exists(path):
        raise FileNotFoundError(path)

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Failed to parse JSON from {path}: {e}")

    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    if isinstance(data, list):
        return data
    return []


def seed(entries) -> int:
    db = SessionLocal()
    repo = ProductRepository(db)
    created = 0
    try:
        for entry in entries:
            e = _normalize_entry(entry)
            if not e["name"]:
                continue
            repo.create_or_update(**e)
            created += 1
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--file", "-f", default=None, help="Path to a product json file")
    parser.add_argument("--reset", action="store_true", help="Drop and recreate all tables first")
    args = parser.parse_args()

    init_db(reset=args.reset)
    entries = load_entries(args.file) if args.file else SAMPLE_PRODUCTS
    print("Seeded products:", seed(entries))
