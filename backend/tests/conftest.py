import os
import tempfile

# must be set before anything imports storefront.config
_tmpdir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmpdir, "test.db")
os.environ["WEBHOOK_SECRET"] = "whsec_dGVzdC13ZWJob29rLXNlY3JldA=="
os.environ["RESET_DB"] = "false"

import pytest
from fastapi.testclient import TestClient

from storefront.db import SessionLocal, init_db
from storefront.main import app
from storefront.models.product import Product

USER = "user_alice"
OTHER_USER = "user_bob"


@pytest.fixture(autouse=True)
def fresh_db():
    init_db(reset=True)
    yield


@pytest.fixture
def db():
    s = SessionLocal()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth():
    return {"X-User-Id": USER}


@pytest.fixture
def other_auth():
    return {"X-User-Id": OTHER_USER}


@pytest.fixture
def make_product(db):
    def _make(name="Test Coffee", price=10000, stock_quantity=10, is_active=True, category="food"):
        p = Product(
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            is_active=is_active,
            category=category,
        )
        db.add(p)
        db.commit()
        db.refresh(p)
        return p

    return _make
