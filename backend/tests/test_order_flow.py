import pytest
from sqlalchemy.exc import SQLAlchemyError

from storefront.models.cart_item import CartItem
from storefront.models.order import Order, OrderItem
from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.services.errors import EmptyCart, InsufficientStock
from storefront.services.order_service import OrderService, ShippingInfo

USER = "user_alice"
OTHER_USER = "user_bob"

SHIPPING = {
    "name": "Kim Minji",
    "phone": "010-1234-5678",
    "zip_code": "06236",
    "address": "123 Teheran-ro, Gangnam-gu, Seoul",
    "detail_address": "Apt 501",
    "order_note": "Leave at the door",
}


def _put_in_cart(db, product, quantity, user=USER):
    # written directly so tests can hold lines the add-to-cart checks would refuse
    db.add(CartItem(user_id=user, product_id=product.id, quantity=quantity))
    db.commit()


def _cart(db, user=USER):
    db.expire_all()
    return sorted(
        (line.product_id, line.quantity)
        for line in db.query(CartItem).filter(CartItem.user_id == user).all()
    )


def _counts(db):
    db.expire_all()
    return db.query(Order).count(), db.query(OrderItem).count()


def _checkout(client, headers, **overrides):
    return client.post("/api/orders", json={**SHIPPING, **overrides}, headers=headers)


def test_insufficient_stock_refuses_whole_order(client, db, auth, make_product):
    a = make_product(name="A", price=20000, stock_quantity=5)
    b = make_product(name="B", price=15000, stock_quantity=0)
    _put_in_cart(db, a, 2)
    _put_in_cart(db, b, 1)
    before = _cart(db)

    res = _checkout(client, auth)
    assert res.status_code == 409
    body = res.json()
    assert body["success"] is False
    assert body["code"] == "insufficient_stock"
    assert body["items"] == ["B (current stock: 0)"]
    assert "B (current stock: 0)" in body["error"]

    assert _counts(db) == (0, 0)
    assert _cart(db) == before


def test_every_short_line_is_reported(client, db, auth, make_product):
    a = make_product(name="A", stock_quantity=1)
    b = make_product(name="B", stock_quantity=2)
    _put_in_cart(db, a, 3)
    _put_in_cart(db, b, 5)

    body = _checkout(client, auth).json()
    assert body["items"] == ["A (current stock: 1)", "B (current stock: 2)"]


def test_order_below_free_shipping(client, db, auth, make_product):
    a = make_product(name="A", price=30000, stock_quantity=5)
    _put_in_cart(db, a, 1)

    res = _checkout(client, auth)
    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    order_id = body["data"]["order_id"]
    assert body["data"]["order_number"].startswith("ORD-")

    db.expire_all()
    order = db.get(Order, order_id)
    assert order.user_id == USER
    assert order.status == "pending"
    assert order.shipping_fee == 3000
    assert order.total_amount == 33000
    assert order.order_note == "Leave at the door"
    assert order.shipping_address == {
        "name": "Kim Minji",
        "phone": "010-1234-5678",
        "zip_code": "06236",
        "address": "123 Teheran-ro, Gangnam-gu, Seoul",
        "detail_address": "Apt 501",
    }
    assert [(i.product_id, i.product_name, i.quantity, i.price) for i in order.items] == [
        (a.id, "A", 1, 30000)
    ]
    assert _cart(db) == []


def test_order_free_shipping(client, db, auth, make_product):
    a = make_product(name="A", price=60000, stock_quantity=5)
    _put_in_cart(db, a, 1)

    order_id = _checkout(client, auth).json()["data"]["order_id"]
    db.expire_all()
    order = db.get(Order, order_id)
    assert order.shipping_fee == 0
    assert order.total_amount == 60000


def test_order_at_threshold_ships_free(client, db, auth, make_product):
    a = make_product(name="A", price=20000, stock_quantity=5)
    b = make_product(name="B", price=10000, stock_quantity=5)
    _put_in_cart(db, a, 2)
    _put_in_cart(db, b, 1)

    order_id = _checkout(client, auth).json()["data"]["order_id"]
    db.expire_all()
    order = db.get(Order, order_id)
    assert (order.total_amount, order.shipping_fee) == (50000, 0)
    assert len(order.items) == 2


def test_only_ordered_lines_leave_the_cart(client, db, auth, make_product):
    a = make_product(name="A", price=10000, stock_quantity=5)
    off = make_product(name="Off sale", price=5000, stock_quantity=5, is_active=False)
    _put_in_cart(db, a, 2)
    _put_in_cart(db, off, 1)
    _put_in_cart(db, a, 1, user=OTHER_USER)

    res = _checkout(client, auth)
    assert res.status_code == 200

    # inactive products are not ordered and stay in the cart
    assert _cart(db) == [(off.id, 1)]
    assert _cart(db, user=OTHER_USER) == [(a.id, 1)]
    assert _counts(db) == (1, 1)


def test_order_lines_are_frozen(client, db, auth, make_product):
    a = make_product(name="Original name", price=12000, stock_quantity=5)
    _put_in_cart(db, a, 2)
    order_id = _checkout(client, auth).json()["data"]["order_id"]

    a.name = "Renamed"
    a.price = 99000
    db.commit()

    item = client.get(f"/api/orders/{order_id}", headers=auth).json()["data"]["items"][0]
    assert item["product_name"] == "Original name"
    assert item["price"] == 12000
    assert item["quantity"] == 2


def test_empty_cart(client, auth):
    res = _checkout(client, auth)
    assert res.status_code == 400
    assert res.json()["code"] == "empty_cart"


def test_cart_with_only_inactive_products_is_empty(client, db, auth, make_product):
    _put_in_cart(db, make_product(is_active=False), 1)
    res = _checkout(client, auth)
    assert res.json()["code"] == "empty_cart"
    assert _counts(db) == (0, 0)


def test_checkout_requires_login(client, db, make_product):
    _put_in_cart(db, make_product(), 1)
    res = _checkout(client, {})
    assert res.status_code == 401
    assert _counts(db) == (0, 0)


@pytest.mark.parametrize(
    "field,value",
    [("name", "K"), ("phone", "02-123-4567"), ("zip_code", "1234"), ("address", "Seou")],
)
def test_shipping_form_is_validated(client, auth, field, value):
    assert _checkout(client, auth, **{field: value}).status_code == 422


def test_failed_item_insert_rolls_back_everything(client, db, auth, make_product, monkeypatch):
    a = make_product(name="A", price=30000, stock_quantity=5)
    _put_in_cart(db, a, 1)

    def boom(self, order, items):
        raise SQLAlchemyError("simulated insert failure")

    monkeypatch.setattr(OrderRepository, "add_items", boom)

    res = _checkout(client, auth)
    assert res.status_code == 500
    assert res.json()["code"] == "order_failed"
    # header insert was undone with the rest, nothing to clean up by hand
    assert _counts(db) == (0, 0)
    assert _cart(db) == [(a.id, 1)]


def test_failed_cart_cleanup_rolls_back_order(client, db, auth, make_product, monkeypatch):
    a = make_product(name="A", price=30000, stock_quantity=5)
    _put_in_cart(db, a, 2)

    def boom(self, user_id, product_ids):
        raise SQLAlchemyError("simulated delete failure")

    monkeypatch.setattr(CartRepository, "remove_products", boom)

    res = _checkout(client, auth)
    assert res.status_code == 500
    assert res.json()["code"] == "order_failed"
    assert _counts(db) == (0, 0)
    assert _cart(db) == [(a.id, 2)]


def test_service_place_order(db, make_product):
    a = make_product(name="A", price=20000, stock_quantity=5)
    _put_in_cart(db, a, 2)

    order = OrderService(db).place_order(USER, ShippingInfo(**SHIPPING))
    assert order.total_amount == 43000
    assert order.status == "pending"
    assert len(order.items) == 1
    assert _cart(db) == []


def test_service_errors(db, make_product):
    svc = OrderService(db)
    with pytest.raises(EmptyCart):
        svc.place_order(USER, ShippingInfo(**SHIPPING))

    _put_in_cart(db, make_product(name="Z", stock_quantity=0), 1)
    with pytest.raises(InsufficientStock) as exc:
        svc.place_order(USER, ShippingInfo(**SHIPPING))
    assert exc.value.items == ["Z (current stock: 0)"]
