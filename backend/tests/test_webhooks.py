import json
from datetime import datetime, timezone
from uuid import uuid4

from svix.webhooks import Webhook

from storefront.config import settings
from storefront.models.cart_item import CartItem
from storefront.models.order import Order, OrderItem
from storefront.models.user import User

URL = "/api/webhooks/clerk"


def _signed(payload, secret=None):
    body = payload if isinstance(payload, str) else json.dumps(payload)
    msg_id = f"msg_{uuid4().hex}"
    ts = datetime.now(timezone.utc)
    signature = Webhook(secret or settings.WEBHOOK_SECRET).sign(msg_id, ts, body)
    headers = {
        "svix-id": msg_id,
        "svix-timestamp": str(int(ts.timestamp())),
        "svix-signature": signature,
        "content-type": "application/json",
    }
    return body, headers


def _user_event(event_type, user_id="user_alice", **data):
    return {"type": event_type, "object": "event", "data": {"id": user_id, **data}}


def _post(client, payload):
    body, headers = _signed(payload)
    return client.post(URL, content=body, headers=headers)


def test_user_created_and_updated_sync_local_row(client, db):
    res = _post(
        client,
        _user_event(
            "user.created",
            first_name="Alice",
            last_name="Kim",
            primary_email_address_id="idn_1",
            email_addresses=[{"id": "idn_1", "email_address": "alice@example.com"}],
        ),
    )
    assert res.status_code == 200
    assert res.json() == {"success": True, "event": "user.created", "result": "synced"}

    u = db.query(User).filter(User.clerk_id == "user_alice").one()
    assert (u.email, u.name) == ("alice@example.com", "Alice Kim")

    _post(client, _user_event("user.updated", first_name="Alicia", email_addresses=[]))
    db.expire_all()
    u = db.query(User).filter(User.clerk_id == "user_alice").one()
    assert (u.email, u.name) == (None, "Alicia")


def test_signed_user_deleted_clears_cart(client, db, make_product):
    p = make_product()
    db.add(CartItem(user_id="user_alice", product_id=p.id, quantity=1))
    db.commit()

    res = _post(client, {"type": "user.deleted", "data": {"id": "user_alice"}})
    assert res.status_code == 200
    assert res.json() == {"success": True, "event": "user.deleted", "result": "deleted"}

    db.expire_all()
    assert db.query(CartItem).count() == 0


def test_signed_but_unreadable_body_is_rejected(client, db):
    body, headers = _signed("not json at all")
    res = client.post(URL, content=body, headers=headers)
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Invalid webhook payload"}
    assert db.query(User).count() == 0


def test_non_object_event_goes_through_the_logged_error_path(client):
    body, headers = _signed("[]")
    res = client.post(URL, content=body, headers=headers)
    assert res.status_code == 500
    assert res.json() == {"success": False, "error": "Internal server error"}


def test_user_deleted_removes_user_scoped_rows(client, db, auth, other_auth, make_product):
    p = make_product(price=10000, stock_quantity=20)
    db.add(User(clerk_id="user_alice", email="alice@example.com"))
    db.add(CartItem(user_id="user_alice", product_id=p.id, quantity=1))
    db.add(CartItem(user_id="user_bob", product_id=p.id, quantity=1))
    db.commit()
    shipping = {
        "name": "Kim Minji",
        "phone": "010-1234-5678",
        "zip_code": "06236",
        "address": "123 Teheran-ro, Gangnam-gu, Seoul",
    }
    assert client.post("/api/orders", json=shipping, headers=auth).status_code == 200
    assert client.post("/api/orders", json=shipping, headers=other_auth).status_code == 200
    db.add(CartItem(user_id="user_alice", product_id=p.id, quantity=2))
    db.commit()

    res = _post(client, {"type": "user.deleted", "data": {"id": "user_alice", "deleted": True}})
    assert res.status_code == 200
    assert res.json()["result"] == "deleted"

    db.expire_all()
    assert db.query(User).count() == 0
    assert db.query(CartItem).filter(CartItem.user_id == "user_alice").count() == 0
    assert db.query(Order).filter(Order.user_id == "user_alice").count() == 0
    # bob's order and its line survive
    assert db.query(Order).filter(Order.user_id == "user_bob").count() == 1
    assert db.query(OrderItem).count() == 1


def test_unknown_event_is_acknowledged(client):
    res = _post(client, {"type": "session.created", "data": {"id": "sess_1"}})
    assert res.status_code == 200
    assert res.json()["result"] == "ignored"


def test_event_without_user_id(client):
    res = _post(client, {"type": "user.deleted", "data": {}})
    assert res.status_code == 400


def test_bad_signature_is_rejected(client, db):
    body, headers = _signed(_user_event("user.created"), secret="whsec_b3RoZXItc2VjcmV0")
    res = client.post(URL, content=body, headers=headers)
    assert res.status_code == 400
    assert res.json()["error"] == "Webhook verification failed"
    assert db.query(User).count() == 0


def test_tampered_body_is_rejected(client):
    body, headers = _signed(_user_event("user.created"))
    res = client.post(URL, content=body.replace("user_alice", "user_mallory"), headers=headers)
    assert res.status_code == 400


def test_missing_svix_headers(client):
    res = client.post(URL, content=json.dumps(_user_event("user.created")))
    assert res.status_code == 400
    assert res.json()["error"] == "Missing svix headers"


def test_missing_secret(client, monkeypatch):
    body, headers = _signed(_user_event("user.created"))
    monkeypatch.setattr(settings, "WEBHOOK_SECRET", None)
    res = client.post(URL, content=body, headers=headers)
    assert res.status_code == 500
