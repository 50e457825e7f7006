"""HTTP layer: routing, dependency overrides and error mapping."""
import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_lock_service, get_notifier
from app.data.database import get_db
from app.main import create_app

from conftest import ALICE_ID, BOB_ID, CHEAP_BOOK, RARE_BOOK, SOLD_OUT_BOOK


@pytest.fixture
def client(seeded, notifier, locks):
    app = create_app()

    def override_get_db():
        yield seeded

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_lock_service] = lambda: locks

    # bez "with": startup (create_all na prawdziwej bazie) sie nie odpala
    return TestClient(app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_order_flow_over_http(client, notifier):
    r = client.post("/carts/me/items", params={"user_id": ALICE_ID}, json={"book_id": CHEAP_BOOK, "quantity": 2})
    assert r.status_code == 200
    assert r.json()["total"] == "20.00"

    r = client.post("/orders/", params={"user_id": ALICE_ID}, json={"address": "ul. Dluga 1"})
    assert r.status_code == 201
    order = r.json()
    assert order["status"] == "PENDING"
    assert order["total_amount"] == "20.00"

    r = client.put(f"/orders/{order['id']}/status", json={"status": "CONFIRMED"})
    assert r.status_code == 200
    assert r.json()["status"] == "CONFIRMED"

    r = client.post("/payments/", params={"user_id": ALICE_ID}, json={"order_id": order["id"], "method": "COD"})
    assert r.status_code == 201
    assert r.json()["status"] == "SUCCESS"

    r = client.get("/orders/", params={"user_id": ALICE_ID})
    assert [o["id"] for o in r.json()] == [order["id"]]

    assert ALICE_ID in notifier.targets()


def test_errors_carry_code_and_status(client):
    r = client.get("/orders/999")
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == 1403

    r = client.post("/carts/me/items", params={"user_id": ALICE_ID}, json={"book_id": SOLD_OUT_BOOK, "quantity": 1})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == 8005

    r = client.post("/orders/", params={"user_id": BOB_ID}, json={"address": "x"})
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == 8001


def test_invalid_transition_and_ownership(client):
    client.post("/carts/me/items", params={"user_id": ALICE_ID}, json={"book_id": RARE_BOOK, "quantity": 1})
    order = client.post("/orders/", params={"user_id": ALICE_ID}, json={"address": "a"}).json()

    r = client.put(f"/orders/{order['id']}/status", json={"status": "DELIVERED"})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == 1410

    r = client.post(f"/orders/{order['id']}/cancel", params={"user_id": BOB_ID}, json={"reason": "x"})
    assert r.status_code == 403

    r = client.post(f"/orders/{order['id']}/cancel", params={"user_id": ALICE_ID}, json={})
    assert r.status_code == 400
    assert r.json()["detail"]["code"] == 1409


def test_locked_order_returns_conflict(client, locks):
    client.post("/carts/me/items", params={"user_id": ALICE_ID}, json={"book_id": CHEAP_BOOK, "quantity": 1})
    order = client.post("/orders/", params={"user_id": ALICE_ID}, json={"address": "a"}).json()
    locks.hold(order["id"])

    r = client.put(f"/orders/{order['id']}/status", json={"status": "CONFIRMED"})

    assert r.status_code == 409


def test_statistics_empty_state(client):
    r = client.get("/statistics/total-revenue")
    assert r.status_code == 404
    assert r.json()["detail"]["code"] == 1412

    assert client.get("/statistics/total-orders").json() == {"kind": "total-orders", "result": 0}
    assert client.get("/statistics/unknown").status_code == 422


def test_books_and_notifications(client):
    books = client.get("/books/").json()
    assert [b["id"] for b in books] == [CHEAP_BOOK, RARE_BOOK, SOLD_OUT_BOOK]

    assert client.get("/books/random", params={"n": 2, "seed": 3}).status_code == 200
    assert client.get("/notifications/unread-count", params={"user_id": ALICE_ID}).json() == {"unread": 0}
    assert client.put("/notifications/55/read", params={"user_id": ALICE_ID}).status_code == 404
