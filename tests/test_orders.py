"""Order placement, tracking and back-office status changes."""

from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from eatfreshly.core.config import settings
from eatfreshly.core.security import get_password_hash
from eatfreshly.db import session as db_session
from eatfreshly.db.base import Base
from eatfreshly.main import app
from eatfreshly.models import AuditLog, EmailLog, MenuItem, Order, User
from eatfreshly.services.email import reset_email_sender
from eatfreshly.services.payment import reset_payment_service

ADDRESS = {"street": "12 Park Street", "city": "Kolkata", "state": "WB", "zip_code": "700016"}


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_orders.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "payment_provider", "mock")
    monkeypatch.setattr(settings, "email_provider", "log")
    reset_payment_service()
    reset_email_sender()

    with testing_session_local() as db:
        db.add(User(name="Admin", email="admin@example.com", password_hash=get_password_hash("admin123"), role="admin"))
        db.add(MenuItem(name="Masala Dosa", category="Main Course", description="Crisp rice crepe", price=Decimal("180.00")))
        db.add(MenuItem(name="Mango Lassi", category="Drinks", description="Sweet yoghurt drink", price=Decimal("90.50")))
        db.commit()
    return testing_session_local


def _menu_ids(session_local: sessionmaker) -> dict[str, int]:
    with session_local() as db:
        return {item.name: item.id for item in db.scalars(select(MenuItem)).all()}


def _customer_headers(client: TestClient, email: str = "diner@example.com") -> dict[str, str]:
    response = client.post("/api/v1/auth/register", json={"name": "Diner", "email": email, "password": "secret123"})
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


def _admin_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/api/v1/auth/admin/login", json={"email": "admin@example.com", "password": "admin123"})
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}


def _place_order(client: TestClient, headers: dict[str, str], ids: dict[str, int]) -> dict:
    client.post("/api/v1/cart/items", json={"menu_item_id": ids["Masala Dosa"], "quantity": 2}, headers=headers)
    client.post("/api/v1/cart/items", json={"menu_item_id": ids["Mango Lassi"], "quantity": 1}, headers=headers)
    response = client.post(
        "/api/v1/orders",
        json={"delivery_address": ADDRESS, "payment_method": "Cash on Delivery", "special_instructions": "Less spicy"},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["data"]


def test_place_order_snapshots_cart_and_clears_it(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        headers = _customer_headers(client)
        order = _place_order(client, headers, ids)
        cart = client.get("/api/v1/cart", headers=headers).json()["data"]

    assert order["order_number"].startswith("EF")
    assert order["status"] == "pending"
    assert order["payment_status"] == "pending"
    assert order["subtotal"] == 450.5
    assert order["total_price"] == 450.5
    assert order["delivery_address"]["country"] == "India"
    assert order["estimated_delivery_time"] is not None
    assert {(item["name"], item["quantity"], item["unit_price"]) for item in order["items"]} == {
        ("Masala Dosa", 2, 180.0),
        ("Mango Lassi", 1, 90.5),
    }
    assert cart["items"] == []

    with session_local() as db:
        log = db.scalar(select(EmailLog).where(EmailLog.order_id == order["id"]))
        assert log is not None
        assert log.template_type == "order-confirmation"
        assert log.status == "sent"
        assert order["order_number"] in log.subject


def test_misconfigured_email_provider_does_not_fail_orders(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)
    monkeypatch.setattr(settings, "email_provider", "sendgrid")
    monkeypatch.setattr(settings, "sendgrid_api_key", "")
    reset_email_sender()

    with TestClient(app) as client:
        headers = _customer_headers(client)
        order = _place_order(client, headers, ids)
        cart = client.get("/api/v1/cart", headers=headers).json()["data"]
        admin = _admin_headers(client)
        for status in ("confirmed", "preparing", "out_for_delivery", "delivered"):
            moved = client.put(f"/api/v1/admin/orders/{order['id']}/status", json={"status": status}, headers=admin)
            assert moved.status_code == 200

    reset_email_sender()
    assert cart["items"] == []
    assert moved.json()["data"]["status"] == "delivered"
    with session_local() as db:
        logs = db.scalars(select(EmailLog).where(EmailLog.order_id == order["id"]).order_by(EmailLog.id)).all()
        assert [(log.template_type, log.status) for log in logs] == [
            ("order-confirmation", "failed"),
            ("order-completion", "failed"),
        ]
        assert "SENDGRID_API_KEY" in logs[0].error


def test_price_changes_do_not_touch_placed_orders(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        headers = _customer_headers(client)
        order = _place_order(client, headers, ids)
        with session_local() as db:
            db.get(MenuItem, ids["Masala Dosa"]).price = Decimal("999.00")
            db.commit()
        again = client.get(f"/api/v1/orders/{order['order_number']}", headers=headers).json()["data"]

    assert again["total_price"] == 450.5


def test_place_order_rejects_empty_cart_unavailable_items_and_card_payments(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        headers = _customer_headers(client)
        empty = client.post("/api/v1/orders", json={"delivery_address": ADDRESS}, headers=headers)
        assert empty.status_code == 400
        assert empty.json()["message"] == "Cart is empty"

        client.post("/api/v1/cart/items", json={"menu_item_id": ids["Masala Dosa"], "quantity": 1}, headers=headers)
        card = client.post(
            "/api/v1/orders",
            json={"delivery_address": ADDRESS, "payment_method": "Stripe"},
            headers=headers,
        )
        assert card.status_code == 400

        unknown_method = client.post(
            "/api/v1/orders",
            json={"delivery_address": ADDRESS, "payment_method": "Barter"},
            headers=headers,
        )
        assert unknown_method.status_code == 400

        with session_local() as db:
            db.get(MenuItem, ids["Masala Dosa"]).is_available = False
            db.commit()
        unavailable = client.post("/api/v1/orders", json={"delivery_address": ADDRESS}, headers=headers)
        assert unavailable.status_code == 400
        assert unavailable.json()["message"] == "Masala Dosa is no longer available"

    with session_local() as db:
        assert db.scalars(select(Order)).all() == []


def test_orders_are_private_to_their_owner(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        owner = _customer_headers(client, "owner@example.com")
        other = _customer_headers(client, "other@example.com")
        order = _place_order(client, owner, ids)

        by_number = client.get(f"/api/v1/orders/{order['order_number']}", headers=owner)
        by_id = client.get(f"/api/v1/orders/{order['id']}", headers=owner)
        listing = client.get("/api/v1/orders", headers=owner).json()["data"]
        foreign = client.get(f"/api/v1/orders/{order['order_number']}", headers=other)
        other_listing = client.get("/api/v1/orders", headers=other).json()["data"]

    assert by_number.status_code == 200
    assert by_id.json()["data"]["order_number"] == order["order_number"]
    assert listing["total"] == 1
    assert listing["items"][0]["id"] == order["id"]
    assert foreign.status_code == 404
    assert other_listing["total"] == 0


def test_customer_can_cancel_only_early_orders(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        headers = _customer_headers(client)
        admin = _admin_headers(client)
        first = _place_order(client, headers, ids)
        cancelled = client.put(f"/api/v1/orders/{first['order_number']}/cancel", headers=headers)
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["status"] == "cancelled"
        assert cancelled.json()["data"]["cancelled_at"] is not None

        second = _place_order(client, headers, ids)
        client.put(f"/api/v1/admin/orders/{second['id']}/status", json={"status": "preparing"}, headers=admin)
        too_late = client.put(f"/api/v1/orders/{second['order_number']}/cancel", headers=headers)

    assert too_late.status_code == 400
    assert too_late.json()["message"] == "Order cannot be cancelled at this stage"


def test_admin_moves_order_through_lifecycle(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        headers = _customer_headers(client)
        admin = _admin_headers(client)
        order = _place_order(client, headers, ids)

        for step in ("confirmed", "preparing", "ready", "out_for_delivery", "delivered"):
            response = client.put(f"/api/v1/admin/orders/{order['id']}/status", json={"status": step}, headers=admin)
            assert response.status_code == 200, response.json()
            assert response.json()["data"]["status"] == step

        reopen = client.put(f"/api/v1/admin/orders/{order['id']}/status", json={"status": "pending"}, headers=admin)
        cancel = client.put(f"/api/v1/admin/orders/{order['id']}/status", json={"status": "cancelled"}, headers=admin)
        detail = client.get(f"/api/v1/admin/orders/{order['id']}", headers=admin).json()["data"]

    assert reopen.status_code == 400
    assert reopen.json()["message"] == "Cannot change order status from delivered to pending"
    assert cancel.status_code == 400
    assert detail["status"] == "delivered"
    assert detail["customer_email"] == "diner@example.com"
    assert detail["delivered_at"] is not None

    with session_local() as db:
        audit = db.scalars(
            select(AuditLog)
            .where(AuditLog.entity_type == "order", AuditLog.entity_id == order["id"])
            .order_by(AuditLog.id)
        ).all()
        assert [row.after_snapshot["status"] for row in audit] == [
            "confirmed",
            "preparing",
            "ready",
            "out_for_delivery",
            "delivered",
        ]
        assert audit[0].actor_email == "admin@example.com"
        templates = db.scalars(select(EmailLog.template_type).where(EmailLog.order_id == order["id"])).all()
        assert sorted(templates) == ["order-completion", "order-confirmation"]


def test_admin_status_update_rejects_unknown_status_and_accepts_labels(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        headers = _customer_headers(client)
        admin = _admin_headers(client)
        order = _place_order(client, headers, ids)

        bogus = client.put(f"/api/v1/admin/orders/{order['id']}/status", json={"status": "teleported"}, headers=admin)
        label = client.put(f"/api/v1/admin/orders/{order['id']}/status", json={"status": "Preparing"}, headers=admin)
        missing = client.put("/api/v1/admin/orders/9999/status", json={"status": "confirmed"}, headers=admin)

    assert bogus.status_code == 400
    assert bogus.json()["message"] == "Invalid order status: teleported"
    assert label.status_code == 200
    assert label.json()["data"]["status"] == "preparing"
    assert missing.status_code == 404


def test_admin_order_listing_filters(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    ids = _menu_ids(session_local)

    with TestClient(app) as client:
        first = _customer_headers(client, "first@example.com")
        second = _customer_headers(client, "second@example.com")
        admin = _admin_headers(client)
        order_one = _place_order(client, first, ids)
        _place_order(client, second, ids)
        client.put(f"/api/v1/admin/orders/{order_one['id']}/status", json={"status": "confirmed"}, headers=admin)

        everything = client.get("/api/v1/admin/orders", headers=admin).json()["data"]
        confirmed = client.get("/api/v1/admin/orders", params={"status": "confirmed"}, headers=admin).json()["data"]
        searched = client.get("/api/v1/admin/orders", params={"search": "second@"}, headers=admin).json()["data"]
        forbidden = client.get("/api/v1/admin/orders", headers=first)

    assert everything["total"] == 2
    assert [row["id"] for row in confirmed["items"]] == [order_one["id"]]
    assert [row["customer_email"] for row in searched["items"]] == ["second@example.com"]
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "Admin access required"
