"""Back-office access control, accounts and menu management."""

from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from eatfreshly.core.security import get_password_hash
from eatfreshly.db import session as db_session
from eatfreshly.db.base import Base
from eatfreshly.main import app
from eatfreshly.models import AuditLog, CartItem, MenuItem, Order, OrderItem, User


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_admin.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    with testing_session_local() as db:
        db.add(User(name="Admin", email="admin@example.com", password_hash=get_password_hash("admin123"), role="admin"))
        db.add(User(name="Cara", email="cara@example.com", password_hash=get_password_hash("secret123")))
        db.commit()
    return testing_session_local


def _login(client: TestClient, email: str, password: str, path: str = "/api/v1/auth/login") -> dict[str, str]:
    token = client.post(path, json={"email": email, "password": password}).json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


def _admin(client: TestClient) -> dict[str, str]:
    return _login(client, "admin@example.com", "admin123", "/api/v1/auth/admin/login")


def test_admin_routes_require_admin_token(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        anonymous = client.get("/api/v1/admin/users")
        customer = client.get("/api/v1/admin/users", headers=_login(client, "cara@example.com", "secret123"))
        admin = client.get("/api/v1/admin/users", headers=_admin(client))

    assert anonymous.status_code == 401
    assert anonymous.json() == {"success": False, "message": "No token, authorization denied"}
    assert customer.status_code == 403
    assert admin.status_code == 200
    assert admin.json()["data"]["total"] == 2


def test_admin_manages_users(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _admin(client)
        created = client.post(
            "/api/v1/admin/users",
            json={"name": "Chef", "email": "Chef@Example.com", "password": "kitchen1", "role": "Admin"},
            headers=headers,
        )
        duplicate = client.post(
            "/api/v1/admin/users",
            json={"name": "Chef", "email": "chef@example.com", "password": "kitchen1"},
            headers=headers,
        )
        bad_role = client.post(
            "/api/v1/admin/users",
            json={"name": "Odd", "email": "odd@example.com", "password": "kitchen1", "role": "owner"},
            headers=headers,
        )
        admins = client.get("/api/v1/admin/users", params={"role": "admin"}, headers=headers).json()["data"]
        searched = client.get("/api/v1/admin/users", params={"search": "cara"}, headers=headers).json()["data"]
        cara_id = searched["items"][0]["id"]
        deactivated = client.put(f"/api/v1/admin/users/{cara_id}", json={"is_active": False}, headers=headers)
        cara_login = client.post("/api/v1/auth/login", json={"email": "cara@example.com", "password": "secret123"})

    assert created.status_code == 201
    assert created.json()["data"]["email"] == "chef@example.com"
    assert created.json()["data"]["role"] == "admin"
    assert "password_hash" not in created.json()["data"]
    assert duplicate.status_code == 409
    assert bad_role.status_code == 400
    assert admins["total"] == 2
    assert deactivated.json()["data"]["is_active"] is False
    assert cara_login.status_code == 401
    assert cara_login.json()["message"] == "Account is deactivated"

    with session_local() as db:
        assert db.query(User).count() == 3


def test_admin_cannot_lock_themselves_out(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    with session_local() as db:
        admin_id = db.query(User).filter_by(email="admin@example.com").one().id

    with TestClient(app) as client:
        headers = _admin(client)
        demote = client.put(f"/api/v1/admin/users/{admin_id}", json={"role": "customer"}, headers=headers)
        deactivate = client.put(f"/api/v1/admin/users/{admin_id}", json={"is_active": False}, headers=headers)
        delete = client.delete(f"/api/v1/admin/users/{admin_id}", headers=headers)

    assert demote.json()["message"] == "You cannot remove your own admin role"
    assert deactivate.json()["message"] == "You cannot deactivate your own account"
    assert delete.json()["message"] == "You cannot delete your own account"
    assert {demote.status_code, deactivate.status_code, delete.status_code} == {400}


def test_deleting_user_with_orders_only_deactivates(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    with session_local() as db:
        cara = db.query(User).filter_by(email="cara@example.com").one()
        quiet = User(name="Quiet", email="quiet@example.com", password_hash=get_password_hash("secret123"))
        db.add(quiet)
        db.add(Order(order_number="EF2001", user_id=cara.id, delivery_address={"city": "Delhi"}))
        db.commit()
        cara_id, quiet_id = cara.id, quiet.id

    with TestClient(app) as client:
        headers = _admin(client)
        client.delete(f"/api/v1/admin/users/{cara_id}", headers=headers)
        removed = client.delete(f"/api/v1/admin/users/{quiet_id}", headers=headers)
        missing = client.get(f"/api/v1/admin/users/{quiet_id}", headers=headers)

    assert removed.json()["message"] == "User removed"
    assert missing.status_code == 404
    with session_local() as db:
        assert db.get(User, cara_id).is_active is False
        actions = db.scalars(select(AuditLog.action_type).where(AuditLog.entity_type == "user").order_by(AuditLog.id)).all()
        assert actions == ["user_deactivated", "user_deleted"]


def test_admin_menu_crud(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    dish = {
        "name": "Chole Bhature",
        "category": "Main Course",
        "description": "Spiced chickpeas with fried bread",
        "price": "199.00",
        "ingredients": ["chickpeas", "flour"],
        "nutritional_info": {"calories": 650},
        "is_vegetarian": True,
    }

    with TestClient(app) as client:
        headers = _admin(client)
        created = client.post("/api/v1/admin/menu", json=dish, headers=headers)
        bad_category = client.post("/api/v1/admin/menu", json={**dish, "category": "Brunch"}, headers=headers)
        item_id = created.json()["data"]["id"]
        updated = client.put(f"/api/v1/admin/menu/{item_id}", json={"price": "219.00"}, headers=headers)
        toggled = client.patch(f"/api/v1/admin/menu/{item_id}/toggle", headers=headers)
        public = client.get("/api/v1/menu").json()["data"]
        back_office = client.get("/api/v1/admin/menu", headers=headers).json()["data"]
        customer = client.post("/api/v1/admin/menu", json=dish, headers=_login(client, "cara@example.com", "secret123"))

    assert created.status_code == 201
    assert created.json()["data"]["ingredients"] == ["chickpeas", "flour"]
    assert bad_category.status_code == 400
    assert bad_category.json()["errors"][0]["field"] == "category"
    assert updated.json()["data"]["price"] == 219.0
    assert updated.json()["data"]["name"] == "Chole Bhature"
    assert toggled.json()["message"] == "Menu item is now unavailable"
    assert public == []
    assert [item["id"] for item in back_office] == [item_id]
    assert customer.status_code == 403

    with session_local() as db:
        assert db.get(MenuItem, item_id).is_available is False


def test_deleting_menu_item_keeps_order_history(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    with session_local() as db:
        cara = db.query(User).filter_by(email="cara@example.com").one()
        item = MenuItem(name="Kulfi", category="Desserts", description="Frozen milk dessert", price=Decimal("80"))
        db.add(item)
        db.flush()
        order = Order(order_number="EF3001", user_id=cara.id, delivery_address={"city": "Delhi"})
        order.items.append(OrderItem(menu_item_id=item.id, name="Kulfi", unit_price=Decimal("80"), quantity=2))
        db.add(order)
        db.commit()
        item_id = item.id

    with TestClient(app) as client:
        cara_headers = _login(client, "cara@example.com", "secret123")
        client.post("/api/v1/cart/items", json={"menu_item_id": item_id, "quantity": 1}, headers=cara_headers)
        deleted = client.delete(f"/api/v1/admin/menu/{item_id}", headers=_admin(client))
        again = client.delete(f"/api/v1/admin/menu/{item_id}", headers=_admin(client))

    assert deleted.status_code == 200
    assert again.status_code == 404
    with session_local() as db:
        snapshot = db.query(OrderItem).one()
        assert snapshot.menu_item_id is None
        assert snapshot.name == "Kulfi"
        assert db.query(CartItem).count() == 0


def test_menu_update_rejects_null_for_required_fields(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    with session_local() as db:
        item = MenuItem(
            name="Rasmalai",
            category="Desserts",
            description="Cheese dumplings in saffron milk",
            price=Decimal("120"),
            discounted_price=Decimal("99"),
        )
        db.add(item)
        db.commit()
        item_id = item.id

    with TestClient(app) as client:
        headers = _admin(client)
        nulled = client.put(f"/api/v1/admin/menu/{item_id}", json={"name": None, "price": None}, headers=headers)
        cleared = client.put(f"/api/v1/admin/menu/{item_id}", json={"discounted_price": None}, headers=headers)

    assert nulled.status_code == 400
    assert nulled.json()["success"] is False
    assert nulled.json()["message"] == "Validation failed"
    assert "name, price cannot be null" in nulled.json()["errors"][0]["message"]
    assert cleared.status_code == 200
    assert cleared.json()["data"]["discounted_price"] is None
    with session_local() as db:
        assert db.get(MenuItem, item_id).name == "Rasmalai"
