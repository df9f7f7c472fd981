from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from eatfreshly.core.security import get_password_hash
from eatfreshly.db import session as db_session
from eatfreshly.db.base import Base
from eatfreshly.main import app
from eatfreshly.models import Order, Review, User

ADDRESS = {"street": "1 Lake Road", "city": "Pune", "state": "MH", "zip_code": "411001", "country": "India"}


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> dict[str, int]:
    engine = _build_test_engine(tmp_path / "test_reviews.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)

    with testing_session_local() as db:
        password_hash = get_password_hash("secret123")
        alice = User(name="Alice", email="alice@example.com", password_hash=password_hash)
        bob = User(name="Bob", email="bob@example.com", password_hash=password_hash)
        admin = User(name="Admin", email="admin@example.com", password_hash=get_password_hash("admin123"), role="admin")
        db.add_all([alice, bob, admin])
        db.flush()
        orders = {
            "alice_delivered": Order(order_number="EF1001", user_id=alice.id, status="delivered", delivery_address=ADDRESS, total_price=Decimal("300")),
            "alice_pending": Order(order_number="EF1002", user_id=alice.id, status="pending", delivery_address=ADDRESS, total_price=Decimal("150")),
            "bob_delivered": Order(order_number="EF1003", user_id=bob.id, status="delivered", delivery_address=ADDRESS, total_price=Decimal("220")),
        }
        db.add_all(orders.values())
        db.commit()
        return {name: order.id for name, order in orders.items()}


def _login(client: TestClient, email: str, password: str = "secret123", path: str = "/api/v1/auth/login") -> dict[str, str]:
    token = client.post(path, json={"email": email, "password": password}).json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


def test_customer_reviews_delivered_order_once(tmp_path: Path, monkeypatch) -> None:
    orders = _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        alice = _login(client, "alice@example.com")
        created = client.post(
            "/api/v1/reviews",
            json={"order_id": orders["alice_delivered"], "rating": 5, "comment": "Hot, fresh and on time."},
            headers=alice,
        )
        duplicate = client.post(
            "/api/v1/reviews",
            json={"order_id": orders["alice_delivered"], "rating": 4, "comment": "Trying to review twice."},
            headers=alice,
        )
        undelivered = client.post(
            "/api/v1/reviews",
            json={"order_id": orders["alice_pending"], "rating": 4, "comment": "Has not arrived yet."},
            headers=alice,
        )
        foreign = client.post(
            "/api/v1/reviews",
            json={"order_id": orders["bob_delivered"], "rating": 1, "comment": "Not my order at all."},
            headers=alice,
        )
        too_short = client.post(
            "/api/v1/reviews",
            json={"order_id": orders["alice_delivered"], "rating": 5, "comment": "Nice"},
            headers=alice,
        )

    assert created.status_code == 201
    assert created.json()["data"]["author_name"] == "Alice"
    assert created.json()["data"]["is_approved"] is True
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "You have already reviewed this order"
    assert undelivered.status_code == 400
    assert undelivered.json()["message"] == "You can only review delivered orders"
    assert foreign.status_code == 404
    assert too_short.status_code == 400
    assert too_short.json()["errors"][0]["field"] == "comment"


def test_public_listing_summarises_ratings_and_hides_names(tmp_path: Path, monkeypatch) -> None:
    orders = _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        alice = _login(client, "alice@example.com")
        bob = _login(client, "bob@example.com")
        client.post(
            "/api/v1/reviews",
            json={"order_id": orders["alice_delivered"], "rating": 5, "comment": "Loved the biryani a lot."},
            headers=alice,
        )
        client.post(
            "/api/v1/reviews",
            json={
                "order_id": orders["bob_delivered"],
                "rating": 2,
                "comment": "Arrived cold this time.",
                "is_anonymous": True,
            },
            headers=bob,
        )
        listing = client.get("/api/v1/reviews").json()["data"]
        five_star = client.get("/api/v1/reviews", params={"rating": 5}).json()["data"]
        top = client.get("/api/v1/reviews/top").json()["data"]
        mine = client.get("/api/v1/reviews/mine", headers=bob).json()["data"]

    assert listing["total"] == 2
    assert listing["average_rating"] == 3.5
    assert listing["rating_distribution"] == {"1": 0, "2": 1, "3": 0, "4": 0, "5": 1}
    assert {review["author_name"] for review in listing["items"]} == {"Alice", "Anonymous"}
    assert [review["rating"] for review in five_star["items"]] == [5]
    assert top[0]["rating"] == 5
    assert [review["order_id"] for review in mine] == [orders["bob_delivered"]]


def test_only_author_edits_and_admin_moderates(tmp_path: Path, monkeypatch) -> None:
    orders = _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        alice = _login(client, "alice@example.com")
        bob = _login(client, "bob@example.com")
        admin = _login(client, "admin@example.com", "admin123", "/api/v1/auth/admin/login")
        review_id = client.post(
            "/api/v1/reviews",
            json={"order_id": orders["alice_delivered"], "rating": 3, "comment": "Decent but a bit salty."},
            headers=alice,
        ).json()["data"]["id"]

        edited = client.put(f"/api/v1/reviews/{review_id}", json={"rating": 4}, headers=alice)
        hijack = client.put(f"/api/v1/reviews/{review_id}", json={"rating": 1}, headers=bob)
        hidden = client.put(f"/api/v1/admin/reviews/{review_id}", json={"is_approved": False}, headers=admin)
        public_get = client.get(f"/api/v1/reviews/{review_id}")
        pending = client.get("/api/v1/admin/reviews", params={"approved": False}, headers=admin).json()["data"]
        bob_delete = client.delete(f"/api/v1/reviews/{review_id}", headers=bob)
        admin_delete = client.delete(f"/api/v1/admin/reviews/{review_id}", headers=admin)

    assert edited.json()["data"]["rating"] == 4
    assert hijack.status_code == 403
    assert hidden.json()["data"]["is_approved"] is False
    assert public_get.status_code == 404
    assert [review["id"] for review in pending["items"]] == [review_id]
    assert bob_delete.status_code == 403
    assert admin_delete.status_code == 200

    with db_session.SessionLocal() as db:
        assert db.query(Review).count() == 0
