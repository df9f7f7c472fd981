from datetime import timedelta
from decimal import Decimal
from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from eatfreshly.client import ApiClient, ApiError, CheckoutFlow, CheckoutForm, CredentialStore
from eatfreshly.core.config import settings
from eatfreshly.db import session as db_session
from eatfreshly.db.base import Base
from eatfreshly.main import app
from eatfreshly.models import MenuItem, Order, Promotion
from eatfreshly.services.email import reset_email_sender
from eatfreshly.services.payment import reset_payment_service
from eatfreshly.utils.time import utcnow

ADDRESS = {"street": "5 Beach Road", "city": "Chennai", "state": "TN", "zip_code": "600001"}


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def __call__(self, level: str, message: str) -> None:
        self.messages.append((level, message))


class _EmptyCartApi:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def get_cart(self) -> dict:
        self.calls.append("get_cart")
        return {"items": [], "total_amount": 0}

    def create_order(self, order: dict) -> dict:
        self.calls.append("create_order")
        raise AssertionError("create_order must not be called")

    def clear_cart(self) -> dict:
        self.calls.append("clear_cart")
        return {}


class _ClearFailsApi:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def get_cart(self) -> dict:
        self.calls.append("get_cart")
        return {"items": [{"id": 1, "quantity": 1}], "total_amount": 50}

    def create_order(self, order: dict) -> dict:
        self.calls.append("create_order")
        return {"order_number": "EF1760000000000123"}

    def clear_cart(self) -> dict:
        self.calls.append("clear_cart")
        raise ApiError("Something went wrong. Please try again.")


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_checkout_flow.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "payment_provider", "mock")
    monkeypatch.setattr(settings, "mock_payments_auto_confirm", True)
    monkeypatch.setattr(settings, "email_provider", "log")
    reset_payment_service()
    reset_email_sender()
    now = utcnow()
    with testing_session_local() as db:
        db.add(MenuItem(name="Vada Pav", category="Starters", description="Spiced potato slider", price=Decimal("50")))
        db.add(
            Promotion(
                title="Tenner",
                description="10 off",
                promo_code="TEN",
                discount_type="fixed",
                discount_value=Decimal("10"),
                valid_from=now - timedelta(days=365),
                valid_to=now + timedelta(days=365),
            )
        )
        db.commit()
    return testing_session_local


def _customer_with_cart(session_local: sessionmaker) -> ApiClient:
    api = ApiClient(TestClient(app, base_url="http://testserver/api/v1"), credentials=CredentialStore({}))
    api.register("Tara", "tara@example.com", "secret123")
    with session_local() as db:
        item_id = db.query(MenuItem).one().id
    api.add_to_cart(item_id, 3)
    return api


def test_empty_cart_stops_before_creating_order() -> None:
    api = _EmptyCartApi()
    notify = _Recorder()

    result = CheckoutFlow(api, notify).submit(CheckoutForm(delivery_address=ADDRESS))

    assert result is None
    assert api.calls == ["get_cart"]
    assert notify.messages == [("error", "Your cart is empty")]


def test_cart_clear_failure_still_reports_placed_order() -> None:
    api = _ClearFailsApi()
    notify = _Recorder()

    result = CheckoutFlow(api, notify).submit(CheckoutForm(delivery_address=ADDRESS))

    assert result == "EF1760000000000123"
    assert api.calls == ["get_cart", "create_order", "clear_cart"]
    assert notify.messages == [("success", "Order EF1760000000000123 placed successfully")]


def test_cash_checkout_places_order_and_clears_cart(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    api = _customer_with_cart(session_local)
    notify = _Recorder()

    order_number = CheckoutFlow(api, notify).submit(
        CheckoutForm(delivery_address=ADDRESS, promo_code="TEN", special_instructions="Extra chutney")
    )

    assert order_number is not None and order_number.startswith("EF")
    assert notify.messages == [("success", f"Order {order_number} placed successfully")]
    assert api.get_cart()["items"] == []
    order = api.get_order(order_number)
    assert order["total_price"] == 140.0
    assert order["payment_method"] == "Cash on Delivery"


def test_invalid_promo_is_reported_and_nothing_is_placed(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    api = _customer_with_cart(session_local)
    notify = _Recorder()

    result = CheckoutFlow(api, notify).submit(CheckoutForm(delivery_address=ADDRESS, promo_code="BOGUS"))

    assert result is None
    assert notify.messages == [("error", "Invalid or expired promo code")]
    assert api.get_cart()["total_items"] == 3
    with session_local() as db:
        assert db.query(Order).count() == 0


def test_card_checkout_goes_through_confirmer(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    api = _customer_with_cart(session_local)
    notify = _Recorder()
    intents: list[dict] = []

    def confirm(intent: dict) -> str:
        intents.append(intent)
        return intent["payment_intent_id"]

    order_number = CheckoutFlow(api, notify, confirm).submit(
        CheckoutForm(delivery_address=ADDRESS, payment_method="Stripe")
    )

    assert order_number is not None
    assert intents[0]["amount"] == 150.0
    order = api.get_order(order_number)
    assert order["payment_method"] == "Stripe"
    assert order["payment_status"] == "paid"


def test_card_checkout_without_confirmer_or_when_abandoned(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    api = _customer_with_cart(session_local)
    notify = _Recorder()
    form = CheckoutForm(delivery_address=ADDRESS, payment_method="Stripe")

    assert CheckoutFlow(api, notify).submit(form) is None
    assert CheckoutFlow(api, notify, lambda intent: None).submit(form) is None

    assert notify.messages == [
        ("error", "Card payments are not available right now"),
        ("error", "Payment was not completed"),
    ]
    assert api.get_cart()["total_items"] == 3


def test_apply_promo_reports_savings(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)
    api = _customer_with_cart(session_local)
    notify = _Recorder()
    flow = CheckoutFlow(api, notify)

    applied = flow.apply_promo("TEN", 150)
    rejected = flow.apply_promo("NOPE", 150)

    assert applied["final_amount"] == 140.0
    assert rejected is None
    assert notify.messages == [
        ("success", "Promo code applied. You save 10.00"),
        ("error", "Invalid or expired promo code"),
    ]
