"""ApiClient against the real app and against stubbed transports."""

import json
from decimal import Decimal
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from eatfreshly.client import AdminApiClient, ApiClient, ApiError, AuthenticationExpired, CredentialStore, JsonFileStore
from eatfreshly.client.api import DEFAULT_ERROR_MESSAGE
from eatfreshly.core.security import get_password_hash
from eatfreshly.db import session as db_session
from eatfreshly.db.base import Base
from eatfreshly.main import app
from eatfreshly.models import MenuItem, User

API_BASE = "http://testserver/api/v1"


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> None:
    engine = _build_test_engine(tmp_path / "test_client_api.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    with testing_session_local() as db:
        db.add(User(name="Admin", email="admin@example.com", password_hash=get_password_hash("admin123"), role="admin"))
        db.add(MenuItem(name="Idli", category="Starters", description="Steamed rice cakes", price=Decimal("60"), is_vegetarian=True))
        db.add(MenuItem(name="Fish Curry", category="Main Course", description="Coastal curry", price=Decimal("320")))
        db.commit()


def _client(cls=ApiClient, storage=None) -> ApiClient:
    scope = "admin" if cls is AdminApiClient else "customer"
    return cls(TestClient(app, base_url=API_BASE), credentials=CredentialStore(storage if storage is not None else {}, scope))


def _stub_client(handler, storage=None) -> ApiClient:
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url=API_BASE)
    return ApiClient(http, credentials=CredentialStore(storage if storage is not None else {}))


def test_register_stores_credentials_and_attaches_token(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)
    storage: dict = {}
    api = _client(storage=storage)

    user = api.register("Meera", "Meera@Example.com", "secret123")
    me = api.me()
    cart = api.add_to_cart(api.list_menu(vegetarian=True)[0]["id"], 2)

    assert user["email"] == "meera@example.com"
    assert storage["token"]
    assert storage["user"]["name"] == "Meera"
    assert me["id"] == user["id"]
    assert cart["total_amount"] == 120.0


def test_error_message_comes_from_envelope(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)
    api = _client()
    api.register("Dev", "dev@example.com", "secret123")

    with pytest.raises(ApiError) as excinfo:
        api.add_to_cart(9999)

    assert excinfo.value.status_code == 404
    assert excinfo.value.message == "Menu item not found"
    assert api.credentials.is_authenticated


def test_bad_login_raises_authentication_expired(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)
    api = _client()

    with pytest.raises(AuthenticationExpired) as excinfo:
        api.login("nobody@example.com", "wrongpass")

    assert excinfo.value.message == "Invalid email or password"
    assert excinfo.value.login_path == "/login"


def test_admin_client_uses_admin_keys(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)
    storage: dict = {}
    admin = _client(AdminApiClient, storage)

    admin.login("admin@example.com", "admin123")
    metrics = admin.dashboard_metrics()
    created = admin.create_menu_item(
        {"name": "Payasam", "category": "Desserts", "description": "Sweet milk pudding", "price": "90"}
    )
    menu_csv = admin.export_csv("menu")

    assert set(storage) == {"adminToken", "adminUser"}
    assert metrics["total_menu_items"] == 2
    assert created["name"] == "Payasam"
    assert menu_csv.decode().splitlines()[0].startswith("id,name,category,price")


def test_customer_token_cannot_reach_admin_routes(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)
    storage: dict = {}
    customer = _client(storage=storage)
    customer.register("Ravi", "ravi@example.com", "secret123")
    admin_with_customer_token = AdminApiClient(
        TestClient(app, base_url=API_BASE),
        credentials=CredentialStore({"adminToken": storage["token"]}, "admin"),
    )

    with pytest.raises(ApiError) as excinfo:
        admin_with_customer_token.admin_users()

    assert excinfo.value.status_code == 403
    assert excinfo.value.message == "Admin access required"


def test_401_clears_stored_credentials() -> None:
    seen_headers: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_headers.append(request.headers.get("Authorization"))
        return httpx.Response(401, json={"success": False, "message": "Token is not valid"})

    storage = {"token": "stale", "user": {"id": 1}}
    api = _stub_client(handler, storage)

    with pytest.raises(AuthenticationExpired) as excinfo:
        api.get_cart()

    assert seen_headers == ["Bearer stale"]
    assert excinfo.value.message == "Token is not valid"
    assert storage == {}


def test_unparseable_error_and_network_failure_use_default_message() -> None:
    def html_error(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="<html>Bad gateway</html>")

    def offline(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ApiError) as bad_gateway:
        _stub_client(html_error).menu_categories()
    with pytest.raises(ApiError) as no_network:
        _stub_client(offline).menu_categories()

    assert bad_gateway.value.status_code == 502
    assert bad_gateway.value.message == DEFAULT_ERROR_MESSAGE
    assert no_network.value.status_code is None
    assert no_network.value.message == DEFAULT_ERROR_MESSAGE


def test_no_token_header_without_credentials() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": [{"name": "Starters", "count": 1}]})

    categories = _stub_client(handler).menu_categories()

    assert categories == [{"name": "Starters", "count": 1}]
    assert "Authorization" not in seen[0].headers


def test_json_file_store_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "session" / "credentials.json"
    CredentialStore(JsonFileStore(path)).save("abc", {"id": 7})

    reloaded = CredentialStore(JsonFileStore(path))
    assert reloaded.token == "abc"
    assert reloaded.user == {"id": 7}
    reloaded.clear()
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_unknown_scope_is_rejected() -> None:
    with pytest.raises(ValueError):
        CredentialStore({}, scope="kitchen")
