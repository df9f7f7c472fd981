from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from eatfreshly.core.config import settings
from eatfreshly.core.errors import ValidationFailed
from eatfreshly.core.security import get_password_hash
from eatfreshly.db import session as db_session
from eatfreshly.db.base import Base
from eatfreshly.main import app
from eatfreshly.models import EmailLog, Subscriber, User
from eatfreshly.services.email import get_email_sender, reset_email_sender
from eatfreshly.services.email.renderer import render_email, resolve_variables

WELCOME = {
    "name": "Monsoon menu",
    "type": "newsletter",
    "subject": "{{ headline }} at EatFreshly",
    "html_content": "<p>Hi {{ subscriber_name }}, {{ headline }}!</p><p>{{ footer }}</p>",
    "text_content": "Hi {{ subscriber_name }}, {{ headline }}!",
    "variables": [
        {"name": "headline", "required": True},
        {"name": "subscriber_name", "default": "there"},
        {"name": "footer", "default": "See you soon"},
    ],
}


def test_resolve_variables_applies_defaults_and_reports_missing() -> None:
    declared = [{"name": "order_number", "required": True}, {"name": "eta", "default": "soon"}, {"name": "note"}]

    assert resolve_variables(declared, {"order_number": "EF1"}) == {"order_number": "EF1", "eta": "soon", "note": ""}
    with pytest.raises(ValidationFailed) as excinfo:
        resolve_variables(declared + [{"name": "total", "required": True}], {})
    assert excinfo.value.detail == "Missing required variables: order_number, total"


def test_render_email_escapes_html_but_not_text() -> None:
    rendered = render_email(
        subject="Hello {{ name }}",
        html_content="<b>{{ name }}</b>",
        text_content="Plain {{ name }}",
        declared=[],
        values={"name": "<Chef & Co>"},
    )

    assert rendered["subject"] == "Hello <Chef & Co>"
    assert rendered["html"] == "<b>&lt;Chef &amp; Co&gt;</b>"
    assert rendered["text"] == "Plain <Chef & Co>"


def test_undeclared_placeholder_is_a_render_error() -> None:
    with pytest.raises(ValidationFailed):
        render_email(subject="{{ missing }}", html_content="x", text_content=None, declared=[], values={})


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


def _setup_db(tmp_path: Path, monkeypatch) -> sessionmaker:
    engine = _build_test_engine(tmp_path / "test_email_templates.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "email_provider", "log")
    reset_email_sender()
    with testing_session_local() as db:
        db.add(User(name="Admin", email="admin@example.com", password_hash=get_password_hash("admin123"), role="admin"))
        db.add(Subscriber(email="keen@example.com", name="Keen"))
        db.add(Subscriber(email="quiet@example.com", preferences={"newsletter": False, "promotions": True}))
        db.add(Subscriber(email="gone@example.com", is_active=False))
        db.commit()
    return testing_session_local


def _admin_headers(client: TestClient) -> dict[str, str]:
    token = client.post(
        "/api/v1/auth/admin/login",
        json={"email": "admin@example.com", "password": "admin123"},
    ).json()["data"]["token"]
    return {"Authorization": f"Bearer {token}"}


def test_template_crud_versions_content_changes(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _admin_headers(client)
        created = client.post("/api/v1/admin/email/templates", json=WELCOME, headers=headers)
        duplicate = client.post("/api/v1/admin/email/templates", json=WELCOME, headers=headers)
        template_id = created.json()["data"]["id"]
        toggled = client.put(f"/api/v1/admin/email/templates/{template_id}", json={"is_active": False}, headers=headers)
        edited = client.put(
            f"/api/v1/admin/email/templates/{template_id}",
            json={"subject": "{{ headline }} this week"},
            headers=headers,
        )
        listed = client.get("/api/v1/admin/email/templates", params={"template_type": "newsletter"}, headers=headers)
        deleted = client.delete(f"/api/v1/admin/email/templates/{template_id}", headers=headers)
        missing = client.get(f"/api/v1/admin/email/templates/{template_id}", headers=headers)

    assert created.status_code == 201
    assert created.json()["data"]["version"] == 1
    assert duplicate.status_code == 409
    assert toggled.json()["data"]["version"] == 1
    assert edited.json()["data"]["version"] == 2
    assert [row["name"] for row in listed.json()["data"]] == ["Monsoon menu"]
    assert deleted.status_code == 200
    assert missing.status_code == 404


def test_preview_and_test_send(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _admin_headers(client)
        template_id = client.post("/api/v1/admin/email/templates", json=WELCOME, headers=headers).json()["data"]["id"]
        preview = client.post(
            f"/api/v1/admin/email/templates/{template_id}/preview",
            json={"variables": {"headline": "Pakoras are back"}},
            headers=headers,
        )
        incomplete = client.post(f"/api/v1/admin/email/templates/{template_id}/preview", json={}, headers=headers)
        test_send = client.post(
            f"/api/v1/admin/email/templates/{template_id}/test",
            json={"recipient_email": "qa@example.com", "variables": {"headline": "Testing"}},
            headers=headers,
        )
        logs = client.get("/api/v1/admin/email/logs", params={"status": "sent"}, headers=headers).json()["data"]

    assert preview.json()["data"] == {
        "subject": "Pakoras are back at EatFreshly",
        "html": "<p>Hi there, Pakoras are back!</p><p>See you soon</p>",
        "text": "Hi there, Pakoras are back!",
    }
    assert incomplete.status_code == 400
    assert incomplete.json()["message"] == "Missing required variables: headline"
    assert test_send.json()["data"]["recipient_email"] == "qa@example.com"
    assert test_send.json()["data"]["status"] == "sent"
    assert logs["total"] == 1

    with session_local() as db:
        assert db.query(EmailLog).count() == 1


def test_newsletter_send_respects_preferences(tmp_path: Path, monkeypatch) -> None:
    session_local = _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _admin_headers(client)
        template_id = client.post("/api/v1/admin/email/templates", json=WELCOME, headers=headers).json()["data"]["id"]
        missing_vars = client.post("/api/v1/admin/newsletter/send", json={"template_id": template_id}, headers=headers)
        sent = client.post(
            "/api/v1/admin/newsletter/send",
            json={"template_id": template_id, "variables": {"headline": "New thalis"}},
            headers=headers,
        )

    assert missing_vars.status_code == 400
    assert sent.json()["data"] == {"recipients": 1, "sent": 1, "failed": 0}
    assert sent.json()["message"] == "Newsletter sent to 1 subscribers"
    outbox = get_email_sender().outbox
    assert [message.to_email for message in outbox] == ["keen@example.com"]
    assert "Hi Keen" in outbox[0].html

    with session_local() as db:
        assert db.query(Subscriber).filter_by(email="keen@example.com").one().emails_sent == 1


def test_template_update_rejects_null_content(tmp_path: Path, monkeypatch) -> None:
    _setup_db(tmp_path, monkeypatch)

    with TestClient(app) as client:
        headers = _admin_headers(client)
        template_id = client.post("/api/v1/admin/email/templates", json=WELCOME, headers=headers).json()["data"]["id"]
        nulled = client.put(f"/api/v1/admin/email/templates/{template_id}", json={"html_content": None}, headers=headers)
        no_text = client.put(f"/api/v1/admin/email/templates/{template_id}", json={"text_content": None}, headers=headers)

    assert nulled.status_code == 400
    assert nulled.json()["message"] == "Validation failed"
    assert no_text.status_code == 200
    assert no_text.json()["data"]["text_content"] is None
    assert no_text.json()["data"]["version"] == 2
