from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from eatfreshly.core.config import settings
from eatfreshly.core.security import get_password_hash, verify_password
from eatfreshly.db.base import Base
from eatfreshly.db.seed import DEMO_MENU, seed_demo_menu
from eatfreshly.models import MenuItem, User
from eatfreshly.services.account_service import ensure_default_admin


def _build_session_local() -> sessionmaker:
    engine = create_engine("sqlite+pysqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


def test_ensure_default_admin_is_idempotent(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_email", "Owner@EatFreshly.example")
    monkeypatch.setattr(settings, "admin_password", "owner-pass")
    session_local = _build_session_local()

    with session_local() as session:
        assert ensure_default_admin(session) is False
        admins = session.scalars(select(User).where(User.role == "admin")).all()
        assert len(admins) == 1
        assert admins[0].email == "owner@eatfreshly.example"

    with session_local() as session:
        assert ensure_default_admin(session) is True
        admins = session.scalars(select(User).where(User.role == "admin")).all()
        assert len(admins) == 1
        assert verify_password("owner-pass", admins[0].password_hash)


def test_ensure_default_admin_promotes_and_reactivates_existing_account(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_email", "owner@eatfreshly.example")
    monkeypatch.setattr(settings, "admin_password", "owner-pass")
    session_local = _build_session_local()

    with session_local() as session:
        session.add(
            User(
                name="Owner",
                email="owner@eatfreshly.example",
                password_hash=get_password_hash("their-own"),
                role="customer",
                is_active=False,
            )
        )
        session.commit()

    with session_local() as session:
        assert ensure_default_admin(session) is True
        user = session.scalar(select(User).where(User.email == "owner@eatfreshly.example"))
        assert user.role == "admin"
        assert user.is_active is True
        assert verify_password("their-own", user.password_hash)


def test_bootstrap_skipped_without_credentials(monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_email", "")
    monkeypatch.setattr(settings, "admin_password", "")
    session_local = _build_session_local()

    with session_local() as session:
        assert ensure_default_admin(session) is False
        assert session.scalars(select(User)).all() == []


def test_demo_menu_seeded_once(monkeypatch) -> None:
    monkeypatch.setattr(settings, "seed_demo_data", True)
    session_local = _build_session_local()

    with session_local() as session:
        seed_demo_menu(session)
        seed_demo_menu(session)
        assert len(session.scalars(select(MenuItem)).all()) == len(DEMO_MENU)
