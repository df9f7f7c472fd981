"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from eatfreshly.models import app_setting as _app_setting  # noqa: E402,F401
from eatfreshly.models import audit_log as _audit_log  # noqa: E402,F401
from eatfreshly.models import cart as _cart  # noqa: E402,F401
from eatfreshly.models import contact as _contact  # noqa: E402,F401
from eatfreshly.models import email as _email  # noqa: E402,F401
from eatfreshly.models import menu as _menu  # noqa: E402,F401
from eatfreshly.models import order as _order  # noqa: E402,F401
from eatfreshly.models import promotion as _promotion  # noqa: E402,F401
from eatfreshly.models import review as _review  # noqa: E402,F401
from eatfreshly.models import subscriber as _subscriber  # noqa: E402,F401
from eatfreshly.models import user as _user  # noqa: E402,F401
