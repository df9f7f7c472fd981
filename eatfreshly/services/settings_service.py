"""Reads and writes of admin-editable settings."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from eatfreshly.models.app_setting import AppSetting

CONTACT_INFO_DEFAULTS: dict[str, str] = {
    "contact_phone": "+91 98765 43210",
    "contact_email": "hello@eatfreshly.example",
    "contact_address": "12 Green Street, Bengaluru, Karnataka 560001, India",
    "contact_opening_hours": "Mon-Sun 10:00-22:00",
}


def get_settings(db: Session, defaults: dict[str, str]) -> dict[str, str]:
    """Return ``defaults`` overlaid with whatever has been saved."""
    stored = {row.key: row.value for row in db.scalars(select(AppSetting).where(AppSetting.key.in_(list(defaults))))}
    return {key: stored.get(key, default) for key, default in defaults.items()}


def save_settings(db: Session, values: dict[str, str], updated_by: str | None = None) -> None:
    for key, value in values.items():
        setting = db.get(AppSetting, key)
        if setting is None:
            db.add(AppSetting(key=key, value=value, updated_by=updated_by))
        else:
            setting.value = value
            setting.updated_by = updated_by
    db.commit()
