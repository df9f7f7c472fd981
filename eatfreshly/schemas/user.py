"""User schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from eatfreshly.schemas.common import EmailAddress


class DeliveryAddress(BaseModel):
    street: str = Field(min_length=1, max_length=200)
    city: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    zip_code: str = Field(min_length=1, max_length=20)
    country: str = "India"


class UserRead(BaseModel):
    """Serialized user."""

    id: int
    name: str
    email: str
    phone: str | None = None
    address: dict | None = None
    role: str
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = None
    address: DeliveryAddress | None = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6, max_length=128)


class AdminUserCreate(BaseModel):
    """Back-office account creation, role chosen explicitly."""

    name: str = Field(min_length=1, max_length=100)
    email: EmailAddress
    password: str = Field(min_length=6, max_length=128)
    phone: str | None = None
    role: str = "customer"


class AdminUserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = None
    role: str | None = None
    is_active: bool | None = None
