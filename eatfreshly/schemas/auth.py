"""Authentication-related request and response schemas."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from eatfreshly.schemas.common import EmailAddress
from eatfreshly.schemas.user import UserRead


class RegisterRequest(BaseModel):
    """Payload for customer registration."""

    name: str = Field(min_length=1, max_length=100)
    email: EmailAddress
    password: str = Field(min_length=6, max_length=128)
    phone: str | None = None


class LoginRequest(BaseModel):
    """Payload for user login."""

    email: Annotated[str, AfterValidator(lambda value: value.strip().lower())]
    password: str


class AuthResponse(BaseModel):
    """Issued JWT plus the user snapshot the client stores next to it."""

    token: str
    token_type: str = "bearer"
    user: UserRead
