"""Response envelope and pagination schemas shared by every endpoint."""

from collections.abc import Iterable
from math import ceil
from typing import Annotated, Any, Generic, TypeVar

from pydantic import AfterValidator, BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope: ``{success, data, message?}``."""

    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorResponse(BaseModel):
    """Error envelope produced by the exception handlers."""

    success: bool = False
    message: str
    errors: list[dict[str, Any]] | None = None


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int
    pages: int


class PageParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Wrap a payload in the success envelope."""
    return {"success": True, "message": message, "data": data}


def page_of(items: list[Any], total: int, params: PageParams) -> dict[str, Any]:
    return {
        "items": items,
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "pages": ceil(total / params.limit) if total else 0,
    }


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    local, _, domain = normalized.partition("@")
    if not local or "." not in domain:
        raise ValueError("Please enter a valid email")
    return normalized


EmailAddress = Annotated[str, AfterValidator(normalize_email)]


def reject_explicit_nulls(model: BaseModel, required: Iterable[str]) -> None:
    """Partial updates may omit ``required`` fields but not send them as null."""
    nulled = sorted(name for name in required if name in model.model_fields_set and getattr(model, name) is None)
    if nulled:
        raise ValueError(f"{', '.join(nulled)} cannot be null")
