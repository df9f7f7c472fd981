"""Email template schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from eatfreshly.schemas.common import EmailAddress, reject_explicit_nulls

TemplateType = Literal["order-confirmation", "order-completion", "newsletter", "custom"]


class TemplateVariable(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    description: str | None = None
    required: bool = False
    default: str | None = None


class EmailTemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    type: TemplateType
    subject: str = Field(min_length=1, max_length=255)
    html_content: str = Field(min_length=1)
    text_content: str | None = None
    variables: list[TemplateVariable] = Field(default_factory=list)
    is_active: bool = True


class EmailTemplateUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    type: TemplateType | None = None
    subject: str | None = Field(default=None, min_length=1, max_length=255)
    html_content: str | None = Field(default=None, min_length=1)
    text_content: str | None = None
    variables: list[TemplateVariable] | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def _required_columns_not_null(self) -> "EmailTemplateUpdate":
        reject_explicit_nulls(self, ("name", "type", "subject", "html_content", "variables", "is_active"))
        return self


class EmailTemplateRead(BaseModel):
    id: int
    name: str
    type: str
    subject: str
    html_content: str
    text_content: str | None = None
    variables: list[dict]
    is_active: bool
    version: int
    created_by: int | None = None
    last_modified_by: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TemplatePreviewRequest(BaseModel):
    variables: dict[str, str] = Field(default_factory=dict)


class TemplateTestSend(BaseModel):
    recipient_email: EmailAddress
    variables: dict[str, str] = Field(default_factory=dict)


class RenderedEmail(BaseModel):
    subject: str
    html: str
    text: str | None = None


class EmailLogRead(BaseModel):
    id: int
    recipient_email: str
    recipient_name: str | None = None
    subject: str
    template_type: str
    provider_message_id: str | None = None
    status: str
    error: str | None = None
    order_id: int | None = None
    sent_at: datetime

    model_config = ConfigDict(from_attributes=True)
