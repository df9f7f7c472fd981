"""Review schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ItemRating(BaseModel):
    menu_item_id: int
    rating: int = Field(ge=1, le=5)


class ReviewCreate(BaseModel):
    order_id: int
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=10, max_length=500)
    item_ratings: list[ItemRating] = Field(default_factory=list)
    is_anonymous: bool = False


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = Field(default=None, min_length=10, max_length=500)
    item_ratings: list[ItemRating] | None = None
    is_anonymous: bool | None = None


class ReviewModeration(BaseModel):
    is_approved: bool | None = None
    is_highlighted: bool | None = None


class ReviewRead(BaseModel):
    id: int
    user_id: int
    order_id: int
    rating: int
    comment: str
    item_ratings: list[dict]
    is_anonymous: bool
    is_approved: bool
    is_highlighted: bool
    helpful_count: int
    created_at: datetime
    author_name: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ReviewList(BaseModel):
    """Page of approved reviews with aggregate rating figures."""

    items: list[ReviewRead]
    total: int
    page: int
    limit: int
    pages: int
    average_rating: float
    rating_distribution: dict[int, int]
