"""Customer reviews and moderation."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError, PermissionDenied, ValidationFailed
from eatfreshly.models import Order, Review, User
from eatfreshly.schemas.review import ReviewCreate, ReviewModeration, ReviewRead, ReviewUpdate


def serialize_review(review: Review) -> dict[str, Any]:
    data = ReviewRead.model_validate(review).model_dump()
    if review.is_anonymous or review.user is None:
        data["author_name"] = "Anonymous"
    else:
        data["author_name"] = review.user.name
    return data


def create_review(db: Session, user: User, payload: ReviewCreate) -> Review:
    order = db.get(Order, payload.order_id)
    if order is None or order.user_id != user.id:
        raise NotFoundError("Order not found")
    if order.status != "delivered":
        raise ValidationFailed("You can only review delivered orders")
    existing = db.scalar(
        select(Review.id).where(Review.user_id == user.id, Review.order_id == order.id).limit(1)
    )
    if existing is not None:
        raise ValidationFailed("You have already reviewed this order")

    review = Review(
        user_id=user.id,
        order_id=order.id,
        rating=payload.rating,
        comment=payload.comment,
        item_ratings=[rating.model_dump() for rating in payload.item_ratings],
        is_anonymous=payload.is_anonymous,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ValidationFailed("You have already reviewed this order") from exc
    db.refresh(review)
    return review


def list_public_reviews(
    db: Session,
    *,
    offset: int,
    limit: int,
    rating: int | None = None,
) -> tuple[list[Review], int]:
    stmt = select(Review).where(Review.is_approved.is_(True))
    if rating is not None:
        stmt = stmt.where(Review.rating == rating)
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    reviews = db.scalars(stmt.order_by(Review.created_at.desc(), Review.id.desc()).offset(offset).limit(limit)).all()
    return list(reviews), total


def rating_summary(db: Session) -> tuple[float, dict[int, int]]:
    """Average rating and 1..5 distribution over approved reviews."""
    rows = db.execute(
        select(Review.rating, func.count(Review.id)).where(Review.is_approved.is_(True)).group_by(Review.rating)
    ).all()
    distribution = {star: 0 for star in range(1, 6)}
    for star, count in rows:
        distribution[int(star)] = int(count)
    total = sum(distribution.values())
    average = round(sum(star * count for star, count in distribution.items()) / total, 1) if total else 0.0
    return average, distribution


def top_reviews(db: Session, limit: int = 6) -> list[Review]:
    """Highlighted reviews first, then the best rated and newest."""
    return list(
        db.scalars(
            select(Review)
            .where(Review.is_approved.is_(True))
            .order_by(Review.is_highlighted.desc(), Review.rating.desc(), Review.created_at.desc())
            .limit(limit)
        ).all()
    )


def list_user_reviews(db: Session, user: User) -> list[Review]:
    return list(
        db.scalars(select(Review).where(Review.user_id == user.id).order_by(Review.created_at.desc())).all()
    )


def get_review(db: Session, review_id: int) -> Review:
    review = db.get(Review, review_id)
    if review is None:
        raise NotFoundError("Review not found")
    return review


def update_review(db: Session, user: User, review_id: int, payload: ReviewUpdate) -> Review:
    review = get_review(db, review_id)
    if review.user_id != user.id:
        raise PermissionDenied("You can only edit your own reviews")
    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if value is not None:
            setattr(review, field, value)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, user: User, review_id: int) -> None:
    review = get_review(db, review_id)
    if review.user_id != user.id and user.role != "admin":
        raise PermissionDenied("You can only delete your own reviews")
    db.delete(review)
    db.commit()


def list_all_reviews(
    db: Session,
    *,
    offset: int,
    limit: int,
    approved: bool | None = None,
) -> tuple[list[Review], int]:
    stmt = select(Review)
    if approved is not None:
        stmt = stmt.where(Review.is_approved.is_(approved))
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    reviews = db.scalars(stmt.order_by(Review.created_at.desc(), Review.id.desc()).offset(offset).limit(limit)).all()
    return list(reviews), total


def moderate_review(db: Session, review_id: int, payload: ReviewModeration) -> Review:
    review = get_review(db, review_id)
    if payload.is_approved is not None:
        review.is_approved = payload.is_approved
    if payload.is_highlighted is not None:
        review.is_highlighted = payload.is_highlighted
    db.commit()
    db.refresh(review)
    return review
