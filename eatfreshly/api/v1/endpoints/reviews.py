"""Review endpoints."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.core.security import get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, PageParams, ok, page_of
from eatfreshly.schemas.review import ReviewCreate, ReviewList, ReviewRead, ReviewUpdate
from eatfreshly.services import review_service

router: APIRouter = APIRouter()


@router.post("", response_model=ApiResponse[ReviewRead], status_code=status.HTTP_201_CREATED)
def create_review(
    payload: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    review = review_service.create_review(db, current_user, payload)
    return ok(review_service.serialize_review(review), "Review submitted")


@router.get("", response_model=ApiResponse[ReviewList])
def list_reviews(
    rating: int | None = Query(default=None, ge=1, le=5),
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    """Approved reviews with the average rating and star distribution."""
    reviews, total = review_service.list_public_reviews(db, offset=params.offset, limit=params.limit, rating=rating)
    average, distribution = review_service.rating_summary(db)
    data = page_of([review_service.serialize_review(review) for review in reviews], total, params)
    data.update({"average_rating": average, "rating_distribution": distribution})
    return ok(data)


@router.get("/top", response_model=ApiResponse[list[ReviewRead]])
def top_reviews(limit: int = Query(default=6, ge=1, le=20), db: Session = Depends(get_db)) -> dict:
    return ok([review_service.serialize_review(review) for review in review_service.top_reviews(db, limit)])


@router.get("/mine", response_model=ApiResponse[list[ReviewRead]])
def my_reviews(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> dict:
    return ok([review_service.serialize_review(review) for review in review_service.list_user_reviews(db, current_user)])


@router.get("/{review_id}", response_model=ApiResponse[ReviewRead])
def get_review(review_id: int, db: Session = Depends(get_db)) -> dict:
    review = review_service.get_review(db, review_id)
    if not review.is_approved:
        raise NotFoundError("Review not found")
    return ok(review_service.serialize_review(review))


@router.put("/{review_id}", response_model=ApiResponse[ReviewRead])
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    review = review_service.update_review(db, current_user, review_id, payload)
    return ok(review_service.serialize_review(review), "Review updated")


@router.delete("/{review_id}", response_model=ApiResponse[None])
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    review_service.delete_review(db, current_user, review_id)
    return ok(message="Review deleted")
