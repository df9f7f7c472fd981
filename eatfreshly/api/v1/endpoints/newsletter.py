"""Newsletter subscription endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eatfreshly.db.session import get_db
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.newsletter import PreferencesUpdate, SubscribeRequest, SubscriberRead, UnsubscribeRequest
from eatfreshly.services import newsletter_service

router: APIRouter = APIRouter()


@router.post("/subscribe", response_model=ApiResponse[SubscriberRead], status_code=status.HTTP_201_CREATED)
def subscribe(payload: SubscribeRequest, db: Session = Depends(get_db)) -> dict:
    subscriber, reactivated = newsletter_service.subscribe(db, payload)
    message = "Welcome back! Your subscription is active again" if reactivated else "Successfully subscribed"
    return ok(subscriber, message)


@router.post("/unsubscribe", response_model=ApiResponse[None])
def unsubscribe(payload: UnsubscribeRequest, db: Session = Depends(get_db)) -> dict:
    newsletter_service.unsubscribe(db, token=payload.token, email=payload.email)
    return ok(message="Successfully unsubscribed")


@router.get("/subscriber/{token}", response_model=ApiResponse[SubscriberRead])
def read_subscriber(token: str, db: Session = Depends(get_db)) -> dict:
    return ok(newsletter_service.get_by_token(db, token))


@router.put("/preferences/{token}", response_model=ApiResponse[SubscriberRead])
def update_preferences(token: str, payload: PreferencesUpdate, db: Session = Depends(get_db)) -> dict:
    return ok(newsletter_service.update_preferences(db, token, payload), "Preferences updated")
