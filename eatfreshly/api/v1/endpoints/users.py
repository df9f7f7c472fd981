"""Profile endpoints for the signed-in user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eatfreshly.core.security import get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.user import PasswordChange, ProfileUpdate, UserRead
from eatfreshly.services import account_service

router: APIRouter = APIRouter()


@router.get("/me", response_model=ApiResponse[UserRead])
def read_me(current_user: User = Depends(get_current_user)) -> dict:
    """Return current authenticated user."""
    return ok(current_user)


@router.put("/me", response_model=ApiResponse[UserRead])
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    return ok(account_service.update_profile(db, current_user, payload), "Profile updated")


@router.put("/me/password", response_model=ApiResponse[None])
def change_password(
    payload: PasswordChange,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    account_service.change_password(db, current_user, payload.current_password, payload.new_password)
    return ok(message="Password updated")
