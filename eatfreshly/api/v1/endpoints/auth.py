"""Authentication endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eatfreshly.core.security import create_access_token, get_current_user
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from eatfreshly.schemas.common import ApiResponse, ok
from eatfreshly.schemas.user import UserRead
from eatfreshly.services import account_service

router: APIRouter = APIRouter()


def _issue(user: User) -> dict:
    token: str = create_access_token(user)
    return {"token": token, "token_type": "bearer", "user": UserRead.model_validate(user)}


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> dict:
    """Create a customer account and sign it in."""
    user = account_service.register_customer(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        phone=payload.phone,
    )
    return ok(_issue(user), "User registered successfully")


@router.post("/login", response_model=ApiResponse[AuthResponse])
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> dict:
    user = account_service.authenticate_user(db, payload.email, payload.password)
    return ok(_issue(user), "Login successful")


@router.post("/admin/login", response_model=ApiResponse[AuthResponse])
def admin_login(payload: LoginRequest, db: Session = Depends(get_db)) -> dict:
    """Back-office sign-in; customer accounts are rejected."""
    user = account_service.authenticate_admin(db, payload.email, payload.password)
    return ok(_issue(user), "Login successful")


@router.get("/me", response_model=ApiResponse[UserRead])
def me(current_user: User = Depends(get_current_user)) -> dict:
    return ok(current_user)


@router.post("/logout", response_model=ApiResponse[None])
def logout(current_user: User = Depends(get_current_user)) -> dict:
    return ok(message="Logged out")
