"""Back-office account management."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eatfreshly.core.errors import NotFoundError
from eatfreshly.core.security import require_admin
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.schemas.common import ApiResponse, Page, PageParams, ok, page_of
from eatfreshly.schemas.user import AdminUserCreate, AdminUserUpdate, UserRead
from eatfreshly.services import account_service, user_service

router: APIRouter = APIRouter()


@router.get("/users", response_model=ApiResponse[Page[UserRead]])
def list_users(
    role: str | None = None,
    search: str | None = None,
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
) -> dict:
    users, total = user_service.list_users(db, offset=params.offset, limit=params.limit, role=role, search=search)
    return ok(page_of(users, total, params))


@router.get("/users/{user_id}", response_model=ApiResponse[UserRead])
def get_user(user_id: int, db: Session = Depends(get_db)) -> dict:
    user = user_service.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return ok(user)


@router.post("/users", response_model=ApiResponse[UserRead], status_code=status.HTTP_201_CREATED)
def create_user(payload: AdminUserCreate, db: Session = Depends(get_db)) -> dict:
    user = account_service.admin_create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role,
        phone=payload.phone,
    )
    return ok(user, "User created")


@router.put("/users/{user_id}", response_model=ApiResponse[UserRead])
def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
) -> dict:
    return ok(account_service.admin_update_user(db, admin, user_id, payload), "User updated")


@router.delete("/users/{user_id}", response_model=ApiResponse[None])
def delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)) -> dict:
    account_service.delete_user(db, admin, user_id)
    return ok(message="User removed")
