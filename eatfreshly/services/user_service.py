"""User service operations."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from eatfreshly.models.user import User, normalize_user_role


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email.strip().lower()).limit(1))


def get_user_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def create_user(
    db: Session,
    name: str,
    email: str,
    hashed_password: str,
    role: str = "customer",
    phone: str | None = None,
) -> User:
    user = User(
        name=name,
        email=email.strip().lower(),
        password_hash=hashed_password,
        role=normalize_user_role(role),
        phone=phone,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def list_users(
    db: Session,
    *,
    offset: int,
    limit: int,
    role: str | None = None,
    search: str | None = None,
) -> tuple[list[User], int]:
    stmt = select(User)
    if role:
        stmt = stmt.where(User.role == normalize_user_role(role))
    if search:
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(func.lower(User.name).like(pattern) | func.lower(User.email).like(pattern))
    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    users = db.scalars(stmt.order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(limit)).all()
    return list(users), total


def count_admin_users(db: Session) -> int:
    return len(db.scalars(select(User.id).where(User.role == "admin")).all())
