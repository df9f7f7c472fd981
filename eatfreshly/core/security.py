"""Password hashing, bearer tokens and the auth dependencies."""

from datetime import datetime, timedelta, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from eatfreshly.core.config import settings
from eatfreshly.core.errors import PermissionDenied, Unauthorized
from eatfreshly.db.session import get_db
from eatfreshly.models.user import User
from eatfreshly.services.user_service import get_user_by_id

pwd_context: CryptContext = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
# Missing headers are reported through the error envelope, not FastAPI's 403.
bearer_scheme: HTTPBearer = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, expires_in: timedelta | None = None) -> str:
    """Sign a token whose subject is the user id."""
    issued_at = datetime.now(timezone.utc)
    claims: dict[str, Any] = {
        "sub": str(user.id),
        "role": user.role,
        "iat": issued_at,
        "exp": issued_at + (expires_in or timedelta(minutes=settings.jwt_expire_minutes)),
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Return the user id carried by ``token``."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise Unauthorized("Token has expired") from exc
    except JWTError as exc:
        raise Unauthorized("Token is not valid") from exc

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise Unauthorized("Invalid authentication token") from exc


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None:
        raise Unauthorized("No token, authorization denied")

    user = get_user_by_id(db=db, user_id=decode_access_token(credentials.credentials))
    if user is None:
        raise Unauthorized("User not found")
    if not user.is_active:
        raise Unauthorized("Account is deactivated")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only back-office accounts."""
    if user.role != "admin":
        raise PermissionDenied("Admin access required")
    return user
