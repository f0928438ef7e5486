"""FastAPI dependencies: DB session, current user from JWT, role gating.

The JWT is read from:
1. Authorization header (scanners, API clients)
2. httpOnly cookie (web frontend)
"""
from typing import Generator, Optional

from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from retailhub.core.audit import AuditLog
from retailhub.core.config import settings
from retailhub.core.exceptions import BusinessError
from retailhub.core.permissions import user_has_role
from retailhub.core.security import decode_access_token
from retailhub.db.session import SessionLocal
from retailhub.models.user import User

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> int:
    """User id from the bearer header, falling back to the auth cookie."""
    token = None
    if credentials:
        token = credentials.credentials
    elif settings.AUTH_COOKIE_NAME in request.cookies:
        token = request.cookies[settings.AUTH_COOKIE_NAME]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    sub = decode_access_token(token)
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return int(sub)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def get_current_user(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> User:
    """Load current user from DB."""
    user = db.get(User, user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def require_roles(*roles: str):
    """
    Dependency factory: the current user must hold one of `roles`.

    Usage:
        @router.post("", dependencies=[Depends(require_roles(SUPER_ADMIN))])
    """
    def checker(request: Request, current_user: User = Depends(get_current_user)) -> User:
        if not user_has_role(current_user, *roles):
            action = f"{request.method} {request.url.path}"
            AuditLog.log_access_denied(action, current_user.id, current_user.role, f"requires {', '.join(roles)}")
            raise BusinessError.forbidden(f"user {current_user.id} ({current_user.role}) on {action}")
        return current_user

    return checker
