"""Auth: staff login and account management.

- Password hashing with bcrypt
- httpOnly, SameSite cookie in addition to the bearer token
- Staff accounts are created by a super_admin only; no self-registration
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from retailhub.api.deps import get_db, get_current_user, require_roles
from retailhub.core.audit import AuditLog
from retailhub.core.config import settings
from retailhub.core.permissions import ROLES, SUPER_ADMIN
from retailhub.core.security import (
    check_password_policy,
    create_access_token,
    get_password_hash,
    verify_password,
)
from retailhub.models.store import Store
from retailhub.models.user import User
from retailhub.schemas.user import UserCreate, UserLogin, UserResponse, Token

router = APIRouter()


@router.post("/login", response_model=Token)
def login(data: UserLogin, response: Response, db: Session = Depends(get_db)):
    """Login; the token is returned and also set as httpOnly cookie."""
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not user.is_active or not verify_password(data.password, user.hashed_password):
        AuditLog.log_authentication("failed_login", data.email, False, reason="Invalid credentials")
        # Generic error: don't specify which field is wrong
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(subject=str(user.id))
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        secure=settings.SECURE_COOKIES,
        httponly=True,
        samesite=settings.SAME_SITE_COOKIE,
    )
    AuditLog.log_authentication("login", user.email, True)
    return Token(access_token=token)


@router.post("/logout")
def logout(response: Response, current_user: User = Depends(get_current_user)):
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        secure=settings.SECURE_COOKIES,
        httponly=True,
        samesite=settings.SAME_SITE_COOKIE,
    )
    AuditLog.log_authentication("logout", current_user.email, True)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Current user with role; the frontend builds its menu from this."""
    return current_user


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db), _: User = Depends(require_roles(SUPER_ADMIN))):
    return db.query(User).order_by(User.id).all()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(SUPER_ADMIN)),
):
    """Create a staff account with a role (and outlet for store managers)."""
    if db.query(User).filter(User.email == data.email).first():
        raise HTTPException(status_code=400, detail="Email already registered")
    if data.role not in ROLES:
        raise HTTPException(status_code=400, detail=f"Role must be one of: {', '.join(ROLES)}")
    if data.store_id is not None and db.get(Store, data.store_id) is None:
        raise HTTPException(status_code=404, detail="Store not found")

    weakness = check_password_policy(data.password)
    if weakness:
        raise HTTPException(status_code=400, detail=weakness)

    user = User(
        email=data.email,
        hashed_password=get_password_hash(data.password),
        full_name=data.full_name,
        role=data.role,
        store_id=data.store_id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    AuditLog.log_action("create", "user", user.id, current_user, changes={"role": user.role})
    return user
