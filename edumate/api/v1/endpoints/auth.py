import logging

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from edumate.core.database import get_db
from edumate.core.security import verify_password, create_access_token, create_refresh_token, decode_token
from edumate.dependencies import require_admin
from edumate.middlewares.rate_limit import limiter
from edumate.models import User, UserRole
from edumate.schemas.auth import LoginRequest, TokenPair, RefreshRequest, Message
from edumate.schemas.user import AdminOut

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_ADMIN_MESSAGE = "You do not have admin access. Kindly download our app to continue."


def _token_pair(user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(str(user.id), user.role.value),
        refresh_token=create_refresh_token(str(user.id), user.role.value),
    )


@router.post("/login", response_model=TokenPair)
@limiter.limit("10/minute")
def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email.lower()).first()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if user.role != UserRole.ADMIN:
        logger.info("Back-office login refused for non-admin user=%s", user.id)
        raise HTTPException(status_code=403, detail=NOT_ADMIN_MESSAGE)
    if not user.is_active:
        raise HTTPException(status_code=403, detail="User is inactive")
    return _token_pair(user)


@router.post("/refresh", response_model=TokenPair)
@limiter.limit("30/minute")
def refresh(request: Request, payload: RefreshRequest, db: Session = Depends(get_db)):
    try:
        decoded = decode_token(payload.refresh_token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    if decoded.get("type") != "refresh" or not decoded.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    user = db.query(User).filter(User.id == str(decoded["sub"])).first()
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="User not found or inactive")
    if user.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail=NOT_ADMIN_MESSAGE)
    return _token_pair(user)


@router.get("/me", response_model=AdminOut)
def me(admin: User = Depends(require_admin)):
    return admin


@router.post("/logout", response_model=Message)
def logout(admin: User = Depends(require_admin)):
    # Tokens are stateless; the client drops them.
    logger.info("Admin logout user=%s", admin.id)
    return Message(message="Logged out")
