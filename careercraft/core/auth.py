"""
Authentication Utility - JWT, cookies and password handling.

Provides:
- Password hashing with bcrypt
- JWT session token creation/verification (stored in an httpOnly cookie)
- Password-reset token generation/hashing
- FastAPI dependencies for protected routes
"""

import hashlib
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel
from pymongo.database import Database
from fastapi import Depends, Response
from fastapi.security import APIKeyCookie
from bson import ObjectId
from bson.errors import InvalidId

from careercraft.core.config import get_settings
from careercraft.core.exceptions import Forbidden, IdentityNotFound, Unauthenticated
from careercraft.db.mongodb import COLLECTIONS, get_mongo_db

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Session cookie extractor (missing cookie handled by get_current_user)
cookie_scheme = APIKeyCookie(name=get_settings().cookie_name, auto_error=False)


class CurrentUser(BaseModel):
    """Identity + role of the caller, passed explicitly into every service call."""
    id: str
    email: str
    role: str
    full_name: str = ""
    company_name: Optional[str] = None


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT session token carrying identity and role."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode = {"sub": user_id, "role": role, "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token. Expired or tampered tokens return None."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="none" if settings.is_production else "lax",
        max_age=settings.jwt_expire_minutes * 60,
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="none" if settings.is_production else "lax",
    )


# ============================================================
# PASSWORD RESET TOKENS
# ============================================================

def hash_reset_token(raw_token: str) -> str:
    """One-way hash stored in the database; the raw token only leaves via the notifier."""
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def create_password_reset_token() -> Tuple[str, str, datetime]:
    """Returns (raw_token, token_hash, expires_at) with expires_at as naive UTC."""
    settings = get_settings()
    raw_token = secrets.token_hex(32)
    expires_at = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(
        minutes=settings.password_reset_expire_minutes
    )
    return raw_token, hash_reset_token(raw_token), expires_at


# ============================================================
# FASTAPI DEPENDENCIES
# ============================================================

def get_current_user(
    token: Optional[str] = Depends(cookie_scheme),
    db: Database = Depends(get_mongo_db),
) -> CurrentUser:
    """
    FastAPI dependency - Get current authenticated user from the session cookie.

    Usage:
        @router.get("/protected")
        def route(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    if not token:
        raise Unauthenticated("Not authorized, no token.")

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        logger.warning("Rejected session token (invalid or expired)")
        raise Unauthenticated("Not authorized, token failed.")

    try:
        user_id = ObjectId(payload["sub"])
    except (InvalidId, TypeError):
        raise Unauthenticated("Not authorized, token failed.")

    # Verify user still exists
    user = db[COLLECTIONS["users"]].find_one({"_id": user_id}, {"password_hash": 0})
    if not user:
        raise IdentityNotFound()

    return CurrentUser(
        id=str(user["_id"]),
        email=user["email"],
        role=user["role"],
        full_name=user.get("full_name", ""),
        company_name=user.get("company_name"),
    )


def authorize(user: CurrentUser, *roles: str) -> CurrentUser:
    """Raise Forbidden unless the user's role is one of `roles`."""
    if user.role not in roles:
        raise Forbidden(
            f"Forbidden: User role '{user.role}' is not authorized to access this route. "
            f"Allowed roles: {', '.join(roles)}"
        )
    return user


def require_roles(*roles: str):
    """Dependency factory - require one of the given roles."""
    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        return authorize(user, *roles)
    return dependency


get_current_seeker = require_roles("seeker")
get_current_recruiter = require_roles("company_recruiter")
