"""
Admin authentication: bcrypt password hashes and a signed session cookie.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, Response
from jose import JWTError, jwt

from tourbook.config import Settings, get_settings
from tourbook.db import AdminRecord, DbClient
from tourbook.dependencies import get_db_client

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def hash_password(password: str | bytes) -> str:
    """
    Hash a password using bcrypt directly, handling str or bytes input.
    """
    if isinstance(password, bytes):
        password_bytes = password
    else:
        password_bytes = password.encode("utf-8")
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # Malformed hash in the database.
        return False


def create_session_token(
    username: str, settings: Settings, expires_delta: Optional[timedelta] = None
) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta or timedelta(seconds=settings.session_max_age_seconds)
    )
    payload = {"sub": username, "iat": now, "exp": expire}
    return jwt.encode(payload, settings.session_secret, algorithm=ALGORITHM)


def read_session_token(token: str, settings: Settings) -> Optional[str]:
    """
    Return the username carried by a valid token, else None.
    """
    try:
        payload = jwt.decode(token, settings.session_secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    username = payload.get("sub")
    return username if isinstance(username, str) and username else None


def set_session_cookie(response: Response, username: str, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        create_session_token(username, settings),
        max_age=settings.session_max_age_seconds,
        path="/",
        httponly=True,
        samesite="none",
        secure=settings.session_cookie_secure,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        "",
        max_age=0,
        path="/",
        httponly=True,
        samesite="none",
        secure=settings.session_cookie_secure,
    )


def authenticate(db: DbClient, username: str, password: str) -> Optional[AdminRecord]:
    admin = db.get_admin(username)
    if admin is None or not verify_password(password, admin.password_hash):
        logger.warning("Failed admin login for %r", username)
        return None
    return admin


def require_admin(
    request: Request,
    db: DbClient = Depends(get_db_client),
    settings: Settings = Depends(get_settings),
) -> AdminRecord:
    """Dependency guarding every management endpoint."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    username = read_session_token(token, settings)
    if not username:
        raise HTTPException(status_code=401, detail="Unauthorized")
    admin = db.get_admin(username)
    if admin is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return admin
