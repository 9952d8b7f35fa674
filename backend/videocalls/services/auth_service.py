"""
Auth Service - bearer token handling

Tokens are issued by the workspace identity service and signed with the
shared JWT secret; ``sub`` carries the user id. This service only needs to
verify them. ``create_access_token`` exists for local tooling and tests.
"""
from datetime import datetime, timedelta, UTC
from typing import Optional
import logging

from jose import jwt, JWTError

from videocalls.config.settings import settings

logger = logging.getLogger(__name__)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXP_DAYS)
    expire = datetime.now(UTC) + expires_delta
    to_encode = {"sub": subject, "exp": int(expire.timestamp())}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info(f"[Auth] Rejected token: {e}")
        return None
