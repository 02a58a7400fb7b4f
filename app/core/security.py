from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from app.core.config import settings
from app.core.logger import logger


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Signs `data` into an access token.
    Expiry defaults to ACCESS_TOKEN_EXPIRE_DAYS.
    """
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.ACCESS_TOKEN_SECRET, algorithm=settings.ACCESS_TOKEN_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verifies signature and expiry.
    Returns the claims, or None if the token is invalid or expired.
    """
    try:
        return jwt.decode(token, settings.ACCESS_TOKEN_SECRET, algorithms=[settings.ACCESS_TOKEN_ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ Access token rejected: {e}")
        return None
