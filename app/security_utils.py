"""
Bearer tokens for the API.

Identity proofing happens upstream; these helpers only sign and verify the
token that carries the user id in its `sub` claim.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, SECRET_KEY

logger = logging.getLogger(__name__)


def create_jwt_token(claims: dict[str, Any], expires_delta: timedelta) -> str:
    """Sign `claims` with an `exp` of now + expires_delta"""
    payload = {**claims, "exp": datetime.now(timezone.utc) + expires_delta}
    return jose_jwt.encode(payload, SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_jwt_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode a token signed with SECRET_KEY.

    Returns:
        The claims, or None when the signature is wrong or the token expired
    """
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"⚠️ Rejected bearer token: {e}")
        return None


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    """Issue a bearer token whose subject is the user id"""
    minutes = expires_minutes or ACCESS_TOKEN_EXPIRE_MINUTES
    return create_jwt_token({"sub": user_id}, timedelta(minutes=minutes))
