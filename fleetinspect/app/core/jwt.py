"""
Bearer tokens for the fixed driver and admin accounts.

A token carries the account claims (``sub``, ``user_id``, ``name``, ``role``)
plus ``iat`` and ``exp``. Verification failures are reported as ``None``;
the auth dependency turns that into a 401.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
from fleetinspect.app.core.config import settings

logger = logging.getLogger(__name__)


def create_access_token(claims: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign an access token for an account.

    Args:
        claims: Account claims, normally ``Account.token_claims()``
        expires_delta: Lifetime override; defaults to ``access_token_expire_minutes``
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    payload = {**claims, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a token and return its claims, or None if it is expired, forged or malformed."""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        logger.info("Rejected expired access token")
        return None
    except JWTError as exc:
        logger.warning("Rejected invalid access token: %s", exc)
        return None
