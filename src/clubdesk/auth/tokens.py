"""Bearer token inspection.

Learn: the backend issues a JWT at login. The client never holds the
signing secret, so it cannot verify the token — it only reads the `exp`
claim to avoid sending requests that are certain to come back 401.
Verification stays with the backend.
"""

from datetime import datetime, timezone
from typing import Optional

import jwt


class TokenError(Exception):
    """Raised when a token cannot be decoded at all."""


def decode_claims(token: str) -> dict:
    """Decode a JWT payload without verifying the signature."""
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
            algorithms=["HS256", "RS256", "ES256"],
        )
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")


def token_expiry(token: str) -> Optional[datetime]:
    """Return the token's expiry as an aware datetime, or None if it has no exp."""
    exp = decode_claims(token).get("exp")
    if exp is None:
        return None
    return datetime.fromtimestamp(int(exp), tz=timezone.utc)


def is_token_expired(token: str, now: Optional[datetime] = None) -> bool:
    """True when the token is undecodable or past its exp claim.

    Opaque (non-JWT) tokens are treated as not expired; the backend decides.
    """
    if token.count(".") != 2:
        return False
    try:
        expires = token_expiry(token)
    except TokenError:
        return True
    if expires is None:
        return False
    return (now or datetime.now(timezone.utc)) >= expires
