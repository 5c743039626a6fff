"""JWT access tokens shared with the identity provider.

The provider signs tokens with SECRET_KEY; this service only verifies them.
create_access_token exists for scripts and tests that need a valid token.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from officeflow.core.config import get_settings
from officeflow.shared.utils.datetime import utc_now


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Create a signed token whose sub claim is the user id.

    Args:
        subject: User id.
        expires_delta: Optional TTL; else settings.access_token_expire_minutes.
        extra_claims: Optional additional claims.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    ttl = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    to_encode: dict[str, Any] = dict(extra_claims or {})
    to_encode["sub"] = subject
    to_encode["exp"] = utc_now() + ttl
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Requires exp and sub.

    Raises:
        ValueError: If the token is invalid, expired, or missing claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
