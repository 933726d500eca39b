"""JWT token creation and verification.

Tokens are issued by the platform's auth service; this service only verifies
them. create_access_token exists for tests and the dev seeding script.
The caller's id is the "sub" claim and their role the "role" claim.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from construction_docs.core.config import get_settings
from construction_docs.shared.utils import utc_now


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims (e.g. sub, role).

    Expiry defaults to settings.access_token_expire_minutes.
    """
    settings = get_settings()
    to_encode = data.copy()
    if expires_delta is not None:
        expire = utc_now() + expires_delta
    else:
        expire = utc_now() + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub.

    Raises:
        ValueError: If token is invalid, expired, or missing required claims.
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
    if "sub" not in payload:
        raise ValueError("Token missing required claim: sub")
    return payload
