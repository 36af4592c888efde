"""Bearer token issuance and verification.

HS256 with the shared JWT_SECRET. Claims:
  sub   account id (the authenticated-caller identity)
  name  holder name at issue time (informational only, never trusted)
  type  "access" | "refresh"
  iat / exp

No revocation list: a token stays valid until it expires.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.bk_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _encode(claims: dict[str, object], lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {**claims, "iat": now, "exp": now + lifetime}
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(account_id: str, holder_name: str | None = None) -> str:
    """Issue a short-lived access token."""
    claims: dict[str, object] = {"sub": account_id, "type": "access"}
    if holder_name is not None:
        claims["name"] = holder_name
    return _encode(claims, _ACCESS_EXPIRE)


def create_refresh_token(account_id: str) -> str:
    """Issue a long-lived refresh token. Refresh tokens are not rotated on use."""
    return _encode({"sub": account_id, "type": "refresh"}, _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode and validate a token.

    Args:
        token: Raw JWT string.
        expected_type: "access" or "refresh". A token of the other type is
                       rejected even when its signature is valid.

    Returns:
        Decoded payload with at least {"sub": ..., "type": ...}.

    Raises:
        InvalidCredentialsError: invalid/expired token, expected_type="access".
        InvalidRefreshTokenError: invalid/expired token, expected_type="refresh".
    """
    payload: dict[str, str] = {}
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        _raise_auth_error(expected_type)

    if payload.get("type") != expected_type or not payload.get("sub"):
        _raise_auth_error(expected_type)

    return payload


def _raise_auth_error(expected_type: str) -> None:
    if expected_type == "access":
        raise InvalidCredentialsError()
    raise InvalidRefreshTokenError()
