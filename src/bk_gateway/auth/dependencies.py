"""FastAPI dependencies: get_current_account, require_admin.

Usage in any protected router:
    from src.bk_gateway.auth.dependencies import get_current_account

    @router.get("/protected")
    async def protected(account: Account = Depends(get_current_account)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account
from src.bk_account.infrastructure.persistence import AccountRepository
from src.bk_common.database import get_db_session
from src.bk_common.errors import InvalidCredentialsError, PermissionDeniedError
from src.bk_gateway.auth.jwt_handler import decode_token

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Not authorized",
    headers={"WWW-Authenticate": "Bearer"},
)

_repo = AccountRepository()


async def get_current_account(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Account:
    """Resolve the Bearer token to the caller's Account.

    Raises HTTP 401 if the token is missing, invalid or expired, or if the
    account it names has been deleted since it was issued.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    account = await _repo.get_by_id(db, payload["sub"])
    if account is None:
        raise _CREDENTIALS_EXCEPTION
    return account


async def require_admin(
    current_account: Account = Depends(get_current_account),
) -> Account:
    """Admin-role gate for privileged endpoints (ListAll and friends)."""
    if not current_account.is_admin:
        raise PermissionDeniedError()
    return current_account
