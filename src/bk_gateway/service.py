"""AuthService: register, login, refresh.

Registration is CreateAccount with role "user"; admins are provisioned out
of band (see ``AccountApplicationService.create_account``).
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.application.service import AccountApplicationService
from src.bk_account.domain.models import Account, AccountRole, normalize_phone
from src.bk_common.errors import InvalidCredentialsError
from src.bk_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.bk_gateway.auth.password import verify_password


class AuthService:
    """Stateless service: instantiate once, reuse across requests."""

    def __init__(self, accounts: AccountApplicationService | None = None) -> None:
        self._accounts = accounts or AccountApplicationService()

    async def register(
        self,
        db: AsyncSession,
        holder_name: str,
        password: str,
        phone_number: str | None,
        initial_balance: int,
    ) -> tuple[Account, str, str]:
        account = await self._accounts.create_account(
            db,
            holder_name=holder_name,
            password=password,
            initial_balance=initial_balance,
            phone_number=phone_number,
            role=AccountRole.USER,
        )
        return account, *self.issue_tokens(account)

    async def login(
        self, db: AsyncSession, identifier: str, password: str
    ) -> tuple[Account, str, str]:
        """Authenticate by phone number or holder name.

        Holder names are not unique, so every exact match (phone, or
        case-insensitive name) is tried until one password verifies.
        A phone identifier may carry spaces or dashes, as at registration.
        "No such holder" and "wrong password" raise the same error.
        """
        phone = normalize_phone(identifier)
        candidates = await self._accounts.search_by_name_or_phone(db, identifier)
        if phone and phone != identifier:
            extra = await self._accounts.search_by_name_or_phone(db, phone)
            candidates = [*candidates, *extra]
        wanted = identifier.casefold()
        tried: set[str] = set()
        for account in candidates:
            if account.id in tried:
                continue
            tried.add(account.id)
            exact = account.phone_number == phone or account.holder_name.casefold() == wanted
            if exact and verify_password(password, account.password_hash):
                return account, *self.issue_tokens(account)
        raise InvalidCredentialsError()

    async def refresh(self, refresh_token: str) -> str:
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))

    @staticmethod
    def issue_tokens(account: Account) -> tuple[str, str]:
        return (
            create_access_token(account.id, account.holder_name),
            create_refresh_token(account.id),
        )
