"""AccountApplicationService: the Account Store operations.

Mutations (create, deposit, rename, delete) run through ``run_atomic`` so
each one commits or rolls back as a unit. Reads run without an explicit
transaction. Authorization is the caller's job.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account, AccountRole, normalize_phone
from src.bk_account.domain.repository import AccountRepositoryProtocol
from src.bk_account.infrastructure.persistence import AccountRepository
from src.bk_common.cents import validate_amount
from src.bk_common.database import run_atomic
from src.bk_common.errors import AccountNotFoundError, InvalidAmountError, PhoneExistsError
from src.bk_gateway.auth.password import hash_password


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def create_account(
        self,
        db: AsyncSession,
        holder_name: str,
        password: str,
        initial_balance: int = 0,
        phone_number: str | None = None,
        role: AccountRole = AccountRole.USER,
    ) -> Account:
        if isinstance(initial_balance, bool) or not isinstance(initial_balance, int):
            raise InvalidAmountError("Initial balance must be an integer number of cents")
        if initial_balance < 0:
            raise InvalidAmountError("Initial balance cannot be negative")
        password_hash = hash_password(password)

        async def _work(session: AsyncSession) -> Account:
            # Friendly pre-check; the UNIQUE constraint is the final guard
            if phone_number is not None:
                if await self._repo.get_by_phone(session, phone_number) is not None:
                    raise PhoneExistsError(phone_number)
            return await self._repo.create_account(
                session,
                holder_name=holder_name,
                password_hash=password_hash,
                initial_balance=initial_balance,
                phone_number=phone_number,
                role=AccountRole(role).value,
            )

        return await run_atomic(db, _work)

    async def get_by_id(self, db: AsyncSession, account_id: str) -> Account:
        account = await self._repo.get_by_id(db, account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def get_by_phone(self, db: AsyncSession, phone_number: str) -> Account:
        account = await self._repo.get_by_phone(db, normalize_phone(phone_number))
        if account is None:
            raise AccountNotFoundError(phone_number)
        return account

    async def search_by_name_or_phone(self, db: AsyncSession, query: str) -> list[Account]:
        if not query:
            return []
        return await self._repo.search_by_name_or_phone(db, query)

    async def list_all(self, db: AsyncSession) -> list[Account]:
        return await self._repo.list_all(db)

    async def delete_by_id(self, db: AsyncSession, account_id: str) -> None:
        async def _work(session: AsyncSession) -> None:
            await self._repo.delete_by_id(session, account_id)

        await run_atomic(db, _work)

    async def rename(self, db: AsyncSession, account_id: str, holder_name: str) -> str:
        async def _work(session: AsyncSession) -> str:
            return await self._repo.rename(session, account_id, holder_name)

        return await run_atomic(db, _work)

    async def deposit(self, db: AsyncSession, account_id: str, amount: int) -> Account:
        validate_amount(amount)

        async def _work(session: AsyncSession) -> Account:
            return await self._repo.deposit(session, account_id, amount)

        return await run_atomic(db, _work)

    async def get_balance(self, db: AsyncSession, account_id: str) -> int:
        account = await self.get_by_id(db, account_id)
        return account.balance
