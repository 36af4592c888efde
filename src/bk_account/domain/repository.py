"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def create_account(
        self,
        db: AsyncSession,
        holder_name: str,
        password_hash: str,
        initial_balance: int,
        phone_number: str | None,
        role: str,
    ) -> Account: ...

    async def get_by_id(self, db: AsyncSession, account_id: str) -> Account | None: ...

    async def get_by_phone(self, db: AsyncSession, phone_number: str) -> Account | None: ...

    async def search_by_name_or_phone(self, db: AsyncSession, query: str) -> list[Account]: ...

    async def list_all(self, db: AsyncSession) -> list[Account]: ...

    async def delete_by_id(self, db: AsyncSession, account_id: str) -> None: ...

    async def rename(self, db: AsyncSession, account_id: str, holder_name: str) -> str: ...

    async def deposit(self, db: AsyncSession, account_id: str, amount: int) -> Account: ...
