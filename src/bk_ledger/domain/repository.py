"""Repository Protocol for the ledger: lets unit tests inject a fake."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_ledger.domain.models import LockedAccount, Transaction


class LedgerRepositoryProtocol(Protocol):
    async def lock_accounts(
        self, db: AsyncSession, account_ids: list[str]
    ) -> dict[str, LockedAccount]: ...

    async def debit(self, db: AsyncSession, account_id: str, amount: int) -> int: ...

    async def credit(self, db: AsyncSession, account_id: str, amount: int) -> int: ...

    async def insert_transaction(
        self, db: AsyncSession, tx: Transaction
    ) -> Transaction | None: ...

    async def list_history(
        self, db: AsyncSession, account_id: str, limit: int | None
    ) -> list[Transaction]: ...

    async def list_incoming(
        self, db: AsyncSession, account_id: str, limit: int
    ) -> list[Transaction]: ...

    async def get_most_recent(self, db: AsyncSession, account_id: str) -> Transaction | None: ...
