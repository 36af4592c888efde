"""LedgerApplicationService: the only path by which money moves.

transfer() runs as one atomic unit (``run_atomic``):

    lock both rows (ascending id) → existence checks → funds check
    → debit → credit → append ledger row → commit

Any failure before commit rolls everything back, so a transfer either
updates both balances and writes exactly one ledger row, or changes nothing.
Funds are checked while the source row is locked, so two concurrent
transfers out of the same account serialize on that row.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import normalize_account_id
from src.bk_common.cents import validate_amount
from src.bk_common.database import run_atomic
from src.bk_common.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InternalError,
    InvalidTransferError,
    TransactionNotFoundError,
)
from src.bk_common.id_generator import generate_transaction_id
from src.bk_ledger.domain.models import Transaction
from src.bk_ledger.domain.repository import LedgerRepositoryProtocol
from src.bk_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)

# Fresh ids tried when the ledger insert reports a duplicate id
_ID_COLLISION_ATTEMPTS = 3


class LedgerApplicationService:
    def __init__(
        self,
        repo: LedgerRepositoryProtocol | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self._repo: LedgerRepositoryProtocol = repo or LedgerRepository()
        self._max_attempts = max_attempts

    async def transfer(
        self, db: AsyncSession, from_id: str, to_id: str, amount: int
    ) -> Transaction:
        validate_amount(amount)
        source = normalize_account_id(from_id)
        if source is None:
            raise InvalidTransferError(f"Malformed source account id: {from_id}")
        destination = normalize_account_id(to_id)
        if destination is None:
            raise InvalidTransferError(f"Malformed destination account id: {to_id}")
        if source == destination:
            raise InvalidTransferError("Cannot transfer to the same account")

        async def _work(session: AsyncSession) -> Transaction:
            locked = await self._repo.lock_accounts(session, [source, destination])

            sender = locked.get(source)
            if sender is None:
                raise AccountNotFoundError(source)
            if sender.balance < amount:
                raise InsufficientFundsError(amount, sender.balance)
            receiver = locked.get(destination)
            if receiver is None:
                raise AccountNotFoundError(destination)

            await self._repo.debit(session, source, amount)
            await self._repo.credit(session, destination, amount)
            for _ in range(_ID_COLLISION_ATTEMPTS):
                tx_id = generate_transaction_id()
                stored = await self._repo.insert_transaction(
                    session,
                    Transaction(
                        id=tx_id,
                        from_account_id=source,
                        to_account_id=destination,
                        amount=amount,
                        from_holder_name=sender.holder_name,
                        to_holder_name=receiver.holder_name,
                    ),
                )
                if stored is not None:
                    return stored
                logger.warning("transaction id collision id=%s, retrying", tx_id)
            raise InternalError("Could not allocate a unique transaction id")

        tx = await run_atomic(db, _work, self._max_attempts)
        logger.info(
            "transfer committed tx=%s from=%s to=%s amount=%d",
            tx.id,
            tx.from_account_id,
            tx.to_account_id,
            tx.amount,
        )
        return tx

    async def get_history(
        self, db: AsyncSession, account_id: str, limit: int | None = None
    ) -> list[Transaction]:
        """All transfers touching ``account_id``, newest first."""
        normalized = normalize_account_id(account_id)
        if normalized is None:
            return []
        return await self._repo.list_history(db, normalized, limit)

    async def get_recent_incoming(
        self, db: AsyncSession, account_id: str, limit: int
    ) -> list[Transaction]:
        """Latest transfers received by ``account_id``, newest first."""
        normalized = normalize_account_id(account_id)
        if normalized is None:
            return []
        return await self._repo.list_incoming(db, normalized, limit)

    async def get_most_recent(self, db: AsyncSession, account_id: str) -> Transaction:
        normalized = normalize_account_id(account_id)
        tx = await self._repo.get_most_recent(db, normalized) if normalized else None
        if tx is None:
            raise TransactionNotFoundError(account_id)
        return tx
