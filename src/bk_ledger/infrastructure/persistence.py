"""LedgerRepository: concrete implementation of LedgerRepositoryProtocol.

Row locks are taken with SELECT ... FOR UPDATE in ascending id order, so two
transfers over the same pair of accounts can never deadlock each other.
Debit also carries a ``balance >= :amount`` guard in its WHERE clause.
The ledger insert skips on a duplicate id rather than raising, so an id
collision does not abort the surrounding transaction.

Transaction ownership: the CALLER commits, normally through ``run_atomic``.
"""

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.errors import InsufficientFundsError, InternalError
from src.bk_ledger.domain.models import LockedAccount, Transaction

_LOCK_ACCOUNTS_SQL = text("""
    SELECT id, holder_name, balance
    FROM accounts
    WHERE id IN :account_ids
    ORDER BY id
    FOR UPDATE
""").bindparams(bindparam("account_ids", expanding=True))

_DEBIT_SQL = text("""
    UPDATE accounts
    SET balance = balance - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :account_id AND balance >= :amount
    RETURNING balance
""")

_CREDIT_SQL = text("""
    UPDATE accounts
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :account_id
    RETURNING balance
""")

_TX_COLUMNS = """
    id, from_account_id, to_account_id, amount,
    from_holder_name, to_holder_name, created_at
"""

_INSERT_TX_SQL = text(f"""
    INSERT INTO transactions
        (id, from_account_id, to_account_id, amount,
         from_holder_name, to_holder_name, created_at)
    VALUES
        (:id, :from_account_id, :to_account_id, :amount,
         :from_holder_name, :to_holder_name, clock_timestamp())
    ON CONFLICT (id) DO NOTHING
    RETURNING {_TX_COLUMNS}
""")

_LIST_HISTORY_SQL = text(f"""
    SELECT {_TX_COLUMNS}
    FROM transactions
    WHERE from_account_id = :account_id OR to_account_id = :account_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")

_LIST_INCOMING_SQL = text(f"""
    SELECT {_TX_COLUMNS}
    FROM transactions
    WHERE to_account_id = :account_id
    ORDER BY created_at DESC, id DESC
    LIMIT :limit
""")


def _row_to_transaction(row: object) -> Transaction:
    return Transaction(
        id=row.id,  # type: ignore[attr-defined]
        from_account_id=str(row.from_account_id),  # type: ignore[attr-defined]
        to_account_id=str(row.to_account_id),  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        from_holder_name=row.from_holder_name,  # type: ignore[attr-defined]
        to_holder_name=row.to_holder_name,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class LedgerRepository:
    async def lock_accounts(
        self, db: AsyncSession, account_ids: list[str]
    ) -> dict[str, LockedAccount]:
        result = await db.execute(_LOCK_ACCOUNTS_SQL, {"account_ids": sorted(account_ids)})
        return {
            str(row.id): LockedAccount(
                id=str(row.id), holder_name=row.holder_name, balance=row.balance
            )
            for row in result.fetchall()
        }

    async def debit(self, db: AsyncSession, account_id: str, amount: int) -> int:
        result = await db.execute(_DEBIT_SQL, {"account_id": account_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            # Only reachable if the caller skipped the check under the lock
            raise InsufficientFundsError(amount, 0)
        return int(row.balance)

    async def credit(self, db: AsyncSession, account_id: str, amount: int) -> int:
        result = await db.execute(_CREDIT_SQL, {"account_id": account_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Locked account {account_id} vanished during transfer")
        return int(row.balance)

    async def insert_transaction(
        self, db: AsyncSession, tx: Transaction
    ) -> Transaction | None:
        """Append ``tx``; None when its id is already taken."""
        result = await db.execute(
            _INSERT_TX_SQL,
            {
                "id": tx.id,
                "from_account_id": tx.from_account_id,
                "to_account_id": tx.to_account_id,
                "amount": tx.amount,
                "from_holder_name": tx.from_holder_name,
                "to_holder_name": tx.to_holder_name,
            },
        )
        row = result.fetchone()
        return _row_to_transaction(row) if row else None

    async def list_history(
        self, db: AsyncSession, account_id: str, limit: int | None
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_HISTORY_SQL, {"account_id": account_id, "limit": limit}
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def list_incoming(
        self, db: AsyncSession, account_id: str, limit: int
    ) -> list[Transaction]:
        result = await db.execute(
            _LIST_INCOMING_SQL, {"account_id": account_id, "limit": limit}
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def get_most_recent(self, db: AsyncSession, account_id: str) -> Transaction | None:
        result = await db.execute(_LIST_HISTORY_SQL, {"account_id": account_id, "limit": 1})
        row = result.fetchone()
        return _row_to_transaction(row) if row else None
