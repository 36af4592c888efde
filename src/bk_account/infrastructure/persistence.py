"""AccountRepository: concrete implementation of AccountRepositoryProtocol.

Balance changes are single atomic UPDATE ... RETURNING statements; a result
of 0 rows means the account does not exist.

Transaction ownership: the CALLER (application service) commits or rolls
back, normally through ``run_atomic``.
"""

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account, normalize_account_id
from src.bk_common.database import sqlstate_of
from src.bk_common.errors import AccountNotFoundError, InternalError, PhoneExistsError

_ACCOUNT_COLUMNS = """
    id, holder_name, phone_number, password_hash, balance, role,
    version, created_at, updated_at
"""

_INSERT_ACCOUNT_SQL = text(f"""
    INSERT INTO accounts (holder_name, phone_number, password_hash, balance, role)
    VALUES (:holder_name, :phone_number, :password_hash, :balance, :role)
    RETURNING {_ACCOUNT_COLUMNS}
""")

_GET_BY_ID_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE id = :account_id
""")

_GET_BY_PHONE_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE phone_number = :phone_number
""")

_SEARCH_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
    WHERE holder_name ILIKE :pattern ESCAPE '\\'
       OR phone_number ILIKE :pattern ESCAPE '\\'
    ORDER BY holder_name, id
""")

_LIST_ALL_SQL = text(f"""
    SELECT {_ACCOUNT_COLUMNS}
    FROM accounts
""")

_DELETE_SQL = text("""
    DELETE FROM accounts
    WHERE id = :account_id
    RETURNING id
""")

_RENAME_SQL = text("""
    UPDATE accounts
    SET holder_name = :holder_name,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :account_id
    RETURNING holder_name
""")

_DEPOSIT_SQL = text(f"""
    UPDATE accounts
    SET balance = balance + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :account_id
    RETURNING {_ACCOUNT_COLUMNS}
""")

_UNIQUE_VIOLATION = "23505"


def escape_like(query: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_account(row: object) -> Account:
    return Account(
        id=str(row.id),  # type: ignore[attr-defined]
        holder_name=row.holder_name,  # type: ignore[attr-defined]
        phone_number=row.phone_number,  # type: ignore[attr-defined]
        password_hash=row.password_hash,  # type: ignore[attr-defined]
        balance=row.balance,  # type: ignore[attr-defined]
        role=row.role,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class AccountRepository:
    """Concrete repository: all mutations atomic at the SQL level."""

    async def create_account(
        self,
        db: AsyncSession,
        holder_name: str,
        password_hash: str,
        initial_balance: int,
        phone_number: str | None,
        role: str,
    ) -> Account:
        try:
            result = await db.execute(
                _INSERT_ACCOUNT_SQL,
                {
                    "holder_name": holder_name,
                    "phone_number": phone_number,
                    "password_hash": password_hash,
                    "balance": initial_balance,
                    "role": role,
                },
            )
        except IntegrityError as exc:
            # uq on phone_number is the only unique column besides the PK
            if phone_number is not None and sqlstate_of(exc) == _UNIQUE_VIOLATION:
                raise PhoneExistsError(phone_number) from exc
            raise
        row = result.fetchone()
        if row is None:
            raise InternalError("Account insert returned no rows")
        return _row_to_account(row)

    async def get_by_id(self, db: AsyncSession, account_id: str) -> Account | None:
        normalized = normalize_account_id(account_id)
        if normalized is None:
            return None
        result = await db.execute(_GET_BY_ID_SQL, {"account_id": normalized})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def get_by_phone(self, db: AsyncSession, phone_number: str) -> Account | None:
        result = await db.execute(_GET_BY_PHONE_SQL, {"phone_number": phone_number})
        row = result.fetchone()
        return _row_to_account(row) if row else None

    async def search_by_name_or_phone(self, db: AsyncSession, query: str) -> list[Account]:
        pattern = f"%{escape_like(query)}%"
        result = await db.execute(_SEARCH_SQL, {"pattern": pattern})
        return [_row_to_account(row) for row in result.fetchall()]

    async def list_all(self, db: AsyncSession) -> list[Account]:
        result = await db.execute(_LIST_ALL_SQL)
        return [_row_to_account(row) for row in result.fetchall()]

    async def delete_by_id(self, db: AsyncSession, account_id: str) -> None:
        normalized = normalize_account_id(account_id)
        if normalized is None:
            raise AccountNotFoundError(account_id)
        result = await db.execute(_DELETE_SQL, {"account_id": normalized})
        if result.fetchone() is None:
            raise AccountNotFoundError(account_id)

    async def rename(self, db: AsyncSession, account_id: str, holder_name: str) -> str:
        normalized = normalize_account_id(account_id)
        if normalized is None:
            raise AccountNotFoundError(account_id)
        result = await db.execute(
            _RENAME_SQL, {"account_id": normalized, "holder_name": holder_name}
        )
        row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(account_id)
        return str(row.holder_name)

    async def deposit(self, db: AsyncSession, account_id: str, amount: int) -> Account:
        normalized = normalize_account_id(account_id)
        if normalized is None:
            raise AccountNotFoundError(account_id)
        result = await db.execute(_DEPOSIT_SQL, {"account_id": normalized, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise AccountNotFoundError(account_id)
        return _row_to_account(row)
