"""Pydantic request/response schemas for bk_account API.

Passwords and password hashes never appear in a response schema.
"""

from pydantic import BaseModel, Field

from src.bk_account.domain.models import Account
from src.bk_common.cents import cents_to_display
from src.bk_common.datetime_utils import to_iso
from src.bk_ledger.application.schemas import HistoryItem
from src.bk_ledger.domain.models import Transaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DepositRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Amount to deposit in cents")


class RenameRequest(BaseModel):
    holder_name: str = Field(..., min_length=1, max_length=100)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AccountResponse(BaseModel):
    account_id: str
    holder_name: str
    phone_number: str | None
    role: str
    balance_cents: int
    balance_display: str
    created_at: str
    updated_at: str

    @classmethod
    def from_account(cls, account: Account) -> "AccountResponse":
        return cls(
            account_id=account.id,
            holder_name=account.holder_name,
            phone_number=account.phone_number,
            role=account.role,
            balance_cents=account.balance,
            balance_display=cents_to_display(account.balance),
            created_at=to_iso(account.created_at),
            updated_at=to_iso(account.updated_at),
        )


class AccountSummary(BaseModel):
    """Public view of another holder: no balance, no role."""

    account_id: str
    holder_name: str
    phone_number: str | None

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(
            account_id=account.id,
            holder_name=account.holder_name,
            phone_number=account.phone_number,
        )


class AccountListResponse(BaseModel):
    items: list[AccountResponse]
    total: int


class AccountSearchResponse(BaseModel):
    items: list[AccountSummary]
    total: int


class BalanceResponse(BaseModel):
    """Current balance plus the latest transfers received."""

    account_id: str
    balance_cents: int
    balance_display: str
    recent_incoming: list[HistoryItem] = []

    @classmethod
    def from_cents(
        cls, account_id: str, balance: int, incoming: list[Transaction] | None = None
    ) -> "BalanceResponse":
        return cls(
            account_id=account_id,
            balance_cents=balance,
            balance_display=cents_to_display(balance),
            recent_incoming=[HistoryItem.for_account(tx, account_id) for tx in incoming or []],
        )


class DepositResponse(BaseModel):
    account_id: str
    balance_cents: int
    balance_display: str
    deposited_cents: int
    deposited_display: str

    @classmethod
    def from_result(cls, account: Account, amount: int) -> "DepositResponse":
        return cls(
            account_id=account.id,
            balance_cents=account.balance,
            balance_display=cents_to_display(account.balance),
            deposited_cents=amount,
            deposited_display=cents_to_display(amount),
        )


class RenameResponse(BaseModel):
    account_id: str
    holder_name: str
