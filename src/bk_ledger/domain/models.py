"""Domain models for bk_ledger: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Transaction:
    """One completed transfer. Immutable once written."""

    id: str                      # snowflake string
    from_account_id: str
    to_account_id: str
    amount: int                  # cents, always > 0
    from_holder_name: str        # snapshot at transfer time, not live
    to_holder_name: str          # snapshot at transfer time, not live
    created_at: datetime | None = None

    def involves(self, account_id: str) -> bool:
        return account_id in (self.from_account_id, self.to_account_id)

    def signed_amount_for(self, account_id: str) -> int:
        """Amount as seen from ``account_id``: negative when it paid."""
        return -self.amount if self.from_account_id == account_id else self.amount


@dataclass
class LockedAccount:
    """Balance row held under SELECT ... FOR UPDATE for the current unit."""

    id: str
    holder_name: str
    balance: int                 # cents
