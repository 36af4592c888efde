"""Pydantic schemas for the transfers API."""

from pydantic import BaseModel, Field

from src.bk_common.cents import cents_to_display
from src.bk_common.datetime_utils import to_iso
from src.bk_ledger.domain.models import Transaction


class TransferRequest(BaseModel):
    to_account_id: str = Field(..., min_length=1, max_length=64, description="Destination account ID")
    amount_cents: int = Field(..., gt=0, description="Amount to transfer in cents")


class TransactionResponse(BaseModel):
    transaction_id: str
    from_account_id: str
    from_holder_name: str
    to_account_id: str
    to_holder_name: str
    amount_cents: int
    amount_display: str
    created_at: str

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionResponse":
        return cls(
            transaction_id=tx.id,
            from_account_id=tx.from_account_id,
            from_holder_name=tx.from_holder_name,
            to_account_id=tx.to_account_id,
            to_holder_name=tx.to_holder_name,
            amount_cents=tx.amount,
            amount_display=cents_to_display(tx.amount),
            created_at=to_iso(tx.created_at),
        )


class HistoryItem(BaseModel):
    """A ledger entry seen from one account's side."""

    transaction_id: str
    direction: str               # "SENT" | "RECEIVED"
    counterparty_id: str
    counterparty_name: str
    amount_cents: int            # signed: negative when sent
    amount_display: str
    created_at: str

    @classmethod
    def for_account(cls, tx: Transaction, account_id: str) -> "HistoryItem":
        sent = tx.from_account_id == account_id
        signed = tx.signed_amount_for(account_id)
        return cls(
            transaction_id=tx.id,
            direction="SENT" if sent else "RECEIVED",
            counterparty_id=tx.to_account_id if sent else tx.from_account_id,
            counterparty_name=tx.to_holder_name if sent else tx.from_holder_name,
            amount_cents=signed,
            amount_display=cents_to_display(signed),
            created_at=to_iso(tx.created_at),
        )


class HistoryResponse(BaseModel):
    account_id: str
    items: list[HistoryItem]
    total: int

    @classmethod
    def build(cls, account_id: str, txs: list[Transaction]) -> "HistoryResponse":
        return cls(
            account_id=account_id,
            items=[HistoryItem.for_account(tx, account_id) for tx in txs],
            total=len(txs),
        )
