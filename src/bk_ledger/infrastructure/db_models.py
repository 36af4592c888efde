"""SQLAlchemy ORM model for the transactions ledger table.

Maps the table created by alembic/versions/003_create_transactions.py.
Account ids are plain columns, not foreign keys: a hard-deleted account
keeps its history.
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, String, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.bk_common.database import Base


class TransactionORM(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_gt_0"),
        CheckConstraint(
            "from_account_id <> to_account_id", name="ck_transactions_distinct_parties"
        ),
        Index("idx_transactions_from_time", "from_account_id", "created_at"),
        Index("idx_transactions_to_time", "to_account_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    from_account_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    to_account_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    from_holder_name: Mapped[str] = mapped_column(String(100), nullable=False)
    to_holder_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=text("NOW()")
    )
    # NOTE: No updated_at, transactions is append-only
