"""003: create transactions ledger table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Account ids are not foreign keys: history outlives a deleted account.
    op.execute("""
        CREATE TABLE transactions (
            id                  VARCHAR(32)  PRIMARY KEY,
            from_account_id     UUID         NOT NULL,
            to_account_id       UUID         NOT NULL,
            amount              BIGINT       NOT NULL,
            from_holder_name    VARCHAR(100) NOT NULL,
            to_holder_name      VARCHAR(100) NOT NULL,
            created_at          TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_transactions_amount_gt_0        CHECK (amount > 0),
            CONSTRAINT ck_transactions_distinct_parties   CHECK (from_account_id <> to_account_id)
        );
    """)
    op.execute("CREATE INDEX idx_transactions_from_time ON transactions (from_account_id, created_at);")
    op.execute("CREATE INDEX idx_transactions_to_time ON transactions (to_account_id, created_at);")
    op.execute("""
        CREATE TRIGGER trg_transactions_append_only
            BEFORE UPDATE OR DELETE ON transactions
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)
    op.execute("COMMENT ON TABLE transactions IS 'Transfer ledger: append-only, amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE;")
