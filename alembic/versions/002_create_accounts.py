"""002: create accounts table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE accounts (
            id              UUID         PRIMARY KEY DEFAULT gen_random_uuid(),
            holder_name     VARCHAR(100) NOT NULL,
            phone_number    VARCHAR(32),
            password_hash   VARCHAR(255) NOT NULL,
            balance         BIGINT       NOT NULL DEFAULT 0,
            role            VARCHAR(16)  NOT NULL DEFAULT 'user',
            version         BIGINT       NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ  NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_accounts_phone_number   UNIQUE (phone_number),
            CONSTRAINT ck_accounts_balance_gte_0  CHECK (balance >= 0),
            CONSTRAINT ck_accounts_role           CHECK (role IN ('user', 'admin'))
        );
    """)
    op.execute("CREATE INDEX idx_accounts_holder_name_lower ON accounts (LOWER(holder_name));")
    op.execute("""
        CREATE TRIGGER trg_accounts_updated_at
            BEFORE UPDATE ON accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE accounts IS 'Bank accounts: all amounts in cents';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
