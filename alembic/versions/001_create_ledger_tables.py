"""001: create append-only ledger tables (margin, funding, liquidations)

Revision ID: 001
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE margin_events (
            id              VARCHAR(80)     PRIMARY KEY,
            trader          VARCHAR(42)     NOT NULL,
            amount          NUMERIC(78, 0)  NOT NULL,
            event_type      VARCHAR(10)     NOT NULL,
            timestamp       BIGINT          NOT NULL,
            tx_hash         VARCHAR(66)     NOT NULL,
            CONSTRAINT ck_margin_event_type CHECK (event_type IN ('DEPOSIT', 'WITHDRAW')),
            CONSTRAINT ck_margin_amount     CHECK (amount >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_margin_trader_time ON margin_events (trader, timestamp DESC);")

    op.execute("""
        CREATE TABLE funding_events (
            id              VARCHAR(80)     PRIMARY KEY,
            event_type      VARCHAR(15)     NOT NULL,
            trader          VARCHAR(42),
            cumulative_rate NUMERIC(78, 0),
            payment         NUMERIC(78, 0),
            timestamp       BIGINT          NOT NULL,
            CONSTRAINT ck_funding_variant CHECK (
                (event_type = 'GLOBAL_UPDATE' AND cumulative_rate IS NOT NULL
                    AND trader IS NULL AND payment IS NULL)
                OR
                (event_type = 'USER_PAID' AND cumulative_rate IS NULL
                    AND trader IS NOT NULL AND payment IS NOT NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_funding_trader_time ON funding_events (trader, timestamp DESC);")

    op.execute("""
        CREATE TABLE liquidations (
            id              VARCHAR(80)     PRIMARY KEY,
            trader          VARCHAR(42)     NOT NULL,
            liquidator      VARCHAR(42)     NOT NULL,
            amount          NUMERIC(78, 0)  NOT NULL,
            fee             NUMERIC(78, 0)  NOT NULL,
            timestamp       BIGINT          NOT NULL,
            tx_hash         VARCHAR(66)     NOT NULL
        );
    """)
    op.execute("CREATE INDEX idx_liquidations_trader_time ON liquidations (trader, timestamp DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS liquidations CASCADE;")
    op.execute("DROP TABLE IF EXISTS funding_events CASCADE;")
    op.execute("DROP TABLE IF EXISTS margin_events CASCADE;")
