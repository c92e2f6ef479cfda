"""002: create orders, trades, positions

Revision ID: 002
Revises: 001
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id              VARCHAR(80)     PRIMARY KEY,
            trader          VARCHAR(42)     NOT NULL,
            is_buy          BOOLEAN         NOT NULL,
            price           NUMERIC(78, 0)  NOT NULL,
            initial_amount  NUMERIC(78, 0)  NOT NULL,
            amount          NUMERIC(78, 0)  NOT NULL,
            status          VARCHAR(10)     NOT NULL DEFAULT 'OPEN',
            timestamp       BIGINT          NOT NULL,
            CONSTRAINT ck_orders_status CHECK (status IN ('OPEN', 'FILLED', 'CANCELLED')),
            CONSTRAINT ck_orders_amount CHECK (amount >= 0 AND amount <= initial_amount)
        );
    """)
    op.execute("CREATE INDEX idx_orders_open ON orders (trader, timestamp DESC) WHERE amount <> 0;")

    op.execute("""
        CREATE TABLE trades (
            id              VARCHAR(80)     PRIMARY KEY,
            buyer           VARCHAR(42)     NOT NULL,
            seller          VARCHAR(42)     NOT NULL,
            price           NUMERIC(78, 0)  NOT NULL,
            amount          NUMERIC(78, 0)  NOT NULL,
            timestamp       BIGINT          NOT NULL,
            tx_hash         VARCHAR(66)     NOT NULL,
            buy_order_id    VARCHAR(80)     NOT NULL,
            sell_order_id   VARCHAR(80)     NOT NULL
        );
    """)
    op.execute("CREATE INDEX idx_trades_buyer ON trades (buyer, timestamp DESC);")
    op.execute("CREATE INDEX idx_trades_seller ON trades (seller, timestamp DESC);")
    op.execute("CREATE INDEX idx_trades_time ON trades (timestamp DESC, id DESC);")

    op.execute("""
        CREATE TABLE positions (
            id              VARCHAR(42)     PRIMARY KEY,
            trader          VARCHAR(42)     NOT NULL,
            size            NUMERIC(78, 0)  NOT NULL,
            entry_price     NUMERIC(78, 0)  NOT NULL
        );
    """)
    op.execute("COMMENT ON TABLE positions IS 'One row per trader; last PositionUpdated wins';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS positions CASCADE;")
    op.execute("DROP TABLE IF EXISTS trades CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
