"""003: create candles, latest_candle, checkpoints

Revision ID: 003
Revises: 002
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE candles (
            id              VARCHAR(40)     PRIMARY KEY,
            resolution      VARCHAR(8)      NOT NULL,
            timestamp       BIGINT          NOT NULL,
            open_price      NUMERIC(78, 0)  NOT NULL,
            high_price      NUMERIC(78, 0)  NOT NULL,
            low_price       NUMERIC(78, 0)  NOT NULL,
            close_price     NUMERIC(78, 0)  NOT NULL,
            volume          NUMERIC(78, 0)  NOT NULL,
            CONSTRAINT uq_candles_bucket UNIQUE (resolution, timestamp),
            CONSTRAINT ck_candles_range  CHECK (
                low_price <= LEAST(open_price, close_price)
                AND high_price >= GREATEST(open_price, close_price)
            )
        );
    """)

    op.execute("""
        CREATE TABLE latest_candle (
            id              VARCHAR(8)      PRIMARY KEY,
            close_price     NUMERIC(78, 0)  NOT NULL,
            timestamp       BIGINT          NOT NULL
        );
    """)

    op.execute("""
        CREATE TABLE checkpoints (
            id              VARCHAR(42)     PRIMARY KEY,
            block_number    BIGINT          NOT NULL,
            log_index       INT             NOT NULL,
            event_id        VARCHAR(80)     NOT NULL
        );
    """)
    op.execute("COMMENT ON TABLE checkpoints IS 'Last applied (block, log_index) per exchange';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS checkpoints CASCADE;")
    op.execute("DROP TABLE IF EXISTS latest_candle CASCADE;")
    op.execute("DROP TABLE IF EXISTS candles CASCADE;")
