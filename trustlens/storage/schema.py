"""
Database schema for trustlens.

Actors (users and vendors) carry the trust fields written by the trust
calculator; reviews carry the per-review authenticity verdict; every
authenticated review owns one review_authentications row that holds the
workflow state, steps and community votes as JSONB.
"""

import logging

from trustlens.storage.database import Database

logger = logging.getLogger(__name__)

_ACTOR_COLUMNS = """
            id                  TEXT PRIMARY KEY,
            username            TEXT NOT NULL,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            ip_address          TEXT,
            transaction_count   INTEGER NOT NULL DEFAULT 0,
            account_age         INTEGER NOT NULL DEFAULT 0,
            trust_score         INTEGER NOT NULL DEFAULT 50
                CHECK (trust_score BETWEEN 0 AND 100),
            risk_level          TEXT NOT NULL DEFAULT 'medium',
            typing_cadence      JSONB NOT NULL DEFAULT '[]',
            total_sales         INTEGER NOT NULL DEFAULT 0,
            total_returns       INTEGER NOT NULL DEFAULT 0,
            overall_return_rate REAL NOT NULL DEFAULT 0.0,
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW()
"""

SCHEMA_SQL = f"""
        CREATE TABLE IF NOT EXISTS users ({_ACTOR_COLUMNS});

        CREATE TABLE IF NOT EXISTS vendors ({_ACTOR_COLUMNS});

        CREATE INDEX IF NOT EXISTS idx_users_ip_created
            ON users(ip_address, created_at DESC);
        CREATE INDEX IF NOT EXISTS idx_vendors_ip_created
            ON vendors(ip_address, created_at DESC);

        CREATE TABLE IF NOT EXISTS products (
            id              TEXT PRIMARY KEY,
            seller_kind     TEXT NOT NULL CHECK (seller_kind IN ('user', 'vendor')),
            seller_id       TEXT NOT NULL,
            name            TEXT NOT NULL,
            total_sold      INTEGER NOT NULL DEFAULT 0,
            total_returned  INTEGER NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        CREATE INDEX IF NOT EXISTS idx_products_seller
            ON products(seller_kind, seller_id);

        CREATE TABLE IF NOT EXISTS reviews (
            id                  TEXT PRIMARY KEY,
            product_id          TEXT NOT NULL,
            reviewer_id         TEXT NOT NULL,
            text                TEXT NOT NULL,
            rating              INTEGER,
            behavioral_metrics  JSONB NOT NULL DEFAULT '{{}}',
            authenticity_score  INTEGER,
            is_ai_generated     BOOLEAN NOT NULL DEFAULT FALSE,
            linguistic_analysis JSONB NOT NULL DEFAULT '{{}}',
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        CREATE INDEX IF NOT EXISTS idx_reviews_reviewer
            ON reviews(reviewer_id, created_at DESC);

        CREATE TABLE IF NOT EXISTS review_authentications (
            auth_id                         TEXT PRIMARY KEY,
            review_id                       TEXT NOT NULL UNIQUE,
            overall_authentication_score    INTEGER NOT NULL DEFAULT 0,
            authentication_steps            JSONB NOT NULL DEFAULT '[]',
            final_decision                  JSONB,
            current_stage                   TEXT NOT NULL DEFAULT 'initial_analysis',
            fraud_indicators                JSONB NOT NULL DEFAULT '[]',
            community_votes                 JSONB NOT NULL DEFAULT '[]',
            created_at                      TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at                      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        CREATE INDEX IF NOT EXISTS idx_review_auth_stage
            ON review_authentications(current_stage);

        CREATE TABLE IF NOT EXISTS alerts (
            alert_id        TEXT PRIMARY KEY,
            alert_type      TEXT NOT NULL,
            target_type     TEXT NOT NULL,
            target_id       TEXT NOT NULL,
            severity        TEXT NOT NULL,
            title           TEXT NOT NULL,
            description     TEXT NOT NULL,
            data            JSONB NOT NULL DEFAULT '{{}}',
            status          TEXT NOT NULL DEFAULT 'active',
            created_at      TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );

        CREATE INDEX IF NOT EXISTS idx_alerts_target
            ON alerts(target_type, target_id);
        CREATE INDEX IF NOT EXISTS idx_alerts_created_at
            ON alerts(created_at DESC);
"""


async def create_tables(database: Database) -> None:
    """Create all trustlens tables and indexes if they don't exist."""
    await database.execute(SCHEMA_SQL)
    logger.info("Database schema ensured")
