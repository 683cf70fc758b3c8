"""Actor repository: trust-field reads and writes for users and vendors.

Every query takes a table chosen from ``ACTOR_TABLES`` by the actor kind;
table names are never interpolated from caller input.
"""

import logging
from datetime import datetime
from typing import Any

from trustlens.actors.schemas import ACTOR_TABLES, Actor, SellerRef
from trustlens.storage.database import Database

logger = logging.getLogger(__name__)


class ActorRepository:
    """Repository for actor lookups, address collision queries and
    trust score persistence."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def get(self, ref: SellerRef) -> Actor | None:
        """Get an actor by tagged reference."""
        sql = f"SELECT * FROM {ref.table} WHERE id = $1"
        row = await self._db.fetchrow(sql, ref.id)
        if row is None:
            return None
        return _row_to_actor(row, ref.kind)

    async def get_by_id(self, actor_id: str, kind: str = "user") -> Actor | None:
        return await self.get(SellerRef(kind=kind, id=actor_id))

    async def find_ids_by_address(
        self,
        ip_address: str,
        *,
        exclude_id: str | None = None,
        kind: str = "user",
    ) -> list[str]:
        """Distinct actor IDs registered from ``ip_address``, excluding one."""
        table = ACTOR_TABLES[kind]
        sql = f"""
            SELECT id FROM {table}
            WHERE ip_address = $1 AND ($2::text IS NULL OR id <> $2)
            ORDER BY created_at
        """
        rows = await self._db.fetch(sql, ip_address, exclude_id)
        return [row["id"] for row in rows]

    async def count_created_from_address_since(
        self,
        ip_address: str,
        since: datetime,
        *,
        kind: str = "user",
    ) -> int:
        """Count accounts (any, caller included) created from an address
        at or after ``since``."""
        table = ACTOR_TABLES[kind]
        sql = f"""
            SELECT COUNT(*) FROM {table}
            WHERE ip_address = $1 AND created_at >= $2
        """
        return await self._db.fetchval(sql, ip_address, since) or 0

    async def update_trust_fields(
        self,
        ref: SellerRef,
        *,
        trust_score: int,
        risk_level: str,
        account_age: int,
        transaction_count: int,
    ) -> bool:
        """Persist a trust recomputation in a single UPDATE.

        Returns:
            True if the actor row existed and was updated.
        """
        sql = f"""
            UPDATE {ref.table}
            SET trust_score = $2,
                risk_level = $3,
                account_age = $4,
                transaction_count = $5,
                updated_at = NOW()
            WHERE id = $1
        """
        result = await self._db.execute(
            sql, ref.id, trust_score, risk_level, account_age, transaction_count,
        )
        return result == "UPDATE 1"

    async def get_seller_sales(self, ref: SellerRef) -> dict[str, int] | None:
        """Aggregate sold/returned units over the seller's products.

        Returns:
            Dict with product_count, total_sold, total_returned, or None
            when the seller lists no products.
        """
        sql = """
            SELECT COUNT(*) AS product_count,
                   COALESCE(SUM(total_sold), 0) AS total_sold,
                   COALESCE(SUM(total_returned), 0) AS total_returned
            FROM products
            WHERE seller_kind = $1 AND seller_id = $2
        """
        row = await self._db.fetchrow(sql, ref.kind, ref.id)
        if row is None or row["product_count"] == 0:
            return None
        return {
            "product_count": int(row["product_count"]),
            "total_sold": int(row["total_sold"]),
            "total_returned": int(row["total_returned"]),
        }

    async def update_seller_trust(
        self,
        ref: SellerRef,
        *,
        trust_score: int,
        total_sales: int,
        total_returns: int,
        overall_return_rate: float,
    ) -> bool:
        """Persist return-rate based seller trust to the table named by ``ref``."""
        sql = f"""
            UPDATE {ref.table}
            SET trust_score = $2,
                total_sales = $3,
                total_returns = $4,
                overall_return_rate = $5,
                updated_at = NOW()
            WHERE id = $1
        """
        result = await self._db.execute(
            sql, ref.id, trust_score, total_sales, total_returns, overall_return_rate,
        )
        return result == "UPDATE 1"

    async def list_ids(self, kind: str = "user", limit: int = 1000) -> list[str]:
        """List actor IDs of one kind, oldest first."""
        table = ACTOR_TABLES[kind]
        rows = await self._db.fetch(
            f"SELECT id FROM {table} ORDER BY created_at LIMIT $1", limit,
        )
        return [row["id"] for row in rows]


def _row_to_actor(row: Any, kind: str) -> Actor:
    """Convert a database row to an Actor."""
    data = dict(row)
    data["kind"] = kind
    return Actor.from_dict(data)
