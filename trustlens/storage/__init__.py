"""Postgres pool and DDL."""

from trustlens.storage.database import Database
from trustlens.storage.schema import create_tables

__all__ = ["Database", "create_tables"]
