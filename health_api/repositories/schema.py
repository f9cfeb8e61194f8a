"""
Optional schema bootstrap.

Compiles the SQLAlchemy table declarations to PostgreSQL DDL and runs it
through asyncpg. Every statement uses ``IF NOT EXISTS`` so existing tables
are left untouched.
"""

from typing import List

import asyncpg
import structlog
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from health_api.models.tables import Base

logger = structlog.get_logger(__name__)


def schema_statements() -> List[str]:
    """Return the DDL statements for all declared tables, in dependency order."""
    dialect = postgresql.dialect()
    statements = []

    for table in Base.metadata.sorted_tables:
        statements.append(str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)))
        for index in sorted(table.indexes, key=lambda i: i.name):
            statements.append(str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect)))

    return statements


async def create_schema(pool: asyncpg.Pool) -> None:
    """
    Create missing tables and indexes.

    Args:
        pool: asyncpg connection pool
    """
    statements = schema_statements()

    async with pool.acquire() as conn:
        async with conn.transaction():
            for statement in statements:
                await conn.execute(statement)

    logger.info("database_schema_ensured", statements=len(statements))
