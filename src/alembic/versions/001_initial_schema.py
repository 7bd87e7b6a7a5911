"""Initial schema -- all tables, indexes, category seed data, and ledger triggers.

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from alembic import op

from promptmarket.schema_sql import (
    indexes,
    seeds,
    tables_catalog,
    tables_commerce,
    tables_core,
    triggers,
)

revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _execute_all(statements: list[str]) -> None:
    """Execute a list of SQL statements sequentially."""
    for stmt in statements:
        op.execute(stmt)


def upgrade() -> None:
    _execute_all(tables_core.ALL)
    _execute_all(tables_catalog.ALL)
    _execute_all(tables_commerce.ALL)
    _execute_all(indexes.ALL)
    _execute_all(seeds.ALL)
    _execute_all(triggers.FUNCTIONS_ALL)
    _execute_all(triggers.TRIGGERS_ALL)


def downgrade() -> None:
    _drop_triggers()
    _drop_functions()
    _drop_tables()


def _drop_triggers() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_reviews_immutable ON reviews;")
    op.execute("DROP TRIGGER IF EXISTS trg_purchases_immutable ON purchases;")


def _drop_functions() -> None:
    op.execute("DROP FUNCTION IF EXISTS raise_immutable_error();")


def _drop_tables() -> None:
    tables = [
        "purchases",
        "cart_items",
        "favorites",
        "reviews",
        "prompts",
        "categories",
        "users",
    ]
    for table in tables:
        op.execute(f"DROP TABLE IF EXISTS {table} CASCADE;")
