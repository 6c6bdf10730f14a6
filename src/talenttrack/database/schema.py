from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import MetaData, inspect, text
from sqlalchemy.engine import Engine

from ..common.logger import get_logger

logger = get_logger(__name__)


def list_tables(engine: Engine) -> list[str]:
    return sorted(inspect(engine).get_table_names())


def _selected_tables(metadata: MetaData, names: Optional[Iterable[str]]):
    if names is None:
        return None
    wanted = set(names)
    unknown = wanted - set(metadata.tables)
    if unknown:
        raise ValueError(f"Unknown tables: {', '.join(sorted(unknown))}")
    return [t for t in metadata.sorted_tables if t.name in wanted]


def _add_missing_columns(engine: Engine, metadata: MetaData, tables) -> list[str]:
    """Non-destructive alter: add columns that exist in the models but not in the database."""
    added: list[str] = []
    preparer = engine.dialect.identifier_preparer
    with engine.begin() as conn:
        inspector = inspect(conn)
        existing_tables = set(inspector.get_table_names())
        for table in tables or metadata.sorted_tables:
            if table.name not in existing_tables:
                continue
            present = {c["name"] for c in inspector.get_columns(table.name)}
            for column in table.columns:
                if column.name in present:
                    continue
                # added as nullable so existing rows stay valid
                ddl = (
                    f"ALTER TABLE {preparer.format_table(table)} "
                    f"ADD COLUMN {preparer.format_column(column)} {column.type.compile(dialect=engine.dialect)}"
                )
                conn.execute(text(ddl))
                added.append(f"{table.name}.{column.name}")
    return added


def sync_schema(
    engine: Engine,
    metadata: MetaData,
    *,
    force: bool = False,
    alter: bool = False,
    tables: Optional[Iterable[str]] = None,
) -> None:
    """Bring the database schema in line with ``metadata``.

    - ``force``: drop every mapped table and recreate it (destroys data).
    - ``alter``: create missing tables, then add missing columns.
    - default: create missing tables only (``CREATE TABLE IF NOT EXISTS``).
    """
    selected = _selected_tables(metadata, tables)

    if force:
        logger.warning("Dropping and recreating tables (force=True)")
        metadata.drop_all(engine, tables=selected)

    metadata.create_all(engine, tables=selected, checkfirst=True)

    if alter and not force:
        added = _add_missing_columns(engine, metadata, selected)
        if added:
            logger.info("Added columns: %s", ", ".join(added))
