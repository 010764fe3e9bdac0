"""Structural validation of input schemas.

Validation never raises: problems are returned as human readable strings so
an imperfect, machine-extracted schema can still be processed downstream.
"""

import logging
from typing import List, Set

from .models import DatabaseSchema, TableInfo


logger = logging.getLogger(__name__)


def validate_schema(schema: DatabaseSchema) -> List[str]:
    """Return the list of structural problems found in a schema (empty if valid)."""
    errors: List[str] = []
    declared_tables = set(schema.table_names)
    seen_tables: Set[str] = set()

    for table in schema.tables:
        if table.name in seen_tables:
            errors.append(f"Duplicate table name: {table.name}")
        seen_tables.add(table.name)

        errors.extend(_validate_table(table, declared_tables))

    if errors:
        logger.warning(f"Schema validation found {len(errors)} problem(s)")
    return errors


def _validate_table(table: TableInfo, declared_tables: Set[str]) -> List[str]:
    errors: List[str] = []
    seen_columns: Set[str] = set()

    for column in table.columns:
        if column.name in seen_columns:
            errors.append(f"Duplicate column name in {table.name}: {column.name}")
        seen_columns.add(column.name)

        if not column.is_foreign_key:
            continue
        if column.has_malformed_foreign_key:
            errors.append(
                f"Invalid foreign key format in {table.name}.{column.name}: {column.foreign_key}"
            )
        elif column.foreign_key_ref.table not in declared_tables:
            errors.append(
                f"Table {table.name}: foreign key {column.name} references unknown table "
                f"{column.foreign_key_ref.table}"
            )

    if not table.get_primary_key_columns():
        errors.append(f"Table {table.name} has no primary key")

    return errors
