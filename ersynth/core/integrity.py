"""Post-generation checks: referential integrity and a simple data quality report."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .models import DatabaseSchema, GeneratedDataset, ProcessedSchema


logger = logging.getLogger(__name__)

HIGH_NULL_RATE = 0.5
LOW_ID_CARDINALITY = 0.5


def verify_referential_integrity(processed: ProcessedSchema,
                                 dataset: GeneratedDataset) -> Dict[str, Any]:
    """Check every generated FK value against the referenced parent column."""
    logger.info("Verifying referential integrity")

    report = {
        "total_tables_checked": 0,
        "tables_with_issues": [],
        "foreign_key_violations": [],
        "summary": {},
    }

    for table_name in dataset:
        table = processed.schema.get_table(table_name)
        if table is None:
            continue

        report["total_tables_checked"] += 1
        rows = dataset[table_name]
        violations = []
        unchecked = []

        for column in table.columns:
            ref = column.foreign_key_ref
            if ref is None or ref.table not in dataset:
                if column.is_foreign_key:
                    unchecked.append(column.name)
                continue

            parent_rows = dataset[ref.table]
            if not parent_rows:
                unchecked.append(column.name)
                continue

            parent_values = {row.get(ref.column) for row in parent_rows}
            for position, row in enumerate(rows, 1):
                value = row.get(column.name)
                if value not in parent_values:
                    violations.append(
                        f"{table_name}.{column.name} row {position}: value {value!r} "
                        f"not found in {ref}"
                    )

        if violations:
            report["tables_with_issues"].append(table_name)
            report["foreign_key_violations"].extend(violations)

        report["summary"][table_name] = {
            "row_count": len(rows),
            "issues_found": len(violations),
            "unchecked_columns": unchecked,
        }

    if report["foreign_key_violations"]:
        logger.warning(f"Found {len(report['foreign_key_violations'])} foreign key violations")
    return report


def build_quality_report(dataset: GeneratedDataset,
                         schema: Optional[DatabaseSchema] = None) -> Dict[str, Any]:
    """Summarize null rates and cardinality per table and score the dataset."""
    tables = []
    total_issues = 0

    for table_name, rows in dataset.items():
        table = schema.get_table(table_name) if schema else None
        foreign_keys = set(table.get_foreign_key_columns()) if table else set()
        columns = table.column_names if table else (list(rows[0]) if rows else [])

        metrics = _table_metrics(table_name, columns, rows, foreign_keys)
        total_issues += len(metrics["issues"])
        tables.append(metrics)

    score = max(0, 100 - min(total_issues * 5, 50))
    return {
        "generated_at": datetime.now().isoformat(timespec="seconds"),
        "tables": tables,
        "summary": {
            "total_tables": len(tables),
            "total_rows": dataset.total_rows,
            "total_issues": total_issues,
            "overall_score": score,
        },
    }


def _table_metrics(table_name: str, columns: List[str], rows, foreign_keys) -> Dict[str, Any]:
    null_counts = {}
    unique_counts = {}
    issues = []

    if not rows:
        issues.append(f"Table '{table_name}' has no rows")

    for column in columns:
        values = [row.get(column) for row in rows]
        present = [value for value in values if value not in (None, "")]
        null_counts[column] = len(values) - len(present)
        unique_counts[column] = len(set(present))

        if not values:
            continue
        null_rate = null_counts[column] / len(values)
        if null_rate > HIGH_NULL_RATE:
            issues.append(f"Column '{table_name}.{column}' has high null rate ({null_rate:.1%})")
        if (_looks_like_identifier(column) and column not in foreign_keys
                and unique_counts[column] < len(values) * LOW_ID_CARDINALITY):
            issues.append(f"Column '{table_name}.{column}' has low cardinality for an ID column")

    return {
        "table": table_name,
        "row_count": len(rows),
        "column_count": len(columns),
        "null_counts": null_counts,
        "unique_counts": unique_counts,
        "issues": issues,
    }


def _looks_like_identifier(column: str) -> bool:
    lowered = column.lower()
    return lowered == "id" or lowered.endswith("_id")
