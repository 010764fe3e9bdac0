"""Persistence of generated datasets and processed schemas."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, List, Mapping, Sequence, Union

from tqdm import tqdm

from .models import DatabaseSchema, GeneratedDataset, ProcessedSchema


logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json")


def format_csv_value(value: Any) -> str:
    """Render a scalar the way the CSV contract expects."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def write_table_csv(path: Path, columns: Sequence[str], rows: Sequence[Mapping[str, Any]]) -> None:
    """Write a header of column names followed by one line per row."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
        writer.writerow(columns)
        for row in rows:
            writer.writerow([format_csv_value(row.get(column)) for column in columns])


def write_table_json(path: Path, rows: Sequence[Mapping[str, Any]]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump([dict(row) for row in rows], f, indent=2, default=str)


def write_dataset(dataset: GeneratedDataset, schema: DatabaseSchema,
                  output_dir: Union[str, Path], file_format: str = "csv",
                  show_progress: bool = False) -> List[Path]:
    """Write one file per generated table and return the written paths."""
    if file_format not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported format: {file_format}")

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    written = []

    for table_name in tqdm(list(dataset), desc="Writing tables", unit="table",
                           disable=not show_progress):
        rows = dataset[table_name]
        file_path = output_path / f"{table_name}.{file_format}"

        if file_format == "csv":
            table = schema.get_table(table_name)
            columns = table.column_names if table else (list(rows[0]) if rows else [])
            write_table_csv(file_path, columns, rows)
        else:
            write_table_json(file_path, rows)

        logger.debug(f"Wrote {len(rows)} rows to {file_path}")
        written.append(file_path)

    logger.info(f"Wrote {len(written)} {file_format} files to {output_path}")
    return written


def write_processed_schema(processed: ProcessedSchema, path: Union[str, Path]) -> Path:
    """Write the processed schema as JSON for downstream generators."""
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(processed.to_dict(), f, indent=2)
    return file_path
