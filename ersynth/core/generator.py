"""Row generation that keeps foreign keys pointing at already generated rows."""

import logging
import random
import time
from datetime import datetime
from typing import Any, Dict, List, Optional

from faker import Faker

from .heuristics import ValueHeuristics
from .models import (
    ColumnInfo, GeneratedDataset, GenerationConfig, GenerationStats,
    ProcessedSchema, TableInfo
)


logger = logging.getLogger(__name__)


class DataGenerator:
    """Generates table rows in dependency order, resolving FKs against parents."""

    def __init__(self, config: Optional[GenerationConfig] = None,
                 rng: Optional[random.Random] = None, faker: Optional[Faker] = None,
                 reference_date: Optional[datetime] = None):
        """Initialize data generator; an explicit seed makes output reproducible."""
        self.config = config or GenerationConfig()
        self.rng = rng or random.Random(self.config.seed)
        if faker is None:
            faker = Faker()
            if self.config.seed is not None:
                faker.seed_instance(self.config.seed)
        self.faker = faker
        self.heuristics = ValueHeuristics(
            rng=self.rng,
            faker=self.faker,
            reference_date=reference_date,
            flag_values=self.config.flag_values,
        )

    def generation_order(self, processed: ProcessedSchema) -> List[str]:
        """Dependency order followed by any tables it left out, in declaration order."""
        order = list(processed.dependency_order)
        for name in processed.schema.table_names:
            if name not in order:
                order.append(name)
        return order

    def generate(self, processed: ProcessedSchema) -> GeneratedDataset:
        """Generate every table of a processed schema."""
        start_time = time.time()
        stats = GenerationStats()
        data: Dict[str, List[Dict[str, Any]]] = {}
        order = self.generation_order(processed)

        excluded = processed.excluded_tables
        if excluded:
            message = f"Tables outside the dependency order generated last: {', '.join(excluded)}"
            logger.warning(message)
            stats.warnings.append(message)

        for table_name in order:
            table = processed.schema.get_table(table_name)
            if table is None:
                logger.warning(f"Table {table_name} not found in schema, skipping generation")
                continue

            num_rows = self.config.rows_for(table_name)
            table_stats = {"rows_generated": 0, "fk_fallbacks": 0}
            data[table_name] = self.generate_data_for_table(table, num_rows, data, table_stats)

            stats.tables_processed += 1
            stats.total_rows_generated += table_stats["rows_generated"]
            stats.fk_fallbacks += table_stats["fk_fallbacks"]
            stats.table_stats[table_name] = table_stats

        stats.total_time_seconds = time.time() - start_time
        logger.info(
            f"Generated {stats.total_rows_generated} rows across {stats.tables_processed} tables "
            f"in {stats.total_time_seconds:.2f}s"
        )
        return GeneratedDataset(tables=data, generation_order=tuple(data), stats=stats)

    def generate_data_for_table(self, table: TableInfo, num_rows: int,
                                existing_data: Dict[str, List[Dict[str, Any]]],
                                table_stats: Optional[Dict[str, int]] = None) -> List[Dict[str, Any]]:
        """Generate rows for one table given the tables generated so far."""
        logger.info(f"Generating {num_rows} rows for table: {table.name}")
        if table_stats is None:
            table_stats = {"rows_generated": 0, "fk_fallbacks": 0}

        rows: List[Dict[str, Any]] = []
        for index in range(1, num_rows + 1):
            row = {}
            for column in table.columns:
                if column.is_foreign_key:
                    row[column.name] = self._generate_foreign_key_value(
                        table, column, index, existing_data, rows, table_stats
                    )
                else:
                    row[column.name] = self.heuristics.generate(column, index)
            rows.append(row)

        table_stats["rows_generated"] = len(rows)
        return rows

    def _generate_foreign_key_value(self, table: TableInfo, column: ColumnInfo, index: int,
                                    existing_data: Dict[str, List[Dict[str, Any]]],
                                    current_rows: List[Dict[str, Any]],
                                    table_stats: Dict[str, int]) -> Any:
        """Copy the referenced value from a random parent row, or fall back to the index."""
        ref = column.foreign_key_ref
        if ref is not None:
            if ref.table == table.name:
                parent_rows = current_rows
            else:
                parent_rows = existing_data.get(ref.table)

            if parent_rows:
                parent = self.rng.choice(parent_rows)
                if ref.column in parent:
                    return parent[ref.column]
                logger.debug(f"Referenced column {ref} missing from generated rows of {ref.table}")

        logger.debug(f"No parent rows for {table.name}.{column.name}, using row index {index}")
        table_stats["fk_fallbacks"] = table_stats.get("fk_fallbacks", 0) + 1
        return self.heuristics.generate(column, index)
