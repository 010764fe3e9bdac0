"""Schema processing pipeline: validate, classify, order, then generate."""

import logging
from typing import Optional, Tuple

from .classifier import classify_schema
from .dependency_resolver import DependencyResolver
from .generator import DataGenerator
from .models import (
    DatabaseSchema, GeneratedDataset, GenerationConfig, ProcessedSchema
)
from .validator import validate_schema


logger = logging.getLogger(__name__)


def process_schema(schema: DatabaseSchema,
                   config: Optional[GenerationConfig] = None) -> ProcessedSchema:
    """Derive the processed schema consumed by data generation and exporters."""
    config = config or GenerationConfig()

    validation_errors = validate_schema(schema)
    for error in validation_errors:
        logger.warning(f"Schema validation: {error}")

    metadata = classify_schema(schema, config.complexity)
    resolver = DependencyResolver(schema)
    dependency_order = resolver.topological_sort(config.cycle_policy)
    cycles = resolver.detect_circular_dependencies()

    logger.info(
        f"Processed schema: {metadata.table_count} tables, {metadata.total_columns} columns, "
        f"{metadata.relationship_count} relationships ({metadata.complexity.value})"
    )

    return ProcessedSchema(
        schema=fill_nullable_defaults(schema),
        metadata=metadata,
        dependency_order=tuple(dependency_order),
        validation_errors=tuple(validation_errors),
        circular_dependencies=tuple(tuple(cycle) for cycle in cycles),
    )


def fill_nullable_defaults(schema: DatabaseSchema) -> DatabaseSchema:
    """Return a copy of the schema with every column's nullable flag set."""
    tables = []
    for table in schema.tables:
        columns = tuple(
            column.model_copy(update={"nullable": column.is_nullable})
            for column in table.columns
        )
        tables.append(table.model_copy(update={"columns": columns}))
    return schema.model_copy(update={"tables": tuple(tables)})


def run_pipeline(schema: DatabaseSchema,
                 config: Optional[GenerationConfig] = None) -> Tuple[ProcessedSchema, GeneratedDataset]:
    """Process a schema and generate its dataset in one call."""
    config = config or GenerationConfig()
    processed = process_schema(schema, config)
    dataset = DataGenerator(config).generate(processed)
    return processed, dataset
