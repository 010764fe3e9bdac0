"""Schema size metadata and complexity classification."""

from typing import Optional

from .models import ComplexityThresholds, ComplexityTier, DatabaseSchema, SchemaMetadata


def classify_schema(schema: DatabaseSchema,
                    thresholds: Optional[ComplexityThresholds] = None) -> SchemaMetadata:
    """Count tables, columns and relationships and assign a complexity tier."""
    thresholds = thresholds or ComplexityThresholds()

    table_count = len(schema.tables)
    total_columns = sum(len(table.columns) for table in schema.tables)
    relationship_count = sum(
        len(table.get_foreign_key_columns()) for table in schema.tables
    )

    if (table_count > thresholds.complex_tables
            or relationship_count > thresholds.complex_relationships):
        complexity = ComplexityTier.COMPLEX
    elif (table_count > thresholds.medium_tables
            or relationship_count > thresholds.medium_relationships):
        complexity = ComplexityTier.MEDIUM
    else:
        complexity = ComplexityTier.SIMPLE

    return SchemaMetadata(
        table_count=table_count,
        total_columns=total_columns,
        relationship_count=relationship_count,
        complexity=complexity,
    )
