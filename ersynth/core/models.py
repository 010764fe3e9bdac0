"""Data models for schema representation, processing results and configuration."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


FOREIGN_KEY_PATTERN = re.compile(r"^(\w+)\((\w+)\)$")


class ComplexityTier(Enum):
    """Coarse size classification of a schema."""
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class CyclePolicy(Enum):
    """How the dependency resolver treats tables caught in FK cycles."""
    DROP = "drop"
    BREAK = "break"
    ERROR = "error"


class ForeignKeyRef(BaseModel):
    """Parsed form of a ``Table(Column)`` foreign key reference."""

    model_config = ConfigDict(frozen=True)

    table: str
    column: str

    @classmethod
    def parse(cls, raw: Optional[str]) -> Optional["ForeignKeyRef"]:
        """Parse a raw reference string, returning None when it is malformed."""
        if not raw or not isinstance(raw, str):
            return None
        match = FOREIGN_KEY_PATTERN.match(raw.strip())
        if not match:
            return None
        return cls(table=match.group(1), column=match.group(2))

    def __str__(self) -> str:
        return f"{self.table}({self.column})"


class ColumnInfo(BaseModel):
    """A single column as declared in the input schema."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    data_type: str = Field(alias="type")
    primary_key: bool = Field(default=False, alias="primaryKey")
    foreign_key: Optional[str] = Field(default=None, alias="foreignKey")
    nullable: Optional[bool] = None
    default_value: Optional[str] = Field(default=None, alias="defaultValue")

    # Filled from foreign_key at load time
    foreign_key_ref: Optional[ForeignKeyRef] = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _parse_foreign_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and "foreign_key_ref" not in data:
            raw = data.get("foreignKey", data.get("foreign_key"))
            data = {**data, "foreign_key_ref": ForeignKeyRef.parse(raw)}
        return data

    @property
    def is_foreign_key(self) -> bool:
        return bool(self.foreign_key)

    @property
    def has_malformed_foreign_key(self) -> bool:
        return self.is_foreign_key and self.foreign_key_ref is None

    @property
    def is_nullable(self) -> bool:
        """Declared nullability, defaulting to the negation of primary_key."""
        if self.nullable is None:
            return not self.primary_key
        return self.nullable


class TableInfo(BaseModel):
    """A table: a name and its ordered columns."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    columns: Tuple[ColumnInfo, ...] = ()
    description: Optional[str] = None

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def get_column(self, name: str) -> Optional[ColumnInfo]:
        """Get column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    def get_primary_key_columns(self) -> List[str]:
        """Get primary key column names."""
        return [column.name for column in self.columns if column.primary_key]

    def get_foreign_key_columns(self) -> List[str]:
        """Get foreign key column names."""
        return [column.name for column in self.columns if column.is_foreign_key]


class DatabaseSchema(BaseModel):
    """Ordered collection of tables as produced by the diagram parser."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tables: Tuple[TableInfo, ...] = ()

    @property
    def table_names(self) -> List[str]:
        return [table.name for table in self.tables]

    def get_table(self, name: str) -> Optional[TableInfo]:
        """Get the first declared table with the given name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class SchemaMetadata:
    """Summary counts and complexity tier of a schema."""
    table_count: int
    total_columns: int
    relationship_count: int
    complexity: ComplexityTier

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tableCount": self.table_count,
            "totalColumns": self.total_columns,
            "relationshipCount": self.relationship_count,
            "complexityTier": self.complexity.value,
        }


@dataclass(frozen=True)
class ProcessedSchema:
    """Validated schema bundled with its metadata and generation order."""
    schema: DatabaseSchema
    metadata: SchemaMetadata
    dependency_order: Tuple[str, ...]
    validation_errors: Tuple[str, ...] = ()
    circular_dependencies: Tuple[Tuple[str, ...], ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors

    @property
    def excluded_tables(self) -> List[str]:
        """Declared tables missing from the dependency order."""
        ordered = set(self.dependency_order)
        excluded = []
        for name in self.schema.table_names:
            if name not in ordered and name not in excluded:
                excluded.append(name)
        return excluded

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": self.schema.to_dict(),
            "metadata": self.metadata.to_dict(),
            "dependencyOrder": list(self.dependency_order),
            "validationErrors": list(self.validation_errors),
        }


class ComplexityThresholds(BaseModel):
    """Table/relationship counts above which a schema moves up a tier."""

    complex_tables: int = Field(default=20, description="Tables above this count are complex")
    complex_relationships: int = Field(default=30, description="FKs above this count are complex")
    medium_tables: int = Field(default=10, description="Tables above this count are medium")
    medium_relationships: int = Field(default=15, description="FKs above this count are medium")


class GenerationConfig(BaseModel):
    """Configuration for schema processing and data generation."""

    seed: Optional[int] = Field(default=None, description="Random seed for reproducible data")
    default_rows: int = Field(default=10, ge=0, description="Rows per regular table")
    reference_rows: int = Field(default=5, ge=0, description="Rows per reference/lookup table")
    reference_prefixes: List[str] = Field(
        default_factory=lambda: ["ref_"], description="Name prefixes marking reference tables"
    )
    row_counts: Dict[str, int] = Field(
        default_factory=dict, description="Per-table row count overrides"
    )
    cycle_policy: CyclePolicy = Field(
        default=CyclePolicy.DROP, description="Treatment of tables in FK cycles"
    )
    complexity: ComplexityThresholds = Field(default_factory=ComplexityThresholds)
    flag_values: Tuple[str, str] = Field(
        default=("Y", "N"), description="Rendering of true/false flag columns"
    )

    def is_reference_table(self, table_name: str) -> bool:
        lowered = table_name.lower()
        return any(lowered.startswith(prefix.lower()) for prefix in self.reference_prefixes)

    def rows_for(self, table_name: str) -> int:
        """Resolve how many rows to generate for a table."""
        if table_name in self.row_counts:
            return max(0, self.row_counts[table_name])
        if self.is_reference_table(table_name):
            return self.reference_rows
        return self.default_rows


@dataclass
class GenerationStats:
    """Statistics from data generation process."""
    tables_processed: int = 0
    total_rows_generated: int = 0
    total_time_seconds: float = 0.0
    fk_fallbacks: int = 0
    warnings: List[str] = field(default_factory=list)
    table_stats: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def freeze(self) -> "FrozenGenerationStats":
        """Read-only copy taken once generation has finished."""
        return FrozenGenerationStats(
            tables_processed=self.tables_processed,
            total_rows_generated=self.total_rows_generated,
            total_time_seconds=self.total_time_seconds,
            fk_fallbacks=self.fk_fallbacks,
            warnings=tuple(self.warnings),
            table_stats=MappingProxyType({
                name: MappingProxyType(dict(values)) for name, values in self.table_stats.items()
            }),
        )


@dataclass(frozen=True)
class FrozenGenerationStats:
    """Generation statistics as attached to a finished dataset."""
    tables_processed: int = 0
    total_rows_generated: int = 0
    total_time_seconds: float = 0.0
    fk_fallbacks: int = 0
    warnings: Tuple[str, ...] = ()
    table_stats: Mapping[str, Mapping[str, Any]] = field(
        default_factory=lambda: MappingProxyType({})
    )


Row = Mapping[str, Any]


@dataclass(frozen=True, eq=False)
class GeneratedDataset(Mapping):
    """Read-only mapping of table name to generated rows, in creation order.

    Rows are copied into read-only mappings, so a consumer can not change
    what another consumer of the same dataset sees.
    """
    tables: Mapping[str, Tuple[Row, ...]]
    generation_order: Tuple[str, ...] = ()
    stats: FrozenGenerationStats = field(default_factory=FrozenGenerationStats)

    def __post_init__(self):
        frozen = {
            name: tuple(MappingProxyType(dict(row)) for row in rows)
            for name, rows in self.tables.items()
        }
        object.__setattr__(self, "tables", MappingProxyType(frozen))
        if isinstance(self.stats, GenerationStats):
            object.__setattr__(self, "stats", self.stats.freeze())

    def __getitem__(self, table_name: str) -> Tuple[Row, ...]:
        return self.tables[table_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    @property
    def total_rows(self) -> int:
        return sum(len(rows) for rows in self.tables.values())

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {name: [dict(row) for row in rows] for name, rows in self.tables.items()}
