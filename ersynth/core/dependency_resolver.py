"""Dependency resolution for ordering table generation by foreign keys."""

import logging
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from .models import CyclePolicy, DatabaseSchema

logger = logging.getLogger(__name__)


class CircularDependencyError(ValueError):
    """Raised under CyclePolicy.ERROR when some tables can not be ordered."""

    def __init__(self, tables: List[str]):
        self.tables = tables
        super().__init__(f"Circular foreign key dependencies between tables: {', '.join(tables)}")


@dataclass
class TableDependency:
    """A child table's dependency on a parent through one FK column."""
    table: str
    depends_on: str
    foreign_key_column: str
    referenced_column: str


@dataclass
class GenerationPlan:
    """Plan for generating tables in dependency order."""
    generation_order: List[str]
    dependency_graph: Dict[str, List[str]]
    circular_dependencies: List[List[str]]
    independent_tables: List[str]
    excluded_tables: List[str]

    def get_generation_batches(self) -> List[List[str]]:
        """Group ordered tables into levels with no dependency between members."""
        levels: Dict[str, int] = {}
        batches: List[List[str]] = []

        for table in self.generation_order:
            parent_levels = [
                levels[parent] for parent in self.dependency_graph.get(table, [])
                if parent in levels
            ]
            level = max(parent_levels) + 1 if parent_levels else 0
            levels[table] = level
            while len(batches) <= level:
                batches.append([])
            batches[level].append(table)

        return batches


class DependencyResolver:
    """Builds the parent -> child FK graph and computes a generation order."""

    def __init__(self, schema: DatabaseSchema):
        self.schema = schema
        self.dependencies: Dict[str, List[TableDependency]] = defaultdict(list)
        self.reverse_dependencies: Dict[str, List[str]] = defaultdict(list)
        self._build_dependency_graph()

    def _build_dependency_graph(self):
        """Add one edge per FK column whose parent is a declared table.

        A self-referencing column adds a loop, so the table is treated as a
        cycle of one by the sort and by cycle detection.
        """
        declared = set(self.schema.table_names)

        for table in self.schema.tables:
            for column in table.columns:
                ref = column.foreign_key_ref
                if ref is None:
                    continue
                if ref.table not in declared:
                    logger.debug(f"Ignoring FK {table.name}.{column.name} to unknown table {ref.table}")
                    continue
                self.dependencies[table.name].append(TableDependency(
                    table=table.name,
                    depends_on=ref.table,
                    foreign_key_column=column.name,
                    referenced_column=ref.column,
                ))
                self.reverse_dependencies[ref.table].append(table.name)

    def get_dependency_graph(self) -> Dict[str, List[str]]:
        """Get simplified dependency graph (table -> distinct parent tables)."""
        graph = {}
        for name in self.schema.table_names:
            parents = []
            for dep in self.dependencies[name]:
                if dep.depends_on not in parents:
                    parents.append(dep.depends_on)
            graph[name] = parents
        return graph

    def get_table_dependencies(self, table_name: str) -> List[TableDependency]:
        """Get all dependencies for a specific table."""
        return self.dependencies[table_name]

    def get_dependent_tables(self, table_name: str) -> List[str]:
        """Get tables that depend on the given table."""
        return self.reverse_dependencies[table_name]

    def detect_circular_dependencies(self) -> List[List[str]]:
        """List FK cycles found by depth-first search, each reported once."""
        graph = self.get_dependency_graph()
        visited = set()
        stack: List[str] = []
        seen_cycles = set()
        cycles = []

        def dfs(table: str):
            visited.add(table)
            stack.append(table)
            for parent in graph.get(table, []):
                if parent in stack:
                    cycle = stack[stack.index(parent):]
                    key = frozenset(cycle)
                    if key not in seen_cycles:
                        seen_cycles.add(key)
                        cycles.append(cycle)
                elif parent not in visited:
                    dfs(parent)
            stack.pop()

        for name in graph:
            if name not in visited:
                dfs(name)

        return cycles

    def topological_sort(self, policy: CyclePolicy = CyclePolicy.DROP) -> List[str]:
        """Order tables so every parent precedes its children (Kahn's algorithm)."""
        in_degree: Dict[str, int] = {}
        for name in self.schema.table_names:
            in_degree.setdefault(name, 0)
        for name in in_degree:
            in_degree[name] = len(self.dependencies[name])

        # Seeded in declaration order for deterministic tie-breaking
        queue = deque(name for name, degree in in_degree.items() if degree == 0)
        result = []

        while queue:
            table = queue.popleft()
            result.append(table)

            for dependent in self.reverse_dependencies[table]:
                in_degree[dependent] -= 1
                if in_degree[dependent] == 0:
                    queue.append(dependent)

        remaining = [name for name in in_degree if name not in result]
        if remaining:
            if policy is CyclePolicy.ERROR:
                raise CircularDependencyError(remaining)
            if policy is CyclePolicy.BREAK:
                logger.warning(f"Circular dependencies detected, appending in declaration order: {remaining}")
                result.extend(remaining)
            else:
                logger.warning(f"Circular dependencies detected, excluding tables from order: {remaining}")

        return result

    def create_generation_plan(self, policy: CyclePolicy = CyclePolicy.DROP) -> GenerationPlan:
        """Create a complete generation plan."""
        dependency_graph = self.get_dependency_graph()
        generation_order = self.topological_sort(policy)
        ordered = set(generation_order)

        return GenerationPlan(
            generation_order=generation_order,
            dependency_graph=dependency_graph,
            circular_dependencies=self.detect_circular_dependencies(),
            independent_tables=[
                table for table, deps in dependency_graph.items() if not deps
            ],
            excluded_tables=[
                table for table in dependency_graph if table not in ordered
            ],
        )


def resolve_dependency_order(schema: DatabaseSchema,
                             policy: CyclePolicy = CyclePolicy.DROP) -> List[str]:
    """Compute the generation order of a schema's tables."""
    return DependencyResolver(schema).topological_sort(policy)


def format_generation_plan(plan: GenerationPlan, title: Optional[str] = None) -> str:
    """Render a generation plan as plain text."""
    lines = []
    if title:
        lines.extend([title.upper(), "=" * 70, ""])

    lines.append("GENERATION ORDER:")
    for i, batch in enumerate(plan.get_generation_batches(), 1):
        if len(batch) == 1:
            lines.append(f"  {i:2d}. {batch[0]}")
        else:
            lines.append(f"  {i:2d}. Independent: {', '.join(batch)}")

    dependent = [(table, deps) for table, deps in plan.dependency_graph.items() if deps]
    if dependent:
        lines.extend(["", "DEPENDENCIES:"])
        for table, deps in dependent:
            lines.append(f"  {table:<25} -> {', '.join(deps)}")

    if plan.circular_dependencies:
        lines.extend(["", "CIRCULAR DEPENDENCIES:"])
        for i, cycle in enumerate(plan.circular_dependencies, 1):
            lines.append(f"  {i}. {' -> '.join(cycle + [cycle[0]])}")

    if plan.excluded_tables:
        lines.extend(["", f"EXCLUDED FROM ORDER: {', '.join(plan.excluded_tables)}"])

    return "\n".join(lines)
