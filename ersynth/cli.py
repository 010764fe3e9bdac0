"""Command-line interface for ER-Synth."""

import click
import logging
import sys
import time
import yaml
from pathlib import Path
from typing import Optional

from ersynth.core.dependency_resolver import (
    CircularDependencyError, DependencyResolver, format_generation_plan
)
from ersynth.core.exporter import SUPPORTED_FORMATS, write_dataset, write_processed_schema
from ersynth.core.generator import DataGenerator
from ersynth.core.integrity import build_quality_report, verify_referential_integrity
from ersynth.core.loader import SchemaLoadError, config_template, load_config_file, load_schema
from ersynth.core.models import CyclePolicy, GenerationConfig
from ersynth.core.processor import process_schema


logger = logging.getLogger(__name__)

CYCLE_POLICIES = [policy.value for policy in CyclePolicy]


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
def cli(verbose: bool, quiet: bool):
    """ER-Synth - Order ER schemas and generate referentially consistent data."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif quiet:
        logging.getLogger().setLevel(logging.ERROR)


def build_config(config_path: Optional[str], cycle_policy: Optional[str],
                 seed: Optional[int] = None, rows: Optional[int] = None) -> GenerationConfig:
    """Merge a config file with command-line overrides."""
    config = load_config_file(config_path) if config_path else GenerationConfig()
    updates = {}
    if cycle_policy:
        updates['cycle_policy'] = CyclePolicy(cycle_policy)
    if seed is not None:
        updates['seed'] = seed
    if rows is not None:
        updates['default_rows'] = rows
    return config.model_copy(update=updates) if updates else config


@cli.command()
@click.argument('schema_file', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), help='Write the processed schema JSON here')
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file (JSON/YAML)')
@click.option('--cycle-policy', type=click.Choice(CYCLE_POLICIES), help='How to treat FK cycles')
def process(schema_file: str, output: Optional[str], config: Optional[str],
            cycle_policy: Optional[str]):
    """Validate a schema and compute its metadata and dependency order."""
    try:
        generation_config = build_config(config, cycle_policy)
        schema = load_schema(schema_file)
        processed = process_schema(schema, generation_config)

        metadata = processed.metadata
        click.echo("Schema summary:")
        click.echo(f"  Tables: {metadata.table_count}")
        click.echo(f"  Columns: {metadata.total_columns}")
        click.echo(f"  Relationships: {metadata.relationship_count}")
        click.echo(f"  Complexity: {metadata.complexity.value}")
        click.echo(f"  Dependency order: {' -> '.join(processed.dependency_order)}")

        if processed.excluded_tables:
            click.echo(f"  Excluded by cycles: {', '.join(processed.excluded_tables)}")

        if processed.validation_errors:
            click.echo(f"\nValidation errors ({len(processed.validation_errors)}):")
            for error in processed.validation_errors:
                click.echo(f"  - {error}")
        else:
            click.echo("\nSchema is valid")

        if output:
            path = write_processed_schema(processed, output)
            click.echo(f"\nProcessed schema written to {path}")

    except (SchemaLoadError, CircularDependencyError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('schema_file', type=click.Path(exists=True))
@click.option('--cycle-policy', type=click.Choice(CYCLE_POLICIES), default=CyclePolicy.DROP.value,
              help='How to treat FK cycles')
def plan(schema_file: str, cycle_policy: str):
    """Show the dependency-aware generation plan."""
    try:
        schema = load_schema(schema_file)
        generation_plan = DependencyResolver(schema).create_generation_plan(CyclePolicy(cycle_policy))
        click.echo(format_generation_plan(generation_plan, f"{Path(schema_file).stem} generation plan"))
    except (SchemaLoadError, CircularDependencyError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('schema_file', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True, help='Output directory')
@click.option('--format', 'file_format', type=click.Choice(list(SUPPORTED_FORMATS)), default='csv',
              help='Output file format')
@click.option('--config', '-c', type=click.Path(exists=True), help='Configuration file (JSON/YAML)')
@click.option('--rows', '-r', type=int, help='Rows per regular table')
@click.option('--seed', type=int, help='Random seed for reproducible generation')
@click.option('--cycle-policy', type=click.Choice(CYCLE_POLICIES), help='How to treat FK cycles')
@click.option('--verify/--no-verify', default=True, help='Verify referential integrity after generation')
@click.option('--quality-report', is_flag=True, help='Print a data quality summary after generation')
def generate(schema_file: str, output: str, file_format: str, config: Optional[str],
             rows: Optional[int], seed: Optional[int], cycle_policy: Optional[str], verify: bool,
             quality_report: bool):
    """Generate synthetic rows for every table and write them to files."""
    start_time = time.time()
    try:
        generation_config = build_config(config, cycle_policy, seed=seed, rows=rows)
        schema = load_schema(schema_file)
        processed = process_schema(schema, generation_config)

        if processed.validation_errors:
            click.echo(f"Warning: {len(processed.validation_errors)} validation errors, continuing")
            for error in processed.validation_errors:
                click.echo(f"  - {error}")

        generator = DataGenerator(generation_config)
        click.echo(f"Generation order: {' -> '.join(generator.generation_order(processed))}")
        dataset = generator.generate(processed)

        written = write_dataset(dataset, processed.schema, output, file_format,
                                show_progress=logging.getLogger().level <= logging.INFO)
        write_processed_schema(processed, Path(output) / "schema.processed.json")

        click.echo("\nGeneration summary:")
        for table_name, table_rows in dataset.items():
            click.echo(f"  {table_name}: {len(table_rows)} rows")
        click.echo(f"  Files written: {len(written)}")
        if dataset.stats.fk_fallbacks:
            click.echo(f"  FK values without parent rows: {dataset.stats.fk_fallbacks}")

        if verify:
            report = verify_referential_integrity(processed, dataset)
            violations = report['foreign_key_violations']
            if violations:
                click.echo(f"  Found {len(violations)} FK violations")
            else:
                click.echo("  Referential integrity verified")

        if quality_report:
            report = build_quality_report(dataset, processed.schema)
            click.echo(f"\nData quality score: {report['summary']['overall_score']}/100")
            for table in report['tables']:
                for issue in table['issues']:
                    click.echo(f"  - {issue}")

        click.echo(f"\nCompleted in {time.time() - start_time:.2f}s")

    except (SchemaLoadError, CircularDependencyError, OSError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='ersynth_config.yaml',
              help='Output configuration file path')
def init_config(output: str):
    """Create a sample configuration file."""
    output_path = Path(output)
    with open(output_path, 'w') as f:
        yaml.dump(config_template(), f, default_flow_style=False, indent=2, sort_keys=False)

    click.echo(f"Configuration template created: {output_path}")
    click.echo("Edit this file to customize your data generation settings.")


def main():
    cli()


if __name__ == '__main__':
    main()
