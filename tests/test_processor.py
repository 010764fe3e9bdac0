"""Tests for the schema processing pipeline."""

import pytest

from ersynth.core.dependency_resolver import CircularDependencyError
from ersynth.core.models import (
    ComplexityTier, CyclePolicy, DatabaseSchema, GenerationConfig, TableInfo
)
from ersynth.core.processor import fill_nullable_defaults, process_schema, run_pipeline


class TestProcessSchema:
    """Test process_schema."""

    def test_processed_schema(self, agencies_clients_schema):
        processed = process_schema(agencies_clients_schema)

        assert processed.dependency_order == ("Agencies", "Clients")
        assert processed.validation_errors == ()
        assert processed.is_valid
        assert processed.metadata.table_count == 2
        assert processed.metadata.relationship_count == 1
        assert processed.metadata.complexity is ComplexityTier.SIMPLE
        assert processed.circular_dependencies == ()

    def test_nullable_defaults_filled(self, agencies_clients_schema):
        processed = process_schema(agencies_clients_schema)

        clients = processed.schema.get_table("Clients")
        assert clients.get_column("client_id").nullable is False
        assert clients.get_column("agency_id").nullable is True
        # Input schema is left untouched
        assert agencies_clients_schema.get_table("Clients").get_column("client_id").nullable is None

    def test_explicit_nullable_kept(self, agency_schema):
        schema = fill_nullable_defaults(agency_schema)

        assert schema.get_table("Invoices").get_column("is_paid_yn").nullable is False

    def test_parsed_references_survive_copy(self, agencies_clients_schema):
        processed = process_schema(agencies_clients_schema)

        ref = processed.schema.get_table("Clients").get_column("agency_id").foreign_key_ref
        assert ref.table == "Agencies"

    def test_errors_do_not_stop_processing(self, make_column):
        schema = DatabaseSchema(tables=[
            TableInfo(name="Orders", columns=[make_column("customer_id", foreign_key="Customers(id)")]),
        ])

        processed = process_schema(schema)

        assert len(processed.validation_errors) == 2
        assert processed.dependency_order == ("Orders",)

    def test_cycles(self, cyclic_schema):
        processed = process_schema(cyclic_schema)

        assert processed.dependency_order == ()
        assert processed.excluded_tables == ["A", "B"]
        assert processed.circular_dependencies == (("A", "B"),)

    def test_self_referencing_table_dropped_by_default(self, make_column):
        schema = DatabaseSchema(tables=[
            TableInfo(name="Staff", columns=[
                make_column("staff_id", primary_key=True),
                make_column("manager_id", foreign_key="Staff(staff_id)"),
            ]),
        ])

        processed = process_schema(schema)

        assert processed.dependency_order == ()
        assert processed.excluded_tables == ["Staff"]
        assert processed.circular_dependencies == (("Staff",),)

    def test_error_policy_raises(self, cyclic_schema):
        with pytest.raises(CircularDependencyError):
            process_schema(cyclic_schema, GenerationConfig(cycle_policy=CyclePolicy.ERROR))

    def test_processing_is_repeatable(self, agency_schema):
        assert process_schema(agency_schema) == process_schema(agency_schema)


class TestRunPipeline:
    """Test run_pipeline."""

    def test_run_pipeline(self, agency_schema):
        processed, dataset = run_pipeline(agency_schema, GenerationConfig(seed=10))

        assert list(dataset) == list(processed.dependency_order)
        assert dataset.total_rows == 35
