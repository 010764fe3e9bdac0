"""Test configuration and fixtures for ER-Synth tests."""

import json
import random
from datetime import datetime

import pytest
from faker import Faker

from ersynth.core.heuristics import ValueHeuristics
from ersynth.core.models import ColumnInfo, DatabaseSchema, TableInfo


def column(name, data_type="INT", primary_key=False, foreign_key=None, nullable=None):
    """Build a column the way the diagram parser emits it."""
    return ColumnInfo.model_validate({
        "name": name,
        "type": data_type,
        "primaryKey": primary_key,
        "foreignKey": foreign_key,
        "nullable": nullable,
    })


@pytest.fixture
def agencies_clients_schema():
    """Two tables where Clients references Agencies."""
    return DatabaseSchema(tables=[
        TableInfo(name="Agencies", columns=[
            column("agency_id", primary_key=True),
            column("agency_name", "VARCHAR(100)"),
        ]),
        TableInfo(name="Clients", columns=[
            column("client_id", primary_key=True),
            column("agency_id", foreign_key="Agencies(agency_id)"),
            column("client_details", "VARCHAR(255)"),
        ]),
    ])


@pytest.fixture
def cyclic_schema():
    """A and B reference each other."""
    return DatabaseSchema(tables=[
        TableInfo(name="A", columns=[
            column("a_id", primary_key=True),
            column("b_id", foreign_key="B(b_id)"),
        ]),
        TableInfo(name="B", columns=[
            column("b_id", primary_key=True),
            column("a_id", foreign_key="A(a_id)"),
        ]),
    ])


@pytest.fixture
def agency_schema_dict():
    """A realistic schema document as produced by the diagram parser."""
    return {
        "tables": [
            {
                "name": "Ref_Payment_Methods",
                "columns": [
                    {"name": "payment_method_code", "type": "CHAR(15)", "primaryKey": True},
                    {"name": "payment_method_description", "type": "VARCHAR(80)"},
                ],
            },
            {
                "name": "Staff",
                "columns": [
                    {"name": "staff_id", "type": "INTEGER", "primaryKey": True},
                    {"name": "agency_id", "type": "INTEGER", "foreignKey": "Agencies(agency_id)"},
                    {"name": "staff_details", "type": "VARCHAR(255)"},
                ],
            },
            {
                "name": "Agencies",
                "columns": [
                    {"name": "agency_id", "type": "INTEGER", "primaryKey": True},
                    {"name": "agency_details", "type": "VARCHAR(255)"},
                ],
            },
            {
                "name": "Invoices",
                "columns": [
                    {"name": "invoice_id", "type": "INTEGER", "primaryKey": True},
                    {"name": "staff_id", "type": "INTEGER", "foreignKey": "Staff(staff_id)"},
                    {"name": "payment_method_code", "type": "CHAR(15)",
                     "foreignKey": "Ref_Payment_Methods(payment_method_code)"},
                    {"name": "invoice_date", "type": "DATETIME"},
                    {"name": "invoice_amount", "type": "DECIMAL(19,4)"},
                    {"name": "is_paid_yn", "type": "CHAR(1)", "nullable": False},
                ],
            },
        ]
    }


@pytest.fixture
def agency_schema(agency_schema_dict):
    return DatabaseSchema.model_validate(agency_schema_dict)


@pytest.fixture
def schema_file(tmp_path, agency_schema_dict):
    """The agency schema written to a JSON file."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(agency_schema_dict))
    return path


@pytest.fixture
def heuristics():
    """Heuristics with seeded randomness and a fixed clock."""
    faker = Faker()
    faker.seed_instance(7)
    return ValueHeuristics(
        rng=random.Random(7),
        faker=faker,
        reference_date=datetime(2024, 3, 15, 10, 30, 0),
    )


@pytest.fixture
def make_column():
    return column
