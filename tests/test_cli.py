"""Tests for the command-line interface."""

import json

import yaml
from click.testing import CliRunner

from ersynth.cli import cli


class TestCli:
    """Test CLI commands."""

    def test_process(self, schema_file, tmp_path):
        output = tmp_path / "processed.json"

        result = CliRunner().invoke(cli, ["process", str(schema_file), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Tables: 4" in result.output
        assert "Ref_Payment_Methods -> Agencies -> Staff -> Invoices" in result.output
        assert "Schema is valid" in result.output
        assert json.loads(output.read_text())["metadata"]["tableCount"] == 4

    def test_process_reports_validation_errors(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text(json.dumps({"tables": [
            {"name": "Orders", "columns": [
                {"name": "customer_id", "type": "INT", "foreignKey": "Customers(id)"},
            ]},
        ]}))

        result = CliRunner().invoke(cli, ["process", str(path)])

        assert result.exit_code == 0
        assert "Validation errors (2)" in result.output

    def test_process_malformed_schema(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"tables": [{"columns": []}]}))

        result = CliRunner().invoke(cli, ["process", str(path)])

        assert result.exit_code == 1

    def test_process_error_policy(self, tmp_path):
        path = tmp_path / "cycle.json"
        path.write_text(json.dumps({"tables": [
            {"name": "A", "columns": [{"name": "a_id", "type": "INT", "primaryKey": True},
                                      {"name": "b_id", "type": "INT", "foreignKey": "B(b_id)"}]},
            {"name": "B", "columns": [{"name": "b_id", "type": "INT", "primaryKey": True},
                                      {"name": "a_id", "type": "INT", "foreignKey": "A(a_id)"}]},
        ]}))

        result = CliRunner().invoke(cli, ["process", str(path), "--cycle-policy", "error"])

        assert result.exit_code == 1

    def test_generate_unparseable_config(self, schema_file, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("generation: [unclosed\n")

        result = CliRunner().invoke(cli, [
            "generate", str(schema_file), "-o", str(tmp_path / "out"), "-c", str(config_path),
        ])

        assert result.exit_code == 1
        assert "Error: Could not parse config file" in result.output

    def test_plan(self, schema_file):
        result = CliRunner().invoke(cli, ["plan", str(schema_file)])

        assert result.exit_code == 0, result.output
        assert "GENERATION ORDER:" in result.output
        assert "Independent: Ref_Payment_Methods, Agencies" in result.output

    def test_generate_csv(self, schema_file, tmp_path):
        output = tmp_path / "data"

        result = CliRunner().invoke(cli, [
            "generate", str(schema_file), "-o", str(output), "--seed", "3", "--rows", "6",
            "--quality-report",
        ])

        assert result.exit_code == 0, result.output
        assert "Referential integrity verified" in result.output
        assert "Data quality score: 100/100" in result.output
        assert sorted(path.name for path in output.glob("*.csv")) == [
            "Agencies.csv", "Invoices.csv", "Ref_Payment_Methods.csv", "Staff.csv",
        ]
        staff_lines = (output / "Staff.csv").read_text().splitlines()
        assert staff_lines[0] == "staff_id,agency_id,staff_details"
        assert len(staff_lines) == 7
        assert (output / "schema.processed.json").exists()

    def test_generate_with_config(self, schema_file, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump({"generation": {"row_counts": {"Staff": 2}}}))
        output = tmp_path / "data"

        result = CliRunner().invoke(cli, [
            "generate", str(schema_file), "-o", str(output), "-c", str(config_path),
            "--format", "json",
        ])

        assert result.exit_code == 0, result.output
        assert len(json.loads((output / "Staff.json").read_text())) == 2

    def test_init_config(self, tmp_path):
        output = tmp_path / "ersynth_config.yaml"

        result = CliRunner().invoke(cli, ["init-config", "-o", str(output)])

        assert result.exit_code == 0
        assert yaml.safe_load(output.read_text())["generation"]["seed"] == 42
