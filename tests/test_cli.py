import json
from pathlib import Path

import yaml
from click.testing import CliRunner

from schema_bridge.cli import main
from schema_bridge.generator.document import SHELL_PATH

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliBuild:
    def test_build_to_file(self, tmp_path):
        output = tmp_path / "docs" / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(output.read_text())
        assert doc["openapi"] == "3.0.3"
        assert "/users/{id}/role" in doc["paths"]

    def test_build_json_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "--format", "json"])

        assert result.exit_code == 0
        doc = json.loads(result.stdout)
        assert doc["paths"]["/health"]["get"]["operationId"] == "getHealth"
        assert "Found 8 routes." in result.stderr
        assert "Found 8 routes." not in result.stdout

    def test_build_with_custom_shell(self, tmp_path):
        shell = tmp_path / "shell.yaml"
        shell.write_text("openapi: 3.0.3\ninfo: {title: Custom, version: 9.9.9}\n")
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "routes.yaml"),
            "--shell", str(shell),
            "--format", "json",
            "-o", str(output),
        ])

        assert result.exit_code == 0
        doc = json.loads(output.read_text())
        assert doc["info"] == {"title": "Custom", "version": "9.9.9"}
        assert "components" not in doc

    def test_check_up_to_date(self, tmp_path):
        output = tmp_path / "openapi.yaml"
        runner = CliRunner()
        runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "-o", str(output)])
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "-o", str(output), "--check"])

        assert result.exit_code == 0
        assert "up to date" in result.output

    def test_check_out_of_date(self, tmp_path):
        output = tmp_path / "openapi.yaml"
        output.write_text("openapi: 3.0.0\n")
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "-o", str(output), "--check"])

        assert result.exit_code == 1
        assert output.read_text() == "openapi: 3.0.0\n"

    def test_check_requires_output(self):
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml"), "--check"])
        assert result.exit_code == 2

    def test_invalid_route_table(self, tmp_path):
        bad = tmp_path / "routes.yaml"
        bad.write_text("routes:\n  - {method: GET, path: /x, body: {shape: {}}}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(bad)])

        assert result.exit_code == 1
        assert "missing 'kind'" in result.output

    def test_format_from_env(self, monkeypatch):
        monkeypatch.setenv("SCHEMA_BRIDGE_OUTPUT_FORMAT", "json")
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(FIXTURES / "routes.yaml")])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["openapi"] == "3.0.3"


class TestCliCheck:
    def test_fixture_is_clean(self):
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(FIXTURES / "routes.yaml")])

        assert result.exit_code == 0, result.output
        assert "No problems found." in result.output

    def test_reports_problems(self, tmp_path):
        routes = tmp_path / "routes.yaml"
        routes.write_text("routes:\n  - {method: GET, path: '/users/{id}'}\n")
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(routes)])

        assert result.exit_code == 1
        assert "GET /users/{id}: no path parameter for id" in result.output

    def test_shell_with_path_item_parameters(self, tmp_path):
        shell = tmp_path / "shell.yaml"
        shell.write_text(SHELL_PATH.read_text() + "paths:\n  /health:\n    parameters: []\n")
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(FIXTURES / "routes.yaml"), "--shell", str(shell)])

        assert result.exit_code == 0, result.output
        assert "No problems found." in result.output

    def test_non_mapping_shell(self, tmp_path):
        shell = tmp_path / "shell.yaml"
        shell.write_text("- not\n- a mapping\n")
        runner = CliRunner()
        result = runner.invoke(main, ["check", str(FIXTURES / "routes.yaml"), "--shell", str(shell)])

        assert result.exit_code == 1
        assert "document shell must be a mapping" in result.output
