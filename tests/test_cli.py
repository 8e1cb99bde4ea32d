import json
import sys
from pathlib import Path

import yaml
from click.testing import CliRunner

from swagno.cli import main

FIXTURES = Path(__file__).parent / "fixtures"

APP_SOURCE = """
from swagno.components.endpoint import Endpoint
from swagno.components.response import new
from swagno.swagger import Swagger

swagger = Swagger()
swagger.add_endpoint(Endpoint(method="GET", path="/ping", successful_returns=[new(None, 204, "Pong")]))
"""


class TestCliExport:
    def test_export_module_level_document(self, tmp_path):
        output = tmp_path / "swagger.json"
        runner = CliRunner()
        result = runner.invoke(main, ["export", "sample_app:swagger", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Document saved to" in result.output
        doc = json.loads(output.read_text())
        assert doc["swagger"] == "2.0"
        assert "/product/{id}" in doc["paths"]

    def test_export_from_factory_as_yaml(self, tmp_path):
        output = tmp_path / "nested" / "openapi.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["export", "sample_app:build_openapi", "-o", str(output)])

        assert result.exit_code == 0, result.output
        doc = yaml.safe_load(output.read_text())
        assert doc["openapi"] == "3.0.3"

    def test_explicit_format(self, tmp_path):
        output = tmp_path / "openapi.out"
        runner = CliRunner()
        result = runner.invoke(main, [
            "export", "sample_app:build_openapi",
            "-o", str(output),
            "--format", "yaml",
        ])

        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("openapi: 3.0.3")

    def test_config_applied(self, tmp_path):
        output = tmp_path / "openapi.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "export", "sample_app:build_openapi",
            "-o", str(output),
            "--config", str(FIXTURES / "config.yaml"),
        ])

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text())
        assert doc["info"]["title"] == "Shop API"
        assert doc["servers"][0]["url"] == "https://shop.example.com/api"

    def test_invalid_config_fails(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "export", "sample_app:build_openapi",
            "-o", str(tmp_path / "openapi.json"),
            "--config", str(FIXTURES / "invalid.yaml"),
        ])

        assert result.exit_code == 1
        assert "invalid config" in result.output


class TestCliTargets:
    def test_not_a_document(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["export", "sample_app:not_a_document", "-o", str(tmp_path / "x.json")])
        assert result.exit_code == 2

    def test_missing_module(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["export", "no_such_module:doc", "-o", str(tmp_path / "x.json")])
        assert result.exit_code == 2

    def test_malformed_target(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["export", "sample_app", "-o", str(tmp_path / "x.json")])
        assert result.exit_code == 2
        assert "MODULE:ATTRIBUTE" in result.output

    def test_module_in_working_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(sys, "path", [p for p in sys.path if p not in ("", ".")])
        (tmp_path / "cwd_app.py").write_text(APP_SOURCE)
        runner = CliRunner()
        result = runner.invoke(main, ["export", "cwd_app:swagger", "-o", "out.json"])

        assert result.exit_code == 0, result.output
        assert "/ping" in json.loads((tmp_path / "out.json").read_text())["paths"]

    def test_app_dir_option(self, tmp_path, monkeypatch):
        app_dir = tmp_path / "app"
        app_dir.mkdir()
        (app_dir / "dir_app.py").write_text(APP_SOURCE)
        monkeypatch.setattr(sys, "path", list(sys.path))
        output = tmp_path / "out.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["export", "dir_app:swagger", "-o", str(output), "--app-dir", str(app_dir)])

        assert result.exit_code == 0, result.output
        assert "/ping" in yaml.safe_load(output.read_text())["paths"]
