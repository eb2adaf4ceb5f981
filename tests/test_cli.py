"""Tests for the pkgver command line."""
import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pkgver.cli.app import app
from pkgver.models import Ecosystem

runner = CliRunner()

LATEST = {
    (Ecosystem.NPM, "lodash"): "4.17.21",
    (Ecosystem.NPM, "react"): "19.0.0",
    (Ecosystem.DART, "http"): "1.2.0",
}


class FakeClient:
    def latest_version(self, ecosystem, name):
        return LATEST.get((ecosystem, name))

    def clear_cache(self):
        pass


@pytest.fixture
def workspace(tmp_path):
    manifest = {
        "name": "demo",
        "dependencies": {"lodash": "^4.17.0", "react": "18.2.0"},
    }
    (tmp_path / "package.json").write_text(json.dumps(manifest, indent=2) + "\n")
    return tmp_path


class TestClassify:
    def test_plain(self):
        result = runner.invoke(app, ["classify", "--plain", "^1.2.3", "2.0.0"])
        assert result.exit_code == 0
        assert result.output.strip() == "major"

    def test_any_is_none(self):
        result = runner.invoke(app, ["classify", "--plain", "*", "2.0.0"])
        assert result.output.strip() == "none"

    def test_styled(self):
        result = runner.invoke(app, ["classify", "1.0.0", "1.0.1"])
        assert result.exit_code == 0
        assert "patch" in result.output


class TestRewrite:
    @pytest.mark.parametrize("spec,version,expected", [
        ("~1.0.0", "1.2.0", "~1.2.0"),
        (">=1.0.0", "2.0.0", ">=2.0.0"),
        ("1.0.0", "1.0.1", "1.0.1"),
    ])
    def test_operator_kept(self, spec, version, expected):
        result = runner.invoke(app, ["rewrite", spec, version])
        assert result.exit_code == 0
        assert result.output.strip() == expected


class TestScan:
    def test_json_output(self, workspace):
        with patch("pkgver.cli.commands.scan_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["scan", "-o", "json", str(workspace)])
        assert result.exit_code == 0
        assert '"lodash"' in result.output
        assert '"patch"' in result.output
        assert '"major"' in result.output

    def test_table_summary(self, workspace):
        with patch("pkgver.cli.commands.scan_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["scan", str(workspace)])
        assert result.exit_code == 0
        assert "2 update(s) available" in result.output

    def test_not_a_directory(self, tmp_path):
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
        assert result.exit_code == 1

    def test_unknown_ecosystem(self, workspace):
        result = runner.invoke(app, ["scan", "-e", "cargo", str(workspace)])
        assert result.exit_code != 0


class TestUpdate:
    def test_writes_latest(self, workspace):
        with patch("pkgver.cli.commands.update_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update", "lodash", str(workspace)])
        assert result.exit_code == 0
        data = json.loads((workspace / "package.json").read_text())
        assert data["dependencies"]["lodash"] == "^4.17.21"
        assert data["dependencies"]["react"] == "18.2.0"

    def test_explicit_target(self, workspace):
        with patch("pkgver.cli.commands.update_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update", "--to", "18.3.1", "react", str(workspace)])
        assert result.exit_code == 0
        data = json.loads((workspace / "package.json").read_text())
        assert data["dependencies"]["react"] == "18.3.1"

    def test_dry_run_leaves_file(self, workspace):
        before = (workspace / "package.json").read_bytes()
        with patch("pkgver.cli.commands.update_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update", "--dry-run", "react", str(workspace)])
        assert result.exit_code == 0
        assert "Would update" in result.output
        assert (workspace / "package.json").read_bytes() == before

    def test_unknown_package(self, workspace):
        with patch("pkgver.cli.commands.update_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update", "left-pad", str(workspace)])
        assert result.exit_code == 1

    def test_missing_latest_fails(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"ghost": "^1.0.0"}}))
        with patch("pkgver.cli.commands.update_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update", "ghost", str(tmp_path)])
        assert result.exit_code == 1
        assert "missing latest version information" in result.output


class TestUpdateAll:
    def test_updates_every_outdated_dependency(self, workspace):
        with patch("pkgver.cli.commands.update_all_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update-all", "--yes", str(workspace)])
        assert result.exit_code == 0
        assert "2 package(s) updated successfully" in result.output
        data = json.loads((workspace / "package.json").read_text())
        assert data["dependencies"] == {"lodash": "^4.17.21", "react": "19.0.0"}

    def test_confirmation_declined(self, workspace):
        before = (workspace / "package.json").read_bytes()
        with patch("pkgver.cli.commands.update_all_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update-all", str(workspace)], input="n\n")
        assert result.exit_code == 1
        assert (workspace / "package.json").read_bytes() == before

    def test_confirmation_accepted(self, workspace):
        with patch("pkgver.cli.commands.update_all_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update-all", str(workspace)], input="y\n")
        assert result.exit_code == 0
        assert json.loads((workspace / "package.json").read_text())["dependencies"]["react"] == "19.0.0"

    def test_dry_run_leaves_files(self, workspace):
        before = (workspace / "package.json").read_bytes()
        with patch("pkgver.cli.commands.update_all_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update-all", "--dry-run", str(workspace)])
        assert result.exit_code == 0
        assert "2 package(s) would be updated" in result.output
        assert (workspace / "package.json").read_bytes() == before

    def test_nothing_outdated(self, tmp_path):
        (tmp_path / "package.json").write_text(json.dumps({"dependencies": {"lodash": "^4.17.21"}}))
        with patch("pkgver.cli.commands.update_all_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update-all", "--yes", str(tmp_path)])
        assert result.exit_code == 0
        assert "No outdated packages found" in result.output

    def test_failures_counted(self, workspace):
        (workspace / "pubspec.yaml").write_text("name: app\ndependencies:\n  http: {version: ^1.0.0}\n")
        with patch("pkgver.cli.commands.update_all_cmd.RegistryClient", FakeClient):
            result = runner.invoke(app, ["update-all", "--yes", str(workspace)])
        assert result.exit_code == 1
        assert "2 package(s) updated successfully" in result.output
        assert "1 package(s) failed" in result.output
        assert "http: {version: ^1.0.0}" in (workspace / "pubspec.yaml").read_text()
