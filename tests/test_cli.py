"""Tests for the command-line interface."""

import json

from typer.testing import CliRunner

from tech_matrix.cli.main import app

runner = CliRunner()


class TestResolveCommand:
    """Test the resolve command."""

    def test_resolve_mapped_package(self):
        """Test a mapped package shows its technology and category."""
        result = runner.invoke(app, ["resolve", "react-router-dom", "--ecosystem", "javascript"])

        assert result.exit_code == 0
        assert "React Router" in result.output
        assert "Routing" in result.output

    def test_resolve_unmapped_package(self):
        """Test an unmapped package is reported as Other."""
        result = runner.invoke(app, ["resolve", "left-pad", "-e", "javascript"])

        assert result.exit_code == 0
        assert "has no mapping" in result.output

    def test_resolve_unknown_ecosystem(self):
        """Test an unknown ecosystem is an error."""
        result = runner.invoke(app, ["resolve", "rails", "-e", "ruby"])

        assert result.exit_code == 1
        assert "Unknown ecosystem" in result.output

    def test_resolve_with_override_tables(self, tmp_path):
        """Test --mappings replaces a shipped table."""
        (tmp_path / "go.json").write_text(json.dumps({"Logging": {"Acme Log": ["github.com/acme/log"]}}))

        result = runner.invoke(app, ["resolve", "github.com/acme/log", "-e", "go", "--mappings", str(tmp_path)])

        assert result.exit_code == 0
        assert "Acme Log" in result.output


class TestPatternsCommand:
    """Test the patterns command."""

    def test_file_name_rules(self):
        """Test plain file name rules, one per line."""
        result = runner.invoke(app, ["patterns"])

        lines = result.output.splitlines()
        assert result.exit_code == 0
        assert lines[0] == "package.json"
        assert "*.csproj" in lines

    def test_sparse_patterns(self):
        """Test sparse-checkout patterns."""
        result = runner.invoke(app, ["patterns", "--sparse"])

        lines = result.output.splitlines()
        assert result.exit_code == 0
        assert "**/go.mod" in lines
        assert "go.mod" in lines


class TestScanCommand:
    """Test the scan command."""

    def test_scan_writes_json(self, isolated_tmp):
        """Test scanning a directory and saving JSON results."""
        repo = isolated_tmp / "repo"
        repo.mkdir()
        (repo / "package.json").write_text(json.dumps({"dependencies": {"react": "^18.0.0"}}))
        output = isolated_tmp / "radar.json"

        result = runner.invoke(app, ["scan", str(repo), "--no-history", "--output", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["adopt"][0]["name"] == "React"
        assert data["remove"] == []
        assert data["scan_summary"]["files_analyzed"] == 1

    def test_scan_missing_path(self, tmp_path):
        """Test a missing directory exits with an error."""
        result = runner.invoke(app, ["scan", str(tmp_path / "missing")])

        assert result.exit_code == 1

    def test_scan_invalid_mappings(self, tmp_path):
        """Test a broken override table exits with an error."""
        (tmp_path / "python.json").write_text("[]")

        result = runner.invoke(app, ["scan", str(tmp_path), "--mappings", str(tmp_path)])

        assert result.exit_code == 1


class TestOtherCommands:
    """Test history and info commands."""

    def test_history_rejects_non_manifest(self, tmp_path):
        """Test history only accepts recognised manifests."""
        result = runner.invoke(app, ["history", str(tmp_path), "README.md"])

        assert result.exit_code == 1

    def test_info(self):
        """Test info lists supported ecosystems."""
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "javascript" in result.output
        assert "Known technologies" in result.output
