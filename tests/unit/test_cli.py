"""Tests for the nodeconf CLI, driven through click's CliRunner."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from nodeconf.cli.main import cli


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def join_file(tmp_path: Path, join_document: str) -> Path:
    path = tmp_path / "join.yaml"
    path.write_text(join_document)
    return path


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "node.yaml"
    path.write_text(textwrap.dedent(text))
    return path


class TestValidateCommand:
    def test_valid_in_cloud_mode(self, runner: CliRunner, join_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(join_file), "--mode", "cloud"])
        assert result.exit_code == 0
        assert "OK" in result.output

    def test_metal_requires_install(self, runner: CliRunner, join_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(join_file), "--mode", "metal"])
        assert result.exit_code == 1
        assert 'install instructions are required in "metal" mode' in result.output

    def test_mode_from_environment(self, runner: CliRunner, join_file: Path) -> None:
        result = runner.invoke(cli, ["validate", str(join_file)], env={"NODECONF_MODE": "container"})
        assert result.exit_code == 0

    def test_warning_is_printed(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            machine: {}
            cluster:
              controlPlane:
                endpoint: https://localhost:6443/
        """)
        result = runner.invoke(cli, ["validate", str(path), "--mode", "cloud"])
        assert result.exit_code == 0
        assert "machine type is empty" in result.output

    def test_strict_fails_on_warning(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            machine: {}
            cluster:
              controlPlane:
                endpoint: https://localhost:6443/
        """)
        result = runner.invoke(cli, ["validate", str(path), "--mode", "cloud", "--strict"])
        assert result.exit_code == 1
        assert "warning: machine type is empty" in result.output

    def test_on_node_checks_install_disk(self, runner: CliRunner, tmp_path: Path) -> None:
        missing = tmp_path / "missing-disk"
        path = _write(tmp_path, f"""\
            machine:
              type: join
              install:
                disk: {missing}
            cluster:
              controlPlane:
                endpoint: https://localhost:6443/
        """)
        result = runner.invoke(cli, ["validate", str(path), "--on-node"])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["validate", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_bad_endpoint(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            machine: {type: join}
            cluster:
              controlPlane:
                endpoint: https://host:port/
        """)
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Invalid endpoint" in result.output

    def test_bad_structure(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, "machine: join\n")
        result = runner.invoke(cli, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Invalid document" in result.output


class TestShowCommand:
    def test_prints_defaults(self, runner: CliRunner, join_file: Path) -> None:
        result = runner.invoke(cli, ["show", str(join_file)])
        assert result.exit_code == 0
        assert "flannel" in result.output
        assert "10.244.0.0/16" in result.output
        assert "6443" in result.output

    def test_requires_cluster(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, "machine: {type: join}\n")
        result = runner.invoke(cli, ["show", str(path)])
        assert result.exit_code == 1


class TestFmtCommand:
    def test_in_place(self, runner: CliRunner, tmp_path: Path) -> None:
        path = _write(tmp_path, """\
            cluster:
              controlPlane: {endpoint: "https://localhost:6443/"}
            machine: {type: join}
        """)
        result = runner.invoke(cli, ["fmt", str(path), "--in-place"])
        assert result.exit_code == 0
        assert path.read_text().startswith("version: v1alpha1\nmachine:\n  type: join\n")

    def test_stdout(self, runner: CliRunner, join_file: Path) -> None:
        result = runner.invoke(cli, ["fmt", str(join_file)])
        assert result.exit_code == 0
        assert "controlPlane" in result.output


class TestVersionCommand:
    def test_shows_version(self, runner: CliRunner, expected_version: str) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert expected_version in result.output
