"""Tests for the generate command."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from subspacectl.cli import cli


@pytest.mark.usefixtures("_isolated_monorepo")
class TestGenerateCommand:
    def test_generates_all(self, cli_runner: CliRunner, monorepo_root: Path) -> None:
        with patch("subspacectl.infrastructure.installer.subprocess.run") as run:
            result = cli_runner.invoke(cli, ["--json", "generate"])
        assert result.exit_code == 0
        run.assert_not_called()
        data = json.loads(result.stdout)
        assert [s["status"] for s in data["data"]["subspaces"]] == ["generated", "generated"]
        for name in ("default", "tools"):
            assert (monorepo_root / "common" / "temp" / name / ".pnpmfile.cjs").is_file()

    def test_subspace_option_repeatable(self, cli_runner: CliRunner, monorepo_root: Path) -> None:
        result = cli_runner.invoke(cli, ["-q", "generate", "-s", "tools", "--subspace", "default"])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["default\tgenerated", "tools\tgenerated"]

    def test_unknown_subspace(self, cli_runner: CliRunner, monorepo_root: Path) -> None:
        result = cli_runner.invoke(cli, ["generate", "-s", "nope"])
        assert result.exit_code == 1
        assert "nope" in result.stderr
        assert not (monorepo_root / "common" / "temp").exists()

    def test_explicit_config(self, cli_runner: CliRunner, monorepo_root: Path) -> None:
        config = monorepo_root / "alt.toml"
        config.write_text('[paths]\ntemp_folder = "build/isolated"\n', encoding="utf-8")
        result = cli_runner.invoke(cli, ["-c", str(config), "generate", "-s", "tools"])
        assert result.exit_code == 0
        assert (monorepo_root / "build" / "isolated" / "tools" / "pnpm-workspace.yaml").is_file()
