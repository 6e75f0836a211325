"""Tests for the list, check and paths CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from extctl.builtins import BUILTIN_PATH
from extctl.cli import cli
from tests.conftest import write_source

_GREETER_SRC = """\
from extctl.extensions import Extension


class Greeter(Extension):
    pass
"""

_FAILING_INIT_SRC = """\
from extctl.extensions import Extension


class Grumpy(Extension):
    def on_first_init(self) -> None:
        raise RuntimeError("not today")
"""


class TestListCommand:
    def test_lists_builtin_and_local_extensions(
        self, cli_runner: CliRunner, extension_root: Path
    ) -> None:
        write_source(extension_root, "greeter", "Greeter", _GREETER_SRC)
        result = cli_runner.invoke(cli, ["list", "-p", str(extension_root)])
        assert result.exit_code == 0, result.output
        assert "Heartbeat" in result.output
        assert "Greeter" in result.output

    def test_json_output(self, cli_runner: CliRunner, extension_root: Path) -> None:
        origin = write_source(extension_root, "greeter", "Greeter", _GREETER_SRC)
        result = cli_runner.invoke(cli, ["--json", "list", "-p", str(extension_root)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        items = {item["name"]: item for item in data["data"]["items"]}
        assert items["Greeter"]["origin"] == str(origin)
        assert items["Greeter"]["builtin"] is False
        assert items["Heartbeat"]["builtin"] is True
        assert items["Heartbeat"]["origin"] == str(BUILTIN_PATH / "heartbeat")

    def test_missing_path_fails(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["list", "-p", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Missing/invalid extension path" in result.output
        assert result.stdout == ""

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["list", "--examples"])
        assert result.exit_code == 0
        assert "extctl list -p ./extensions" in result.output


class TestCheckCommand:
    def test_healthy_install(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0, result.output
        assert "No issues found." in result.output

    def test_json_counts(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "check"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["op"] == "check_extensions"
        assert data["data"]["healthy"] is True
        assert data["data"]["extensions"] >= 1

    def test_failing_hook_exits_nonzero(self, cli_runner: CliRunner, extension_root: Path) -> None:
        write_source(extension_root, "grumpy", "Grumpy", _FAILING_INIT_SRC)
        result = cli_runner.invoke(cli, ["--json", "check", "-p", str(extension_root)])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        kinds = [issue["kind"] for issue in data["data"]["issues"]]
        assert kinds == ["lifecycle_hook_error"]
        assert data["data"]["error_count"] == 1

    def test_missing_origin_reported(self, cli_runner: CliRunner, extension_root: Path) -> None:
        # Source file name does not match the class name.
        write_source(extension_root, "greeter", "greeting", _GREETER_SRC)
        result = cli_runner.invoke(cli, ["check", "-p", str(extension_root)])
        assert result.exit_code == 1
        assert "origin_not_found" in result.output


class TestPathsCommand:
    def test_builtin_root_first(self, cli_runner: CliRunner, extension_root: Path) -> None:
        result = cli_runner.invoke(cli, ["--json", "paths", "-p", str(extension_root)])
        assert result.exit_code == 0
        items = json.loads(result.stdout)["data"]["items"]
        assert items[0] == {"index": 0, "path": str(BUILTIN_PATH), "builtin": True}
        assert items[1]["path"] == str(extension_root)

    def test_configured_paths_come_before_flags(
        self, cli_runner: CliRunner, tmp_path: Path, extension_root: Path
    ) -> None:
        configured = tmp_path / "configured"
        configured.mkdir()
        (tmp_path / "extctl.toml").write_text('[extensions]\npaths = ["configured"]\n')

        result = cli_runner.invoke(cli, ["--json", "paths", "-p", str(extension_root)])

        assert result.exit_code == 0
        paths = [item["path"] for item in json.loads(result.stdout)["data"]["items"]]
        assert paths[1:] == [str(configured), str(extension_root)]
