# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for the settings, interpreter, and lint commands."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lintscope.cli import app


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    root = tmp_path / "ws"
    root.mkdir()
    return root


def _invoke(args: list[str], workspace: Path, tmp_path: Path):
    runner = CliRunner()
    return runner.invoke(app, [*args, "--root", str(workspace), "--user-dir", str(tmp_path / "user")])


def test_settings_set_then_get(workspace: Path, tmp_path: Path) -> None:
    written = _invoke(
        ["settings", "set", "linting.flake8Enabled", "true", "--target", "workspace"],
        workspace,
        tmp_path,
    )

    assert written.exit_code == 0, written.output
    assert "Set linting.flake8Enabled = true in workspace scope" in written.output
    stored = json.loads((workspace / ".lintscope" / "workspace.json").read_text(encoding="utf-8"))
    assert stored == {"linting.flake8Enabled": True}

    read = _invoke(["settings", "get", "linting.flake8Enabled"], workspace, tmp_path)
    assert read.exit_code == 0
    assert read.stdout.strip() == "true"


def test_settings_folder_write_and_inspect(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text("", encoding="utf-8")
    _invoke(["settings", "set", "linting.maxNumberOfProblems", "10", "--target", "global"], workspace, tmp_path)
    written = _invoke(
        ["settings", "set", "linting.maxNumberOfProblems", "3", "--resource", str(module)],
        workspace,
        tmp_path,
    )
    assert written.exit_code == 0, written.output

    result = _invoke(
        ["settings", "inspect", "linting.maxNumberOfProblems", "--resource", str(module), "--format", "json"],
        workspace,
        tmp_path,
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["default_value"] == 100
    assert payload["global_value"] == 10
    assert payload["workspace_folder_value"] == 3
    assert payload["effective_value"] == 3
    assert json.loads((tmp_path / "user" / "settings.json").read_text(encoding="utf-8")) == {
        "linting.maxNumberOfProblems": 10,
    }


def test_settings_set_reports_scope_actually_written(workspace: Path, tmp_path: Path) -> None:
    (workspace / "lintscope-workspace.toml").write_text('folders = ["a"]\n', encoding="utf-8")
    (workspace / "a").mkdir()
    inside = workspace / "a" / "mod.py"
    inside.write_text("", encoding="utf-8")

    fallback = _invoke(["settings", "set", "linting.flake8Enabled", "true"], workspace, tmp_path)
    scoped = _invoke(
        ["settings", "set", "linting.mypyEnabled", "true", "--resource", str(inside)],
        workspace,
        tmp_path,
    )

    assert fallback.exit_code == 0, fallback.output
    assert "Set linting.flake8Enabled = true in workspace scope" in fallback.output
    assert "workspaceFolder" not in fallback.output
    assert json.loads((workspace / ".lintscope" / "workspace.json").read_text(encoding="utf-8")) == {
        "linting.flake8Enabled": True,
    }
    assert scoped.exit_code == 0, scoped.output
    assert "Set linting.mypyEnabled = true in workspaceFolder scope" in scoped.output
    assert json.loads((workspace / "a" / ".lintscope" / "settings.json").read_text(encoding="utf-8")) == {
        "linting.mypyEnabled": True,
    }


def test_settings_inspect_table(workspace: Path, tmp_path: Path) -> None:
    result = _invoke(["settings", "inspect", "languageServer"], workspace, tmp_path)

    assert result.exit_code == 0, result.output
    assert "effective" in result.output
    assert '"Default"' in result.output


def test_settings_unset(workspace: Path, tmp_path: Path) -> None:
    _invoke(["settings", "set", "linting.enabled", "false", "--target", "workspace"], workspace, tmp_path)

    cleared = _invoke(["settings", "unset", "linting.enabled", "--target", "workspace"], workspace, tmp_path)

    assert cleared.exit_code == 0, cleared.output
    assert "Cleared linting.enabled in workspace scope" in cleared.output
    assert _invoke(["settings", "get", "linting.enabled"], workspace, tmp_path).stdout.strip() == "true"


@pytest.mark.parametrize(
    "args",
    [
        ["settings", "get", "linting.nope"],
        ["settings", "set", "linting.maxNumberOfProblems", "many", "--target", "workspace"],
        ["settings", "set", "linting.pylintArgs", "not-a-list", "--target", "workspace"],
        ["settings", "set", "linting.enabled", "false", "--target", "machine"],
    ],
)
def test_settings_errors_exit_with_usage_code(workspace: Path, tmp_path: Path, args: list[str]) -> None:
    result = _invoke(args, workspace, tmp_path)

    assert result.exit_code == 2


def test_invalid_workspace_file_is_reported(workspace: Path, tmp_path: Path) -> None:
    (workspace / "lintscope-workspace.toml").write_text("folders = [", encoding="utf-8")

    result = _invoke(["settings", "get", "linting.enabled"], workspace, tmp_path)

    assert result.exit_code == 2
    assert "Failed to read" in result.output


def test_interpreter_set_and_clear(workspace: Path, tmp_path: Path) -> None:
    result = _invoke(
        ["interpreter", "set", "/venv/bin/python", "--target", "global", "--target", "workspace"],
        workspace,
        tmp_path,
    )

    assert result.exit_code == 0, result.output
    assert "in global scope" in result.output
    assert "in workspace scope" in result.output

    cleared = _invoke(["interpreter", "clear", "--target", "global"], workspace, tmp_path)
    assert cleared.exit_code == 0, cleared.output
    value = _invoke(["settings", "get", "defaultInterpreterPath"], workspace, tmp_path)
    assert value.stdout.strip() == '"/venv/bin/python"'


def test_interpreter_partial_failure_exits_with_usage_code(workspace: Path, tmp_path: Path) -> None:
    outside = tmp_path / "elsewhere" / "script.py"

    result = _invoke(
        [
            "interpreter",
            "set",
            "/opt/python",
            "--target",
            "folder",
            "--target",
            "workspace",
            "--resource",
            str(outside),
        ],
        workspace,
        tmp_path,
    )

    assert result.exit_code == 2
    assert "no workspace folder contains" in result.output
    stored = json.loads((workspace / ".lintscope" / "workspace.json").read_text(encoding="utf-8"))
    assert stored == {"defaultInterpreterPath": "/opt/python"}


def _configure_fake_pylint(workspace: Path, script: str) -> None:
    settings_dir = workspace / ".lintscope"
    settings_dir.mkdir(exist_ok=True)
    (settings_dir / "workspace.json").write_text(
        json.dumps({"linting.pylintPath": sys.executable, "linting.pylintArgs": ["-c", script]}),
        encoding="utf-8",
    )


def test_lint_reports_problems(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text("import os\n", encoding="utf-8")
    _configure_fake_pylint(workspace, "print('1,0,convention,missing-docstring:Missing module docstring')")

    result = _invoke(["lint", str(module)], workspace, tmp_path)

    assert result.exit_code == 1, result.output
    assert f"{module.resolve()}:1:1: information missing-docstring Missing module docstring [pylint]" in result.output
    assert "1 problem(s) found" in result.output


def test_lint_json_output(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text("import os\n", encoding="utf-8")
    _configure_fake_pylint(workspace, "print('2,4,warning,unused-import:Unused import os')")

    result = _invoke(["lint", str(module), "--format", "json"], workspace, tmp_path)

    assert result.exit_code == 1, result.output
    payload = json.loads(result.stdout)
    assert payload[0]["code"] == "unused-import"
    assert payload[0]["column"] == 4
    assert payload[0]["severity"] == "Warning"


def test_lint_clean_file_exits_zero(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text('"""Docstring."""\n', encoding="utf-8")
    _configure_fake_pylint(workspace, "pass")

    result = _invoke(["lint", str(module)], workspace, tmp_path)

    assert result.exit_code == 0, result.output
    assert "No problems found" in result.output


def test_lint_tool_failure_exits_with_usage_code(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text("", encoding="utf-8")
    _configure_fake_pylint(workspace, "import sys; sys.stderr.write('pylint: error: bad option\\n'); sys.exit(32)")

    result = _invoke(["lint", str(module)], workspace, tmp_path)

    assert result.exit_code == 2
    assert "bad option" in result.output


def test_lint_warns_when_requested_linter_is_disabled(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text("", encoding="utf-8")

    result = _invoke(["lint", str(module), "--tool", "flake8"], workspace, tmp_path)

    assert result.exit_code == 0, result.output
    assert "flake8 is disabled" in result.output
    assert "linting.flake8Enabled" in result.output
    assert "No problems found" in result.output


def test_lint_warns_when_linting_is_switched_off(workspace: Path, tmp_path: Path) -> None:
    module = workspace / "module.py"
    module.write_text("", encoding="utf-8")
    _invoke(["settings", "set", "linting.enabled", "false", "--target", "workspace"], workspace, tmp_path)

    result = _invoke(["lint", str(module), "--tool", "pylint"], workspace, tmp_path)

    assert result.exit_code == 0, result.output
    assert "Linting is disabled" in result.output


@pytest.mark.parametrize("tool", ["black", "nope"])
def test_lint_rejects_non_linters(workspace: Path, tmp_path: Path, tool: str) -> None:
    module = workspace / "module.py"
    module.write_text("", encoding="utf-8")

    result = _invoke(["lint", str(module), "--tool", tool], workspace, tmp_path)

    assert result.exit_code == 2


def test_help_lists_commands() -> None:
    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("lint", "settings", "interpreter"):
        assert command in result.output
