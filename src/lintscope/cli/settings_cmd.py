# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commands reading and writing layered settings."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer
from rich.table import Table

from ..config.models import ConfigurationTarget
from ..errors import LintscopeError
from .shared import (
    EXIT_USAGE,
    ROOT_OPTION_HELP,
    USER_DIR_OPTION_HELP,
    CLIError,
    build_cli_logger,
    open_services,
    parse_target,
    parse_value,
    resolve_resource,
)
from .typer_ext import create_typer

settings_app = create_typer(help="Read, write, and inspect layered settings.")

_ROOT = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP)
_USER_DIR = typer.Option(None, "--user-dir", help=USER_DIR_OPTION_HELP)
_RESOURCE = typer.Option(None, "--resource", help="File or folder selecting the workspace-folder scope.")
_TARGET = typer.Option("folder", "--target", "-t", help="Scope to write: global, workspace, or folder.")


def _render(value: Any) -> str:
    return json.dumps(value, sort_keys=True)


@settings_app.command("get", help="Print the effective value of a setting.")
def settings_get(
    key: str = typer.Argument(..., help="Setting key, e.g. linting.pylintEnabled."),
    resource: Path | None = _RESOURCE,
    root: Path | None = _ROOT,
    user_dir: Path | None = _USER_DIR,
) -> None:
    logger = build_cli_logger()
    try:
        services = open_services(root, user_dir)
        value = services.resolve_setting(key, resolve_resource(resource))
    except LintscopeError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_USAGE) from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    logger.echo(_render(value))


@settings_app.command("set", help="Write a setting at one scope (VALUE is parsed as JSON when possible).")
def settings_set(
    key: str = typer.Argument(..., help="Setting key."),
    value: str = typer.Argument(..., help="New value; JSON literals such as true, 3, or [\"-x\"] are decoded."),
    target: str = _TARGET,
    resource: Path | None = _RESOURCE,
    root: Path | None = _ROOT,
    user_dir: Path | None = _USER_DIR,
) -> None:
    _write(key, parse_value(value), parse_target(target), resource, root, user_dir)


@settings_app.command("unset", help="Clear a setting at one scope.")
def settings_unset(
    key: str = typer.Argument(..., help="Setting key."),
    target: str = _TARGET,
    resource: Path | None = _RESOURCE,
    root: Path | None = _ROOT,
    user_dir: Path | None = _USER_DIR,
) -> None:
    _write(key, None, parse_target(target), resource, root, user_dir)


@settings_app.command("inspect", help="Show the default and per-scope values of a setting.")
def settings_inspect(
    key: str = typer.Argument(..., help="Setting key."),
    resource: Path | None = _RESOURCE,
    root: Path | None = _ROOT,
    user_dir: Path | None = _USER_DIR,
    output_format: str = typer.Option("table", "--format", "-f", case_sensitive=False, help="table or json."),
) -> None:
    logger = build_cli_logger()
    try:
        services = open_services(root, user_dir)
        inspection = services.inspect_setting(key, resolve_resource(resource))
    except LintscopeError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_USAGE) from exc
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    if output_format.lower() == "json":
        payload = inspection.model_dump(mode="json")
        payload["effective_value"] = inspection.effective_value
        logger.echo(json.dumps(payload, indent=2, sort_keys=True))
        return
    if output_format.lower() != "table":
        raise typer.BadParameter("format must be 'table' or 'json'", param_hint="--format")

    table = Table(title=key)
    table.add_column("Scope")
    table.add_column("Value")
    table.add_row("default", _render(inspection.default_value))
    for target in ConfigurationTarget:
        recorded = inspection.value_at(target)
        table.add_row(target.value, "-" if recorded is None else _render(recorded))
    table.add_row("effective", _render(inspection.effective_value))
    logger.console.print(table)


def _write(
    key: str,
    value: Any,
    target: ConfigurationTarget,
    resource: Path | None,
    root: Path | None,
    user_dir: Path | None,
) -> None:
    logger = build_cli_logger()
    try:
        services = open_services(root, user_dir)
        written = asyncio.run(services.update_setting(key, value, resolve_resource(resource), target))
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except LintscopeError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_USAGE) from exc
    if value is None:
        logger.ok(f"Cleared {key} in {written.value} scope")
    else:
        logger.ok(f"Set {key} = {_render(value)} in {written.value} scope")


__all__ = ["settings_app"]
