# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Commands propagating the interpreter path to configuration scopes."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

import typer

from ..config.models import ConfigurationTarget
from ..interpreter import PropagationResult
from .shared import (
    EXIT_USAGE,
    ROOT_OPTION_HELP,
    USER_DIR_OPTION_HELP,
    CLIError,
    CLILogger,
    build_cli_logger,
    open_services,
    parse_target,
    resolve_resource,
)
from .typer_ext import create_typer

interpreter_app = create_typer(help="Set or clear the interpreter used to run module-installed tools.")

_TARGETS = typer.Option(["workspace"], "--target", "-t", help="Scope to write (repeatable).")
_RESOURCE = typer.Option(None, "--resource", help="Resource selecting the workspace folder for folder writes.")
_ROOT = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP)
_USER_DIR = typer.Option(None, "--user-dir", help=USER_DIR_OPTION_HELP)


@interpreter_app.command("set", help="Write the interpreter path at each target scope.")
def interpreter_set(
    path: str = typer.Argument(..., help="Interpreter executable."),
    targets: list[str] = _TARGETS,
    resource: Path | None = _RESOURCE,
    root: Path | None = _ROOT,
    user_dir: Path | None = _USER_DIR,
) -> None:
    _propagate(path, targets, resource, root, user_dir)


@interpreter_app.command("clear", help="Clear the interpreter path at each target scope.")
def interpreter_clear(
    targets: list[str] = _TARGETS,
    resource: Path | None = _RESOURCE,
    root: Path | None = _ROOT,
    user_dir: Path | None = _USER_DIR,
) -> None:
    _propagate(None, targets, resource, root, user_dir)


def _propagate(
    path: str | None,
    labels: Sequence[str],
    resource: Path | None,
    root: Path | None,
    user_dir: Path | None,
) -> None:
    targets: list[ConfigurationTarget] = [parse_target(label) for label in labels]
    logger = build_cli_logger()
    try:
        services = open_services(root, user_dir)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    results = asyncio.run(services.propagate_interpreter_path(path, resolve_resource(resource), targets))
    if not _report(results, path, logger):
        raise typer.Exit(code=EXIT_USAGE)


def _report(results: Sequence[PropagationResult], path: str | None, logger: CLILogger) -> bool:
    for result in results:
        if result.succeeded:
            verb = "Cleared interpreter path" if path is None else f"Set interpreter path to {path}"
            logger.ok(f"{verb} in {result.target.value} scope")
        else:
            logger.fail(f"{result.target.value}: {result.error}")
    return all(result.succeeded for result in results)


__all__ = ["interpreter_app"]
