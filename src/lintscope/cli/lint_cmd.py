# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""``lintscope lint``: run the configured linters against one file."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Final

import typer

from ..config.defaults import LINTING_ENABLED_KEY, enabled_setting
from ..errors import LintscopeError
from ..linting.models import Diagnostic
from ..products.models import PRODUCT_TYPES, Product, ProductType
from ..services import LintscopeServices
from .shared import (
    EXIT_DIAGNOSTICS,
    EXIT_OK,
    EXIT_USAGE,
    ROOT_OPTION_HELP,
    USER_DIR_OPTION_HELP,
    CLIError,
    CLILogger,
    build_cli_logger,
    open_services,
)

TEXT_FORMAT: Final[str] = "text"
JSON_FORMAT: Final[str] = "json"


def _parse_tools(tools: Sequence[str] | None) -> list[Product] | None:
    if not tools:
        return None
    selected: list[Product] = []
    for name in tools:
        try:
            selected.append(Product(name.strip().lower()))
        except ValueError as exc:
            raise typer.BadParameter(f"unknown tool '{name}'", param_hint="--tool") from exc
    return selected


def _warn_disabled(services: LintscopeServices, products: Sequence[Product], file: Path, logger: CLILogger) -> None:
    if not services.linters.is_lint_enabled(file):
        logger.warn(f"Linting is disabled for {file} ({LINTING_ENABLED_KEY} is false)")
        return
    for product in products:
        if PRODUCT_TYPES[product] is not ProductType.LINTER:
            continue
        if not services.resolve_setting(enabled_setting(product), file):
            logger.warn(f"{product.value} is disabled for {file} (set {enabled_setting(product)} to enable it)")


def _format_text(diagnostic: Diagnostic) -> str:
    code = f" {diagnostic.code}" if diagnostic.code else ""
    return (
        f"{diagnostic.file}:{diagnostic.line}:{diagnostic.column + 1}: "
        f"{diagnostic.severity.value.lower()}{code} {diagnostic.message} [{diagnostic.tool}]"
    )


def _report(diagnostics: Sequence[Diagnostic], output_format: str, logger: CLILogger) -> None:
    if output_format == JSON_FORMAT:
        logger.echo(json.dumps([item.model_dump(mode="json") for item in diagnostics], indent=2))
        return
    for diagnostic in diagnostics:
        logger.echo(_format_text(diagnostic))
    if diagnostics:
        logger.warn(f"{len(diagnostics)} problem(s) found")
    else:
        logger.ok("No problems found")


def lint_command(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, resolve_path=True, help="File to lint."),
    tools: list[str] | None = typer.Option(
        None,
        "--tool",
        help="Run only this linter (repeatable); defaults to the active linters.",
    ),
    output_format: str = typer.Option(TEXT_FORMAT, "--format", "-f", case_sensitive=False, help="text or json."),
    root: Path | None = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
    user_dir: Path | None = typer.Option(None, "--user-dir", help=USER_DIR_OPTION_HELP),
) -> None:
    """Lint FILE and exit with 1 when problems are reported."""

    fmt = output_format.lower()
    if fmt not in {TEXT_FORMAT, JSON_FORMAT}:
        raise typer.BadParameter("format must be 'text' or 'json'", param_hint="--format")
    products = _parse_tools(tools)
    logger = build_cli_logger()
    try:
        services = open_services(root, user_dir)
        diagnostics = asyncio.run(services.lint(file, products=products))
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except LintscopeError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_USAGE) from exc
    if products and fmt == TEXT_FORMAT:
        _warn_disabled(services, products, file, logger)
    _report(diagnostics, fmt, logger)
    raise typer.Exit(code=EXIT_DIAGNOSTICS if diagnostics else EXIT_OK)


__all__ = ["JSON_FORMAT", "TEXT_FORMAT", "lint_command"]
