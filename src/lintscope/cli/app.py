# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

import logging

import typer

from .interpreter_cmd import interpreter_app
from .lint_cmd import lint_command
from .settings_cmd import settings_app
from .typer_ext import create_typer

app = create_typer(help="Layered settings and linter runner for Python workspaces.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log internal diagnostics to stderr."),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


app.command("lint")(lint_command)
app.add_typer(settings_app, name="settings")
app.add_typer(interpreter_app, name="interpreter")

__all__ = ["app"]
