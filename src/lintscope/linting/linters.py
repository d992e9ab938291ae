# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concrete linters for the supported Python tools."""

from __future__ import annotations

from typing import Final

from ..products.models import Product
from .base import Linter
from .parsers import (
    PEP8_FORMAT,
    PYLINT_MSG_TEMPLATE,
    BitmaskExitCodePolicy,
    ExitCodePolicy,
    JsonParser,
    TextParser,
    parse_bandit,
    parse_flake8,
    parse_mypy,
    parse_prospector,
    parse_pycodestyle,
    parse_pydocstyle,
    parse_pylint,
)


class PylintLinter(Linter):
    """Run pylint with a comma separated message template."""

    product = Product.PYLINT
    parser = TextParser(parse_pylint)
    exit_codes = BitmaskExitCodePolicy()
    output_args = (f"--msg-template={PYLINT_MSG_TEMPLATE}", "--reports=n", "--output-format=text")


class Flake8Linter(Linter):
    product = Product.FLAKE8
    parser = TextParser(parse_flake8)
    output_args = (f"--format={PEP8_FORMAT}",)


class MypyLinter(Linter):
    """Run mypy; exit code 1 reports type errors, 2 a crash or usage error."""

    product = Product.MYPY
    parser = TextParser(parse_mypy)
    output_args = ("--show-column-numbers", "--no-pretty", "--no-error-summary")


class PycodestyleLinter(Linter):
    product = Product.PYCODESTYLE
    parser = TextParser(parse_pycodestyle)
    output_args = (f"--format={PEP8_FORMAT}",)


class PydocstyleLinter(Linter):
    product = Product.PYDOCSTYLE
    parser = TextParser(parse_pydocstyle)


class ProspectorLinter(Linter):
    product = Product.PROSPECTOR
    parser = JsonParser(parse_prospector)
    output_args = ("--absolute-paths", "--output-format=json")


class BanditLinter(Linter):
    """Run bandit; diagnostics severity follows bandit's issue severity."""

    product = Product.BANDIT
    parser = JsonParser(parse_bandit)
    exit_codes = ExitCodePolicy(issue_codes=frozenset({1}))
    output_args = ("--format=json", "--quiet")


LINTER_CLASSES: Final[dict[Product, type[Linter]]] = {
    linter.product: linter
    for linter in (
        PylintLinter,
        Flake8Linter,
        MypyLinter,
        PycodestyleLinter,
        PydocstyleLinter,
        ProspectorLinter,
        BanditLinter,
    )
}


__all__ = [
    "LINTER_CLASSES",
    "BanditLinter",
    "Flake8Linter",
    "MypyLinter",
    "ProspectorLinter",
    "PycodestyleLinter",
    "PydocstyleLinter",
    "PylintLinter",
]
