# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Built-in setting catalogue covering linting, formatting, and testing products."""

from __future__ import annotations

from typing import Final, Literal

from ..products.models import (
    MODULE_ONLY_PRODUCTS,
    PRODUCT_TYPES,
    SETTING_SECTIONS,
    Product,
    ProductType,
)
from .schema import WINDOW_TARGETS, SettingDefinition, SettingsSchema

LINTING_ENABLED_KEY: Final[str] = "linting.enabled"
MAX_PROBLEMS_KEY: Final[str] = "linting.maxNumberOfProblems"
LINTING_CWD_KEY: Final[str] = "linting.cwd"
SEVERITY_OVERRIDES_KEY: Final[str] = "linting.severity"
LANGUAGE_SERVER_KEY: Final[str] = "languageServer"
FORMATTING_PROVIDER_KEY: Final[str] = "formatting.provider"
INTERPRETER_PATH_KEY: Final[str] = "defaultInterpreterPath"

LanguageServerType = Literal["Default", "Jedi", "Pylance", "None"]
FormattingProvider = Literal["autopep8", "black", "yapf", "none"]

_TOGGLED_TYPES: Final[frozenset[ProductType]] = frozenset({ProductType.LINTER, ProductType.TEST_FRAMEWORK})
_ENABLED_BY_DEFAULT: Final[frozenset[Product]] = frozenset({Product.PYLINT})

_DEFAULT_ARGS: Final[dict[Product, list[str]]] = {
    Product.MYPY: ["--ignore-missing-imports", "--follow-imports=silent"],
    Product.UNITTEST: ["-v", "-s", ".", "-p", "*test*.py"],
}


def enabled_setting(product: Product) -> str:
    """Return the key of the enable flag for ``product`` (``linting.pylintEnabled``)."""

    return f"{SETTING_SECTIONS[PRODUCT_TYPES[product]]}.{product.value}Enabled"


def path_setting(product: Product) -> str:
    """Return the key holding the executable path for ``product``."""

    return f"{SETTING_SECTIONS[PRODUCT_TYPES[product]]}.{product.value}Path"


def args_setting(product: Product) -> str:
    """Return the key holding extra command-line arguments for ``product``."""

    return f"{SETTING_SECTIONS[PRODUCT_TYPES[product]]}.{product.value}Args"


def _product_definitions(product: Product) -> list[SettingDefinition]:
    product_type = PRODUCT_TYPES[product]
    definitions: list[SettingDefinition] = []
    if product_type in _TOGGLED_TYPES:
        definitions.append(
            SettingDefinition(
                key=enabled_setting(product),
                value_type=bool,
                default=product in _ENABLED_BY_DEFAULT,
                description=f"Whether {product.value} is enabled.",
            ),
        )
    if product not in MODULE_ONLY_PRODUCTS:
        definitions.append(
            SettingDefinition(
                key=path_setting(product),
                value_type=str,
                default=product.value,
                description=f"Path to {product.value}; the bare name runs it as a module of the interpreter.",
            ),
        )
    definitions.append(
        SettingDefinition(
            key=args_setting(product),
            value_type=list[str],
            default=list(_DEFAULT_ARGS.get(product, [])),
            description=f"Additional arguments passed to {product.value}.",
        ),
    )
    return definitions


def build_default_schema() -> SettingsSchema:
    """Return a fresh schema populated with the built-in settings."""

    schema = SettingsSchema(
        [
            SettingDefinition(
                key=LINTING_ENABLED_KEY,
                value_type=bool,
                default=True,
                description="Master switch for all linters.",
            ),
            SettingDefinition(
                key=MAX_PROBLEMS_KEY,
                value_type=int,
                default=100,
                description="Maximum number of diagnostics reported per linter run.",
            ),
            SettingDefinition(
                key=LINTING_CWD_KEY,
                value_type=str | None,
                default=None,
                description="Working directory for linters; defaults to the document's workspace folder.",
            ),
            SettingDefinition(
                key=SEVERITY_OVERRIDES_KEY,
                value_type=dict[str, Literal["Error", "Warning", "Information", "Hint"]],
                default={},
                description="Overrides mapping tool message categories (e.g. 'convention', 'W') to severities.",
            ),
            SettingDefinition(
                key=LANGUAGE_SERVER_KEY,
                value_type=LanguageServerType,
                default="Default",
                description="Language backend providing completions and navigation.",
                targets=WINDOW_TARGETS,
            ),
            SettingDefinition(
                key=FORMATTING_PROVIDER_KEY,
                value_type=FormattingProvider,
                default="autopep8",
                description="Formatter used for document formatting.",
            ),
            SettingDefinition(
                key=INTERPRETER_PATH_KEY,
                value_type=str,
                default="python",
                description="Interpreter used to run products installed as modules.",
            ),
        ],
    )
    for product in Product:
        for definition in _product_definitions(product):
            schema.define(definition)
    return schema


__all__ = [
    "FORMATTING_PROVIDER_KEY",
    "INTERPRETER_PATH_KEY",
    "LANGUAGE_SERVER_KEY",
    "LINTING_CWD_KEY",
    "LINTING_ENABLED_KEY",
    "MAX_PROBLEMS_KEY",
    "SEVERITY_OVERRIDES_KEY",
    "args_setting",
    "build_default_schema",
    "enabled_setting",
    "path_setting",
]
