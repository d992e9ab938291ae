# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Declarations of known settings, their types, defaults, and writable scopes."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Final

from pydantic import TypeAdapter, ValidationError

from ..errors import InvalidSettingValueError, SettingScopeError, UnknownSettingKeyError
from .models import ConfigurationTarget

ALL_TARGETS: Final[frozenset[ConfigurationTarget]] = frozenset(ConfigurationTarget)
WINDOW_TARGETS: Final[frozenset[ConfigurationTarget]] = frozenset(
    {ConfigurationTarget.GLOBAL, ConfigurationTarget.WORKSPACE},
)


@dataclass(frozen=True)
class SettingDefinition:
    """Schema entry describing one configurable value.

    Attributes:
        key: Dotted setting identifier.
        value_type: Type annotation values must satisfy (checked strictly).
        default: Value reported when no scope defines the setting.
        description: Human readable summary.
        targets: Configuration targets the setting may be written to.
    """

    key: str
    value_type: Any
    default: Any = None
    description: str = ""
    targets: frozenset[ConfigurationTarget] = field(default=ALL_TARGETS)

    @cached_property
    def _adapter(self) -> TypeAdapter[Any]:
        return TypeAdapter(self.value_type)

    def validate(self, value: Any) -> Any:
        """Return ``value`` after checking it against :attr:`value_type`.

        Args:
            value: Candidate value supplied by a caller.

        Returns:
            Any: The validated value (never coerced into another type).

        Raises:
            InvalidSettingValueError: If ``value`` does not match the declared type.
        """

        try:
            return self._adapter.validate_python(value, strict=True)
        except ValidationError as exc:
            errors = "; ".join(error["msg"] for error in exc.errors())
            raise InvalidSettingValueError(f"Invalid value {value!r} for setting '{self.key}': {errors}") from exc

    def check_target(self, target: ConfigurationTarget) -> None:
        """Ensure the setting may be written at ``target``.

        Raises:
            SettingScopeError: If the schema forbids writes at ``target``.
        """

        if target not in self.targets:
            allowed = ", ".join(sorted(item.value for item in self.targets))
            raise SettingScopeError(
                f"Setting '{self.key}' cannot be written to {target.value} scope (allowed: {allowed})",
            )

    def default_value(self) -> Any:
        """Return a private copy of the default value."""

        return copy.deepcopy(self.default)


class SettingsSchema(Mapping[str, SettingDefinition]):
    """Registry of setting definitions keyed by setting name."""

    def __init__(self, definitions: Iterable[SettingDefinition] = ()) -> None:
        self._definitions: dict[str, SettingDefinition] = {}
        for definition in definitions:
            self.define(definition)

    def define(self, definition: SettingDefinition) -> None:
        """Register ``definition`` replacing any previous entry with the same key."""

        self._definitions[definition.key] = definition

    def require(self, key: str) -> SettingDefinition:
        """Return the definition for ``key``.

        Raises:
            UnknownSettingKeyError: If ``key`` is not declared.
        """

        try:
            return self._definitions[key]
        except KeyError:
            raise UnknownSettingKeyError(key) from None

    def __getitem__(self, key: str) -> SettingDefinition:
        return self.require(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


__all__ = ["ALL_TARGETS", "WINDOW_TARGETS", "SettingDefinition", "SettingsSchema"]
