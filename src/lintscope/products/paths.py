# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-category strategies turning resolved settings into product invocations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from ..config.defaults import INTERPRETER_PATH_KEY, args_setting, path_setting
from .models import MODULE_NAMES, MODULE_ONLY_PRODUCTS, PRODUCT_TYPES, Product, ProductInvocation, ProductType

SettingsView = Mapping[str, Any]


class ProductPathService(ABC):
    """Strategy computing the executable and arguments for one product category.

    Subclasses bind :attr:`product_type` and decide where the executable path
    comes from. Products whose path is still the bare product name are run as
    ``<interpreter> -m <module>``.
    """

    product_type: ClassVar[ProductType]

    def supports(self, product: Product) -> bool:
        """Return ``True`` when ``product`` belongs to this service's category."""

        return PRODUCT_TYPES[product] is self.product_type

    def resolve(self, product: Product, settings: SettingsView) -> ProductInvocation:
        """Return the invocation for ``product`` given resolved ``settings``.

        Args:
            product: Product to resolve; must belong to :attr:`product_type`.
            settings: Settings resolved for the target resource.

        Returns:
            ProductInvocation: Executable and arguments. The executable may be
            empty when the settings blank it out; the registry rejects that.

        Raises:
            ValueError: If ``product`` belongs to a different category.
        """

        if not self.supports(product):
            raise ValueError(f"{type(self).__name__} cannot resolve {product.value}")
        executable = self.executable_path(product, settings).strip()
        args = tuple(self.arguments(product, settings))
        if self.is_executable_a_module(product, executable):
            interpreter = str(settings[INTERPRETER_PATH_KEY]).strip()
            return ProductInvocation(executable=interpreter, args=("-m", MODULE_NAMES[product], *args))
        return ProductInvocation(executable=executable, args=args)

    def is_executable_a_module(self, product: Product, executable: str) -> bool:
        """Return ``True`` when ``executable`` is the product's bare module name."""

        return executable == MODULE_NAMES[product]

    def arguments(self, product: Product, settings: SettingsView) -> Sequence[str]:
        """Return user supplied arguments for ``product``."""

        return list(settings[args_setting(product)])

    @abstractmethod
    def executable_path(self, product: Product, settings: SettingsView) -> str:
        """Return the configured executable path for ``product``."""


class LinterProductPathService(ProductPathService):
    """Resolve linters from ``linting.<name>Path`` and ``linting.<name>Args``."""

    product_type = ProductType.LINTER

    def executable_path(self, product: Product, settings: SettingsView) -> str:
        return str(settings[path_setting(product)])


class FormatterProductPathService(ProductPathService):
    """Resolve formatters from ``formatting.<name>Path`` and ``formatting.<name>Args``."""

    product_type = ProductType.FORMATTER

    def executable_path(self, product: Product, settings: SettingsView) -> str:
        return str(settings[path_setting(product)])


class TestFrameworkProductPathService(ProductPathService):
    """Resolve test frameworks; module-only frameworks always run through the interpreter."""

    product_type = ProductType.TEST_FRAMEWORK

    def executable_path(self, product: Product, settings: SettingsView) -> str:
        if product in MODULE_ONLY_PRODUCTS:
            return MODULE_NAMES[product]
        return str(settings[path_setting(product)])


DEFAULT_PATH_SERVICES: tuple[type[ProductPathService], ...] = (
    LinterProductPathService,
    FormatterProductPathService,
    TestFrameworkProductPathService,
)


__all__ = [
    "DEFAULT_PATH_SERVICES",
    "FormatterProductPathService",
    "LinterProductPathService",
    "ProductPathService",
    "SettingsView",
    "TestFrameworkProductPathService",
]
