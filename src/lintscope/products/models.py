# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Product identifiers, categories, and resolved invocations."""

from __future__ import annotations

from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductType(str, Enum):
    """Category a product belongs to; selects its path resolution strategy."""

    LINTER = "linter"
    FORMATTER = "formatter"
    TEST_FRAMEWORK = "testFramework"
    REFACTORING_LIBRARY = "refactoringLibrary"


class Product(str, Enum):
    """Pluggable external tools known to lintscope."""

    PYLINT = "pylint"
    FLAKE8 = "flake8"
    MYPY = "mypy"
    PYCODESTYLE = "pycodestyle"
    PYDOCSTYLE = "pydocstyle"
    PROSPECTOR = "prospector"
    BANDIT = "bandit"
    BLACK = "black"
    AUTOPEP8 = "autopep8"
    YAPF = "yapf"
    PYTEST = "pytest"
    UNITTEST = "unittest"
    ROPE = "rope"


PRODUCT_TYPES: Final[dict[Product, ProductType]] = {
    Product.PYLINT: ProductType.LINTER,
    Product.FLAKE8: ProductType.LINTER,
    Product.MYPY: ProductType.LINTER,
    Product.PYCODESTYLE: ProductType.LINTER,
    Product.PYDOCSTYLE: ProductType.LINTER,
    Product.PROSPECTOR: ProductType.LINTER,
    Product.BANDIT: ProductType.LINTER,
    Product.BLACK: ProductType.FORMATTER,
    Product.AUTOPEP8: ProductType.FORMATTER,
    Product.YAPF: ProductType.FORMATTER,
    Product.PYTEST: ProductType.TEST_FRAMEWORK,
    Product.UNITTEST: ProductType.TEST_FRAMEWORK,
    Product.ROPE: ProductType.REFACTORING_LIBRARY,
}

SETTING_SECTIONS: Final[dict[ProductType, str]] = {
    ProductType.LINTER: "linting",
    ProductType.FORMATTER: "formatting",
    ProductType.TEST_FRAMEWORK: "testing",
    ProductType.REFACTORING_LIBRARY: "refactoring",
}

# Products launched through ``python -m <module>`` when no explicit path is set.
MODULE_NAMES: Final[dict[Product, str]] = {product: product.value for product in Product}

# Products without an executable path setting.
MODULE_ONLY_PRODUCTS: Final[frozenset[Product]] = frozenset({Product.UNITTEST})


def products_of_type(product_type: ProductType) -> tuple[Product, ...]:
    """Return every product in ``product_type`` in declaration order."""

    return tuple(product for product in Product if PRODUCT_TYPES[product] is product_type)


class ProductInvocation(BaseModel):
    """Concrete command resolved for a product."""

    model_config = ConfigDict(frozen=True)

    executable: str
    args: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: object) -> tuple[str, ...]:
        """Return arguments as a tuple of strings.

        Raises:
            ValueError: If ``value`` is not a sequence of strings.
        """

        if value is None:
            return ()
        if isinstance(value, str):
            return (value,)
        if isinstance(value, (list, tuple)):
            return tuple(str(item) for item in value)
        raise ValueError("ProductInvocation args must be a sequence of strings")

    @property
    def command(self) -> tuple[str, ...]:
        """Return the executable followed by its arguments."""

        return (self.executable, *self.args)

    def with_args(self, *extra: str) -> ProductInvocation:
        """Return a copy with ``extra`` appended to the arguments."""

        return ProductInvocation(executable=self.executable, args=(*self.args, *extra))


__all__ = [
    "MODULE_NAMES",
    "MODULE_ONLY_PRODUCTS",
    "PRODUCT_TYPES",
    "SETTING_SECTIONS",
    "Product",
    "ProductInvocation",
    "ProductType",
    "products_of_type",
]
