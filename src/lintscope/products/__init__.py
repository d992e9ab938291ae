# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Product identifiers and their categories.

Path services and the registry live in :mod:`lintscope.products.paths` and
:mod:`lintscope.products.registry`.
"""

from __future__ import annotations

from .models import (
    MODULE_NAMES,
    PRODUCT_TYPES,
    SETTING_SECTIONS,
    Product,
    ProductInvocation,
    ProductType,
    products_of_type,
)

__all__ = [
    "MODULE_NAMES",
    "PRODUCT_TYPES",
    "SETTING_SECTIONS",
    "Product",
    "ProductInvocation",
    "ProductType",
    "products_of_type",
]
