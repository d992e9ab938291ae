# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registry binding product categories to their path services."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path

from ..config.resolver import ConfigurationResolver
from ..errors import ProductNotConfiguredError
from .models import PRODUCT_TYPES, Product, ProductInvocation, ProductType, products_of_type
from .paths import DEFAULT_PATH_SERVICES, ProductPathService

LOGGER = logging.getLogger(__name__)


class ProductService:
    """Answer category questions about products."""

    def product_type(self, product: Product) -> ProductType:
        """Return the category ``product`` belongs to."""

        return PRODUCT_TYPES[product]

    def products(self, product_type: ProductType) -> tuple[Product, ...]:
        """Return every product of ``product_type``."""

        return products_of_type(product_type)


class ProductRegistry(Mapping[ProductType, ProductPathService]):
    """Map product categories to :class:`ProductPathService` implementations.

    ``ProductRegistry`` behaves like a read-only mapping keyed by
    :class:`ProductType`. Registering a category twice replaces the previous
    binding so tests can swap in their own services.
    """

    def __init__(self, resolver: ConfigurationResolver, product_service: ProductService | None = None) -> None:
        self._resolver = resolver
        self._product_service = product_service or ProductService()
        self._services: dict[ProductType, ProductPathService] = {}

    @property
    def product_service(self) -> ProductService:
        """Return the product category service."""

        return self._product_service

    def register(self, product_type: ProductType, path_service: ProductPathService) -> None:
        """Bind ``path_service`` to ``product_type``, replacing an existing binding."""

        previous = self._services.get(product_type)
        self._services[product_type] = path_service
        if previous is not None and previous is not path_service:
            LOGGER.debug("replaced path service for %s: %r -> %r", product_type.value, previous, path_service)

    def unregister(self, product_type: ProductType) -> ProductPathService | None:
        """Remove and return the binding for ``product_type``."""

        return self._services.pop(product_type, None)

    def path_service(self, product: Product) -> ProductPathService:
        """Return the path service responsible for ``product``.

        Raises:
            ProductNotConfiguredError: If no service is bound to the product's category.
        """

        product_type = self._product_service.product_type(product)
        service = self._services.get(product_type)
        if service is None:
            raise ProductNotConfiguredError(product.value, f"no path service registered for {product_type.value}")
        return service

    def resolve(self, product: Product, resource: Path | None = None) -> ProductInvocation:
        """Return the concrete invocation of ``product`` for ``resource``.

        Args:
            product: Product to resolve.
            resource: Resource whose settings drive the resolution.

        Returns:
            ProductInvocation: Executable path and arguments.

        Raises:
            ProductNotConfiguredError: If no path service is bound to the
                product's category or the executable resolves to an empty value.
        """

        service = self.path_service(product)
        invocation = service.resolve(product, self._resolver.effective_settings(resource))
        if not invocation.executable:
            raise ProductNotConfiguredError(product.value, "resolved executable path is empty")
        return invocation

    def __getitem__(self, product_type: ProductType) -> ProductPathService:
        return self._services[product_type]

    def __iter__(self) -> Iterator[ProductType]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)


def register_default_path_services(registry: ProductRegistry) -> ProductRegistry:
    """Bind the built-in path service for every product category."""

    for service_type in DEFAULT_PATH_SERVICES:
        registry.register(service_type.product_type, service_type())
    return registry


__all__ = ["ProductRegistry", "ProductService", "register_default_path_services"]
