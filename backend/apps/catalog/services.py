from __future__ import annotations

from typing import Any, Callable, Optional, Tuple

from apps.common import get_logger
from apps.commerce.errors import StructuredError
from .protocols import CacheBackendProtocol, CatalogRepositoryProtocol

logger = get_logger(__name__).bind(component="catalog", layer="service")

DEFAULT_CACHE_TTL = 300


class CatalogService:
    def __init__(
        self,
        catalog: CatalogRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        disable_cache: bool = False,
    ):
        self.catalog = catalog
        self.cache = cache_backend
        self.cache_ttl = cache_ttl
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="CatalogService")
        # Caching keys
        self._cache_prefix = "catalog"

    def _cache_key(self, operation: str, *args: Any) -> str:
        suffix = ":".join(str(a) for a in args) or "all"
        return f"{self._cache_prefix}:{operation}:{suffix}"

    def _read_through(
        self, key: str, loader: Callable[[], Tuple[Any, Optional[StructuredError]]]
    ) -> Tuple[Any, Optional[StructuredError]]:
        if self.disable_cache:
            return loader()
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("Catalog cache hit", cache_key=key)
            return cached, None
        self.logger.debug("Catalog cache miss", cache_key=key)
        data, error = loader()
        # Failures and empty lookups are never cached.
        if error is None and data is not None:
            self.cache.set(key, data, timeout=self.cache_ttl)
        return data, error

    def list_products(self, first: int):
        self.logger.debug("Listing products", first=first, cache_enabled=not self.disable_cache)
        return self._read_through(
            self._cache_key("products", first),
            lambda: self.catalog.list_products(first),
        )

    def get_product(self, handle: str):
        return self._read_through(
            self._cache_key("product", handle),
            lambda: self.catalog.get_product(handle),
        )

    def list_collections(self, first: int):
        self.logger.debug("Listing collections", first=first, cache_enabled=not self.disable_cache)
        return self._read_through(
            self._cache_key("collections", first),
            lambda: self.catalog.list_collections(first),
        )

    def get_collection(self, handle: str, products_first: int):
        return self._read_through(
            self._cache_key("collection", handle, products_first),
            lambda: self.catalog.get_collection(handle, products_first),
        )
