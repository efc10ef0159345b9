from __future__ import annotations

from functools import lru_cache
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from apps.commerce.container import get_storefront_client
from apps.commerce.protocols import StorefrontExecutorProtocol
from .repositories import CatalogRepository
from .services import DEFAULT_CACHE_TTL, CatalogService


def build_catalog_service(
    *,
    client: Optional[StorefrontExecutorProtocol] = None,
    disable_cache: bool = False,
) -> CatalogService:
    return CatalogService(
        catalog=CatalogRepository(client or get_storefront_client()),
        cache_backend=cache,
        cache_ttl=int(getattr(settings, "CATALOG_CACHE_TTL", DEFAULT_CACHE_TTL)),
        disable_cache=disable_cache,
    )


@lru_cache(maxsize=1)
def get_catalog_service() -> CatalogService:
    return build_catalog_service()
