from __future__ import annotations

from functools import lru_cache

from .client import StorefrontClient
from .config import StorefrontConfig


def build_storefront_client() -> StorefrontClient:
    return StorefrontClient(StorefrontConfig.from_settings())


@lru_cache(maxsize=1)
def get_storefront_client() -> StorefrontClient:
    """Process-wide client; configuration is validated on first use."""
    return build_storefront_client()
