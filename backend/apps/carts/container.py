from __future__ import annotations

import threading
from typing import Callable, Optional

from django.conf import settings

from apps.catalog.mappers import VariantMapper
from apps.commerce.container import get_storefront_client
from apps.commerce.protocols import StorefrontExecutorProtocol
from .identity import CartIdentityStore
from .mappers import CartLineMapper, CartMapper
from .replay import DEFAULT_TTL_MS, RequestReplayCache
from .repositories import CartRepository
from .services import CartService


def build_replay_cache(clock: Optional[Callable[[], float]] = None) -> RequestReplayCache:
    ttl_ms = int(getattr(settings, "CART_REPLAY_TTL_MS", DEFAULT_TTL_MS))
    return RequestReplayCache(ttl_ms=ttl_ms, clock=clock)


def build_cart_service(
    *,
    client: Optional[StorefrontExecutorProtocol] = None,
    replay: Optional[RequestReplayCache] = None,
    identity: Optional[CartIdentityStore] = None,
) -> CartService:
    cart_mapper = CartMapper(CartLineMapper(VariantMapper()))
    return CartService(
        carts=CartRepository(client or get_storefront_client(), cart_mapper),
        identity=identity or CartIdentityStore(),
        replay=replay or build_replay_cache(),
    )


_service_lock = threading.Lock()
_service: Optional[CartService] = None


def get_cart_service() -> CartService:
    """The process-wide cart service; it owns the single replay cache."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = build_cart_service()
    return _service
