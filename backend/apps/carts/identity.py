"""Session -> upstream cart id binding, persisted in a signed cookie.

A ``CartSession`` is read once when the request enters the view and written
once when the response leaves it. ``commit`` and ``clear`` only record the
pending change on the session; ``write`` turns it into exactly one
``Set-Cookie`` header.
"""
from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from django.conf import settings
from django.core import signing
from django.http.request import split_domain_port

from apps.common import get_logger

logger = get_logger(__name__).bind(component="carts", layer="identity")

COOKIE_SALT = "apps.carts.identity"
DEFAULT_COOKIE_NAME = "cart_id"
DEFAULT_TTL_SECONDS = 30 * 24 * 60 * 60
LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "[::1]", "::1"})


@dataclass(frozen=True)
class CartIdentity:
    cart_id: str
    issued_at: datetime
    ttl_seconds: int

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.ttl_seconds)


class PendingChange(enum.Enum):
    NONE = "none"
    COMMIT = "commit"
    CLEAR = "clear"


class CartSession:
    def __init__(
        self,
        identity: Optional[CartIdentity],
        *,
        secure: bool,
        pending: PendingChange = PendingChange.NONE,
    ):
        self.identity = identity
        self.secure = secure
        self.pending = pending
        self.written = False

    @property
    def cart_id(self) -> Optional[str]:
        return self.identity.cart_id if self.identity else None

    def __repr__(self) -> str:
        return f"CartSession(cart_id={self.cart_id!r}, pending={self.pending.value})"


class CartIdentityStore:
    def __init__(
        self,
        cookie_name: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
        secure: Optional[bool] = None,
    ):
        self.cookie_name = cookie_name or getattr(settings, "CART_COOKIE_NAME", DEFAULT_COOKIE_NAME)
        self.ttl_seconds = int(
            ttl_seconds or getattr(settings, "CART_COOKIE_MAX_AGE_SECONDS", DEFAULT_TTL_SECONDS)
        )
        # None means "decide per request from the host".
        self.secure = secure if secure is not None else getattr(settings, "CART_COOKIE_SECURE", None)
        self.logger = logger.bind(cookie=self.cookie_name)

    def open(self, request) -> CartSession:
        secure = self._is_secure(request)
        raw = request.COOKIES.get(self.cookie_name)
        if not raw:
            return CartSession(None, secure=secure)
        identity = self._decode(raw)
        if identity is None:
            self.logger.warning("Discarding unreadable cart cookie")
            return CartSession(None, secure=secure, pending=PendingChange.CLEAR)
        return CartSession(identity, secure=secure)

    def resolve(self, session: CartSession) -> Optional[str]:
        return session.cart_id

    def commit(
        self, session: CartSession, cart_id: str, ttl_seconds: Optional[int] = None
    ) -> CartIdentity:
        if not cart_id:
            raise ValueError("cart_id must be a non-empty string")
        identity = CartIdentity(
            cart_id=cart_id,
            issued_at=datetime.now(timezone.utc),
            ttl_seconds=int(ttl_seconds or self.ttl_seconds),
        )
        if session.cart_id != cart_id:
            self.logger.info(
                "Cart identity committed", cart_id=cart_id, previous_cart_id=session.cart_id
            )
        session.identity = identity
        session.pending = PendingChange.COMMIT
        return identity

    def clear(self, session: CartSession) -> None:
        if session.cart_id:
            self.logger.info("Cart identity cleared", cart_id=session.cart_id)
        session.identity = None
        session.pending = PendingChange.CLEAR

    def write(self, session: CartSession, response) -> None:
        if session.written:
            raise RuntimeError("Cart session has already been written to a response")
        session.written = True
        if session.pending is PendingChange.COMMIT and session.identity is not None:
            response.set_cookie(
                self.cookie_name,
                self._encode(session.identity),
                max_age=session.identity.ttl_seconds,
                path="/",
                secure=session.secure,
                httponly=True,
                samesite="Lax",
            )
        elif session.pending is PendingChange.CLEAR:
            response.delete_cookie(self.cookie_name, path="/", samesite="Lax")

    def _encode(self, identity: CartIdentity) -> str:
        payload = {
            "cartId": identity.cart_id,
            "issuedAt": int(identity.issued_at.timestamp()),
        }
        return signing.dumps(payload, salt=COOKIE_SALT, compress=True)

    def _decode(self, raw: str) -> Optional[CartIdentity]:
        try:
            payload: Any = signing.loads(raw, salt=COOKIE_SALT, max_age=self.ttl_seconds)
        except signing.BadSignature:
            return None
        if not isinstance(payload, Mapping):
            return None
        cart_id = payload.get("cartId")
        issued_at = payload.get("issuedAt")
        if not isinstance(cart_id, str) or not cart_id:
            return None
        if not isinstance(issued_at, int):
            issued_at = int(time.time())
        return CartIdentity(
            cart_id=cart_id,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            ttl_seconds=self.ttl_seconds,
        )

    def _is_secure(self, request) -> bool:
        if self.secure is not None:
            return bool(self.secure)
        host, _port = split_domain_port(request.get_host())
        return host not in LOCAL_HOSTS
