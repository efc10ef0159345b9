"""Tagged results returned by the storefront client.

Every upstream call ends in exactly one of three shapes so callers never walk
nested optional fields: the transport failed, the GraphQL layer failed, or the
operation root came back (possibly carrying domain user errors).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class GraphQLError:
    message: str
    code: Optional[str] = None
    path: Tuple[str, ...] = ()

    @staticmethod
    def from_raw(raw: Any) -> "GraphQLError":
        if not isinstance(raw, Mapping):
            return GraphQLError(message=str(raw))
        extensions = raw.get("extensions") or {}
        code = extensions.get("code") if isinstance(extensions, Mapping) else None
        path = raw.get("path") or ()
        return GraphQLError(
            message=str(raw.get("message") or ""),
            code=str(code) if code else None,
            path=tuple(str(p) for p in path),
        )


@dataclass(frozen=True)
class UserError:
    message: str
    code: Optional[str] = None
    field: Tuple[str, ...] = ()

    @staticmethod
    def from_raw(raw: Any) -> "UserError":
        if not isinstance(raw, Mapping):
            return UserError(message=str(raw))
        code = raw.get("code")
        fields = raw.get("field") or ()
        return UserError(
            message=str(raw.get("message") or ""),
            code=str(code) if code else None,
            field=tuple(str(f) for f in fields),
        )


@dataclass(frozen=True)
class TransportFailure:
    """Connection-level failure or an unreadable response body."""

    operation: str
    message: str
    status: Optional[int] = None
    request_id: Optional[str] = None


@dataclass(frozen=True)
class GraphQLFailure:
    """Non-success HTTP status, or GraphQL errors without a usable root payload."""

    operation: str
    status: int
    errors: Tuple[GraphQLError, ...] = ()
    request_id: Optional[str] = None


@dataclass(frozen=True)
class OperationPayload:
    """The operation root was present in ``data``.

    ``result`` is the node the operation is about (cart, product, collection,
    shop) and may be None when the upstream returned null for it.
    """

    operation: str
    status: int
    result: Optional[Mapping[str, Any]] = None
    user_errors: Tuple[UserError, ...] = ()
    errors: Tuple[GraphQLError, ...] = field(default_factory=tuple)
    request_id: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.result is not None and not self.user_errors


UpstreamOutcome = Union[TransportFailure, GraphQLFailure, OperationPayload]


__all__ = [
    "GraphQLError",
    "UserError",
    "TransportFailure",
    "GraphQLFailure",
    "OperationPayload",
    "UpstreamOutcome",
]
