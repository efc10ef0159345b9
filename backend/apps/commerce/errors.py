"""Normalisation of upstream failures into one local error taxonomy.

``classify`` walks ``CLASSIFICATION_RULES`` in order and the first rule whose
predicate matches builds the ``StructuredError``:

1. ``transport-failure``  connection error or unreadable body
                          -> UPSTREAM_UNAVAILABLE (502)
2. ``graphql-failure``    non-2xx status, or GraphQL errors with no usable
                          root payload -> CART_NOT_FOUND (404) when not-found
                          detection matches, else UPSTREAM_ERROR (502)
3. ``user-errors``        operation payload carries domain user errors
                          -> CART_NOT_FOUND (404) when not-found detection
                          matches, else USER_ERROR (400)
4. ``malformed-success``  no errors of any kind but no usable data
                          -> UPSTREAM_ERROR (502)

Not-found detection is itself ordered. A structured code from
``NOT_FOUND_CODES`` on any GraphQL error or user error is authoritative.
Otherwise ``NOT_FOUND_MESSAGE_RULES`` are applied, case-insensitively, to the
GraphQL error messages and then to the first user-error message; the first
candidate that matches a rule wins.

Messages are all available error messages joined with ``"; "``, falling back
to the per-operation message from ``apps.commerce.operations``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

from .operations import fallback_message
from .outcomes import (
    GraphQLError,
    GraphQLFailure,
    OperationPayload,
    TransportFailure,
    UpstreamOutcome,
    UserError,
)


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CART_NOT_FOUND = "CART_NOT_FOUND"
    USER_ERROR = "USER_ERROR"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    DISABLED = "DISABLED"


HTTP_STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.CART_NOT_FOUND: 404,
    ErrorCode.USER_ERROR: 400,
    ErrorCode.UPSTREAM_UNAVAILABLE: 502,
    ErrorCode.UPSTREAM_ERROR: 502,
    ErrorCode.DISABLED: 404,
}


@dataclass(frozen=True)
class StructuredError:
    code: ErrorCode
    message: str
    http_status: int
    request_id: Optional[str] = None

    @classmethod
    def of(
        cls, code: ErrorCode, message: str, request_id: Optional[str] = None
    ) -> "StructuredError":
        return cls(
            code=code,
            message=message,
            http_status=HTTP_STATUS_BY_CODE[code],
            request_id=request_id,
        )

    @property
    def is_cart_not_found(self) -> bool:
        return self.code is ErrorCode.CART_NOT_FOUND

    def to_payload(self) -> Dict[str, str]:
        payload = {"code": self.code.value, "message": self.message}
        if self.request_id:
            payload["requestId"] = self.request_id
        return payload


# --------------------------------------------------------------------------
# Not-found detection
# --------------------------------------------------------------------------

NOT_FOUND_CODES = frozenset({"CART_NOT_FOUND", "CART_INVALID"})


@dataclass(frozen=True)
class MessageRule:
    """Matches when ``subject`` and at least one of ``any_of`` occur."""

    name: str
    subject: str
    any_of: Tuple[str, ...]

    def matches(self, message: str) -> bool:
        lowered = message.lower().replace("’", "'")
        return self.subject in lowered and any(term in lowered for term in self.any_of)


NOT_FOUND_MESSAGE_RULES: Tuple[MessageRule, ...] = (
    MessageRule(
        name="cart-missing",
        subject="cart",
        any_of=("not found", "couldn't find", "invalid"),
    ),
)


def detect_not_found(
    errors: Sequence[GraphQLError], user_errors: Sequence[UserError]
) -> Optional[str]:
    """Return the name of the matching not-found rule, or None."""
    for err in (*errors, *user_errors):
        if err.code and err.code.upper() in NOT_FOUND_CODES:
            return f"code:{err.code.upper()}"
    candidates = [err.message for err in errors]
    if user_errors:
        candidates.append(user_errors[0].message)
    for message in candidates:
        if not message:
            continue
        for rule in NOT_FOUND_MESSAGE_RULES:
            if rule.matches(message):
                return f"message:{rule.name}"
    return None


# --------------------------------------------------------------------------
# Classification rules
# --------------------------------------------------------------------------


def _join_messages(messages: Iterable[str], operation: str) -> str:
    joined = "; ".join(m for m in messages if m)
    return joined or fallback_message(operation)


def _transport_error(outcome: TransportFailure) -> StructuredError:
    return StructuredError.of(
        ErrorCode.UPSTREAM_UNAVAILABLE,
        _join_messages([outcome.message], outcome.operation),
        outcome.request_id,
    )


def _graphql_error(outcome: GraphQLFailure) -> StructuredError:
    message = _join_messages((e.message for e in outcome.errors), outcome.operation)
    if detect_not_found(outcome.errors, ()):
        return StructuredError.of(ErrorCode.CART_NOT_FOUND, message, outcome.request_id)
    return StructuredError.of(ErrorCode.UPSTREAM_ERROR, message, outcome.request_id)


def _user_error(outcome: OperationPayload) -> StructuredError:
    message = _join_messages(
        [*(e.message for e in outcome.errors), *(e.message for e in outcome.user_errors)],
        outcome.operation,
    )
    if detect_not_found(outcome.errors, outcome.user_errors):
        return StructuredError.of(ErrorCode.CART_NOT_FOUND, message, outcome.request_id)
    return StructuredError.of(ErrorCode.USER_ERROR, message, outcome.request_id)


def _malformed_success(outcome: UpstreamOutcome) -> StructuredError:
    errors = getattr(outcome, "errors", ())
    return StructuredError.of(
        ErrorCode.UPSTREAM_ERROR,
        _join_messages((e.message for e in errors), outcome.operation),
        outcome.request_id,
    )


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    applies: Callable[[UpstreamOutcome], bool]
    build: Callable[[UpstreamOutcome], StructuredError]


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "transport-failure",
        lambda outcome: isinstance(outcome, TransportFailure),
        _transport_error,
    ),
    ClassificationRule(
        "graphql-failure",
        lambda outcome: isinstance(outcome, GraphQLFailure),
        _graphql_error,
    ),
    ClassificationRule(
        "user-errors",
        lambda outcome: isinstance(outcome, OperationPayload) and bool(outcome.user_errors),
        _user_error,
    ),
    ClassificationRule(
        "malformed-success",
        lambda outcome: True,
        _malformed_success,
    ),
)


def classify(outcome: UpstreamOutcome) -> StructuredError:
    """Turn a failed upstream outcome into a ``StructuredError``. Pure."""
    for rule in CLASSIFICATION_RULES:
        if rule.applies(outcome):
            return rule.build(outcome)
    raise AssertionError("malformed-success rule must match every outcome")


def validation_error(message: str) -> StructuredError:
    return StructuredError.of(ErrorCode.VALIDATION_ERROR, message)


__all__ = [
    "ErrorCode",
    "HTTP_STATUS_BY_CODE",
    "StructuredError",
    "NOT_FOUND_CODES",
    "NOT_FOUND_MESSAGE_RULES",
    "MessageRule",
    "ClassificationRule",
    "CLASSIFICATION_RULES",
    "detect_not_found",
    "classify",
    "validation_error",
]
