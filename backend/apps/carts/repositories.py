from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from apps.common import get_logger
from apps.commerce import operations
from apps.commerce.errors import ErrorCode, StructuredError, classify
from apps.commerce.operations import Operation
from apps.commerce.outcomes import OperationPayload
from apps.commerce.protocols import StorefrontExecutorProtocol
from .dtos import MutationOutcome
from .mappers import CartMapper
from .protocols import CartMapperProtocol

logger = get_logger(__name__).bind(component="carts", layer="repository")


class CartRepository:
    """Cart gateway over the Storefront client.

    Every method returns a ``MutationOutcome``; upstream failures are
    classified, never raised.
    """

    def __init__(
        self,
        client: StorefrontExecutorProtocol,
        mapper: Optional[CartMapperProtocol] = None,
    ):
        self.client = client
        self.mapper = mapper or CartMapper()
        self.logger = logger.bind(repository="CartRepository")

    def fetch(self, cart_id: str) -> MutationOutcome:
        return self._run(operations.GET_CART, {"id": cart_id}, allow_empty=True)

    def create(self) -> MutationOutcome:
        return self._run(operations.CART_CREATE, {"input": {}})

    def add_lines(self, cart_id: str, lines: Iterable[Mapping[str, Any]]) -> MutationOutcome:
        return self._run(
            operations.CART_LINES_ADD,
            {"cartId": cart_id, "lines": [dict(line) for line in lines]},
        )

    def update_lines(self, cart_id: str, lines: Iterable[Mapping[str, Any]]) -> MutationOutcome:
        return self._run(
            operations.CART_LINES_UPDATE,
            {"cartId": cart_id, "lines": [dict(line) for line in lines]},
        )

    def remove_lines(self, cart_id: str, line_ids: Iterable[str]) -> MutationOutcome:
        return self._run(
            operations.CART_LINES_REMOVE,
            {"cartId": cart_id, "lineIds": list(line_ids)},
        )

    def _run(
        self,
        operation: Operation,
        variables: Dict[str, Any],
        *,
        allow_empty: bool = False,
    ) -> MutationOutcome:
        outcome = self.client.execute(operation, variables)
        if isinstance(outcome, OperationPayload) and not outcome.user_errors:
            if outcome.result is None and allow_empty:
                self.logger.debug("Upstream returned no cart", operation=operation.name)
                return MutationOutcome.success(None)
            if outcome.result is not None:
                try:
                    cart = self.mapper.to_dto(outcome.result)
                except (KeyError, TypeError, ValueError) as exc:
                    self.logger.error(
                        "Malformed cart payload",
                        operation=operation.name,
                        error=str(exc),
                        request_id=outcome.request_id,
                    )
                    return MutationOutcome.failure(
                        StructuredError.of(
                            ErrorCode.UPSTREAM_ERROR,
                            operation.fallback_message,
                            outcome.request_id,
                        )
                    )
                return MutationOutcome.success(cart)
        error = classify(outcome)
        self.logger.info(
            "Cart operation failed",
            operation=operation.name,
            code=error.code.value,
            status=error.http_status,
            request_id=error.request_id,
        )
        return MutationOutcome.failure(error)
