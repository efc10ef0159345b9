from __future__ import annotations

from typing import Optional, Tuple

from rest_framework import status

from apps.common import get_logger
from .commands import CartLineAddCommand, CartLineRemoveCommand, CartLineUpdateCommand
from .dtos import MutationOutcome
from .identity import CartIdentityStore, CartSession
from .protocols import CartRepositoryProtocol
from .recovery import MutationPlan, StaleCartRecoveryPolicy
from .replay import ReplayResult, RequestReplayCache

logger = get_logger(__name__).bind(component="carts", layer="service")


class CartService:
    """Cart reads and mutations for one request-scoped ``CartSession``.

    Mutations return ``(outcome, http_status)``. The session records any
    identity change; the view writes it to the response exactly once.
    """

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        identity: CartIdentityStore,
        replay: RequestReplayCache,
        recovery: Optional[StaleCartRecoveryPolicy] = None,
    ):
        self.carts = carts
        self.identity = identity
        self.replay = replay
        self.recovery = recovery or StaleCartRecoveryPolicy(carts, identity)
        self.logger = logger.bind(service="CartService")

    def open_session(self, request) -> CartSession:
        return self.identity.open(request)

    def close_session(self, session: CartSession, response) -> None:
        self.identity.write(session, response)

    def get_cart(self, session: CartSession) -> MutationOutcome:
        cart_id = self.identity.resolve(session)
        if cart_id is None:
            return MutationOutcome.success(None)
        outcome = self.carts.fetch(cart_id)
        if outcome.ok and outcome.cart is None:
            self.logger.info("Cart vanished upstream", cart_id=cart_id)
            self.identity.clear(session)
            return outcome
        if not outcome.ok and outcome.error.is_cart_not_found:
            self.logger.info("Cart identity is stale", cart_id=cart_id)
            self.identity.clear(session)
            return MutationOutcome.success(None)
        return outcome

    def add_line(
        self,
        session: CartSession,
        command: CartLineAddCommand,
        idempotency_key: Optional[str] = None,
    ) -> ReplayResult:
        if not idempotency_key:
            outcome, http_status = self._add_line(session, command)
            return ReplayResult(outcome, http_status, False)
        return self.replay.execute(idempotency_key, lambda: self._add_line(session, command))

    def _add_line(
        self, session: CartSession, command: CartLineAddCommand
    ) -> Tuple[MutationOutcome, int]:
        self.logger.debug(
            "Adding cart line", merchandise_id=command.merchandise_id, quantity=command.quantity
        )
        result = self.recovery.run(
            session,
            MutationPlan(
                name="add",
                attempt=lambda cart_id: self.carts.add_lines(cart_id, [command.to_line_input()]),
                recreate_on_stale=True,
            ),
        )
        if not result.outcome.ok:
            return result.outcome, result.outcome.error.http_status
        http_status = status.HTTP_201_CREATED if result.created_cart else status.HTTP_200_OK
        return result.outcome, http_status

    def update_line(
        self, session: CartSession, command: CartLineUpdateCommand
    ) -> Tuple[MutationOutcome, int]:
        self.logger.debug("Updating cart line", line_id=command.line_id, quantity=command.quantity)
        result = self.recovery.run(
            session,
            MutationPlan(
                name="update",
                attempt=lambda cart_id: self.carts.update_lines(
                    cart_id, [command.to_line_input()]
                ),
                recreate_on_stale=False,
                requires_existing_cart=True,
            ),
        )
        return result.outcome, self._status_for(result.outcome)

    def remove_line(
        self, session: CartSession, command: CartLineRemoveCommand
    ) -> Tuple[MutationOutcome, int]:
        self.logger.debug("Removing cart line", line_id=command.line_id)
        result = self.recovery.run(
            session,
            MutationPlan(
                name="remove",
                attempt=lambda cart_id: self.carts.remove_lines(cart_id, [command.line_id]),
                recreate_on_stale=False,
                requires_existing_cart=True,
            ),
        )
        return result.outcome, self._status_for(result.outcome)

    def clear_cart(self, session: CartSession) -> MutationOutcome:
        """Forget the session's cart locally; the upstream cart is left to expire."""
        self.identity.clear(session)
        return MutationOutcome.success(None)

    @staticmethod
    def _status_for(outcome: MutationOutcome) -> int:
        return status.HTTP_200_OK if outcome.ok else outcome.error.http_status
