"""Resolve-or-create and retry-once-after-recreate around one cart mutation.

    RESOLVING --identity--> ATTEMPTING
    RESOLVING --none------> CREATING --ok--> ATTEMPTING
    ATTEMPTING --ok-------> SUCCEEDED            (identity committed)
    ATTEMPTING --stale----> RECOVERING --> CREATING --> ATTEMPTING
    anything else ------->  FAILED               (error propagated untouched)

A request passes through RECOVERING at most once; a second stale result
after the retry is terminal.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from apps.common import get_logger
from apps.commerce.errors import ErrorCode, StructuredError
from .dtos import MutationOutcome
from .identity import CartIdentityStore, CartSession
from .protocols import CartRepositoryProtocol

logger = get_logger(__name__).bind(component="carts", layer="recovery")

NO_CART_MESSAGE = "No cart to update"


class RecoveryState(str, enum.Enum):
    RESOLVING = "RESOLVING"
    CREATING = "CREATING"
    ATTEMPTING = "ATTEMPTING"
    RECOVERING = "RECOVERING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class MutationPlan:
    name: str
    attempt: Callable[[str], MutationOutcome]
    recreate_on_stale: bool = True
    requires_existing_cart: bool = False


@dataclass
class RecoveryTrace:
    states: List[RecoveryState] = field(default_factory=list)

    def enter(self, state: RecoveryState) -> None:
        self.states.append(state)

    @property
    def final(self) -> Optional[RecoveryState]:
        return self.states[-1] if self.states else None

    @property
    def recovered(self) -> bool:
        return RecoveryState.RECOVERING in self.states


@dataclass(frozen=True)
class RecoveryResult:
    outcome: MutationOutcome
    created_cart: bool
    trace: RecoveryTrace


class StaleCartRecoveryPolicy:
    def __init__(self, carts: CartRepositoryProtocol, identity: CartIdentityStore):
        self.carts = carts
        self.identity = identity
        self.logger = logger.bind(policy="StaleCartRecoveryPolicy")

    def run(self, session: CartSession, plan: MutationPlan) -> RecoveryResult:
        trace = RecoveryTrace()
        log = self.logger.bind(mutation=plan.name)
        trace.enter(RecoveryState.RESOLVING)
        cart_id = self.identity.resolve(session)
        created = False
        retried = False

        if cart_id is None:
            if plan.requires_existing_cart:
                log.debug("No cart identity for mutation")
                missing = StructuredError.of(ErrorCode.CART_NOT_FOUND, NO_CART_MESSAGE)
                return self._fail(trace, MutationOutcome.failure(missing), created)
            creation = self._create(trace)
            if not creation.ok:
                return self._fail(trace, creation, created)
            cart_id = creation.cart.id
            created = True

        while True:
            trace.enter(RecoveryState.ATTEMPTING)
            outcome = plan.attempt(cart_id)
            if outcome.ok:
                confirmed_id = outcome.cart.id if outcome.cart else cart_id
                self.identity.commit(session, confirmed_id)
                trace.enter(RecoveryState.SUCCEEDED)
                log.info(
                    "Cart mutation succeeded",
                    cart_id=confirmed_id,
                    created=created,
                    recovered=trace.recovered,
                )
                return RecoveryResult(outcome, created, trace)

            if not outcome.error.is_cart_not_found:
                return self._fail(trace, outcome, created)

            # Stale identity: never keep pointing the session at it.
            self.identity.clear(session)
            if retried or not plan.recreate_on_stale:
                log.warning(
                    "Cart not found, giving up",
                    cart_id=cart_id,
                    retried=retried,
                )
                return self._fail(trace, outcome, created)

            retried = True
            trace.enter(RecoveryState.RECOVERING)
            log.warning("Cart not found upstream, recreating", stale_cart_id=cart_id)
            creation = self._create(trace)
            if not creation.ok:
                return self._fail(trace, creation, created)
            cart_id = creation.cart.id
            created = True

    def _create(self, trace: RecoveryTrace) -> MutationOutcome:
        trace.enter(RecoveryState.CREATING)
        outcome = self.carts.create()
        if outcome.ok and outcome.cart is None:
            return MutationOutcome.failure(
                StructuredError.of(ErrorCode.UPSTREAM_ERROR, "Failed to create cart")
            )
        return outcome

    def _fail(
        self, trace: RecoveryTrace, outcome: MutationOutcome, created: bool
    ) -> RecoveryResult:
        trace.enter(RecoveryState.FAILED)
        self.logger.info(
            "Cart mutation failed",
            code=outcome.error.code.value,
            status=outcome.error.http_status,
            states=",".join(s.value for s in trace.states),
        )
        return RecoveryResult(outcome, created, trace)
