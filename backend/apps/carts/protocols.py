from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO, MutationOutcome


class CartRepositoryProtocol(Protocol):
    def fetch(self, cart_id: str) -> "MutationOutcome":
        ...

    def create(self) -> "MutationOutcome":
        ...

    def add_lines(self, cart_id: str, lines: Iterable[Mapping[str, Any]]) -> "MutationOutcome":
        ...

    def update_lines(self, cart_id: str, lines: Iterable[Mapping[str, Any]]) -> "MutationOutcome":
        ...

    def remove_lines(self, cart_id: str, line_ids: Iterable[str]) -> "MutationOutcome":
        ...


class CartMapperProtocol(Protocol):
    def to_dto(self, node: Mapping[str, Any]) -> "CartDTO":
        ...
