from dataclasses import dataclass, field
from typing import List, Optional

from apps.catalog.dtos import MoneyDTO, ProductVariantDTO
from apps.commerce.errors import StructuredError


@dataclass(frozen=True)
class CartLineDTO:
    id: str
    quantity: int
    subtotal: MoneyDTO
    merchandise: ProductVariantDTO


@dataclass(frozen=True)
class CartDTO:
    """Read-only projection of the upstream cart. Totals are never recomputed."""

    id: str
    checkout_url: str
    total_quantity: int
    subtotal: MoneyDTO
    total: MoneyDTO
    lines: List[CartLineDTO] = field(default_factory=list)


@dataclass(frozen=True)
class MutationOutcome:
    ok: bool
    cart: Optional[CartDTO] = None
    error: Optional[StructuredError] = None

    @classmethod
    def success(cls, cart: Optional[CartDTO]) -> "MutationOutcome":
        return cls(ok=True, cart=cart)

    @classmethod
    def failure(cls, error: StructuredError) -> "MutationOutcome":
        return cls(ok=False, error=error)
