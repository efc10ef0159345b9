from typing import Any, Mapping, Optional

from apps.catalog.mappers import MoneyMapper, VariantMapper, edges_to_nodes
from .dtos import CartDTO, CartLineDTO


class CartLineMapper:
    def __init__(self, variant_mapper: Optional[VariantMapper] = None) -> None:
        self.variant_mapper = variant_mapper or VariantMapper()

    def to_dto(self, node: Mapping[str, Any]) -> CartLineDTO:
        return CartLineDTO(
            id=node["id"],
            quantity=int(node["quantity"]),
            subtotal=MoneyMapper.to_dto(node["cost"]["subtotalAmount"]),
            merchandise=self.variant_mapper.to_dto(node["merchandise"]),
        )


class CartMapper:
    def __init__(self, line_mapper: Optional[CartLineMapper] = None) -> None:
        self.line_mapper = line_mapper or CartLineMapper()

    def to_dto(self, node: Mapping[str, Any]) -> CartDTO:
        cost = node["cost"]
        return CartDTO(
            id=node["id"],
            checkout_url=node["checkoutUrl"],
            total_quantity=int(node["totalQuantity"]),
            subtotal=MoneyMapper.to_dto(cost["subtotalAmount"]),
            total=MoneyMapper.to_dto(cost["totalAmount"]),
            lines=[self.line_mapper.to_dto(n) for n in edges_to_nodes(node["lines"])],
        )
