"""Upstream node -> DTO mapping for catalog data.

Required fields are indexed directly; a missing one raises KeyError/TypeError
and is reported by the repository as a malformed upstream payload.
"""
from typing import Any, Iterable, List, Mapping, Optional

from .dtos import (
    CollectionDTO,
    ImageDTO,
    MoneyDTO,
    ProductDTO,
    ProductRefDTO,
    ProductVariantDTO,
)

Node = Mapping[str, Any]


def edges_to_nodes(connection: Node) -> List[Node]:
    return [edge["node"] for edge in connection["edges"]]


class MoneyMapper:
    @staticmethod
    def to_dto(node: Node) -> MoneyDTO:
        return MoneyDTO(amount=str(node["amount"]), currency_code=node["currencyCode"])


class ImageMapper:
    @staticmethod
    def to_dto(node: Optional[Node]) -> Optional[ImageDTO]:
        if not node:
            return None
        return ImageDTO(url=node["url"], alt_text=node.get("altText"))


class VariantMapper:
    @staticmethod
    def to_dto(node: Node) -> ProductVariantDTO:
        product = node.get("product")
        return ProductVariantDTO(
            id=node["id"],
            title=node["title"],
            # Cart merchandise may omit availability; treat it as purchasable.
            available_for_sale=bool(node.get("availableForSale", True)),
            price=MoneyMapper.to_dto(node["price"]),
            product=(
                ProductRefDTO(id=product["id"], handle=product["handle"], title=product["title"])
                if product
                else None
            ),
        )


class ProductMapper:
    @staticmethod
    def to_dto(node: Node) -> ProductDTO:
        return ProductDTO(
            id=node["id"],
            handle=node["handle"],
            title=node["title"],
            description=node.get("description") or "",
            min_price=MoneyMapper.to_dto(node["priceRange"]["minVariantPrice"]),
            variants=[VariantMapper.to_dto(v) for v in edges_to_nodes(node["variants"])],
            featured_image=ImageMapper.to_dto(node.get("featuredImage")),
        )

    @staticmethod
    def many_to_dto(nodes: Iterable[Node]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(n) for n in nodes]


class CollectionMapper:
    @staticmethod
    def to_dto(node: Node) -> CollectionDTO:
        products = node.get("products")
        return CollectionDTO(
            id=node["id"],
            handle=node["handle"],
            title=node["title"],
            description=node.get("description") or None,
            image=ImageMapper.to_dto(node.get("image")),
            products=(
                ProductMapper.many_to_dto(edges_to_nodes(products))
                if products is not None
                else None
            ),
        )

    @staticmethod
    def many_to_dto(nodes: Iterable[Node]) -> List[CollectionDTO]:
        return [CollectionMapper.to_dto(n) for n in nodes]
