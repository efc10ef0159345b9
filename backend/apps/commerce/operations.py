from dataclasses import dataclass
from typing import Optional

from . import queries


@dataclass(frozen=True)
class Operation:
    """A named Storefront API call.

    ``root`` is the field under ``data`` that must be present for the payload
    to be usable. For mutations ``result_key`` names the node inside the root
    (``cart``); for queries the root value is the node itself.
    """

    name: str
    query: str
    root: str
    fallback_message: str
    result_key: Optional[str] = None
    user_errors_key: Optional[str] = None

    @property
    def is_mutation(self) -> bool:
        return self.user_errors_key is not None


def _cart_mutation(name: str, query: str, fallback_message: str) -> Operation:
    return Operation(
        name=name,
        query=query,
        root=name,
        fallback_message=fallback_message,
        result_key="cart",
        user_errors_key="userErrors",
    )


GET_CART = Operation(
    name="getCart",
    query=queries.CART_QUERY,
    root="cart",
    fallback_message="Failed to fetch cart",
)
CART_CREATE = _cart_mutation(
    "cartCreate", queries.CART_CREATE_MUTATION, "Failed to create cart"
)
CART_LINES_ADD = _cart_mutation(
    "cartLinesAdd", queries.CART_LINES_ADD_MUTATION, "Failed to add to cart"
)
CART_LINES_UPDATE = _cart_mutation(
    "cartLinesUpdate", queries.CART_LINES_UPDATE_MUTATION, "Failed to update cart line"
)
CART_LINES_REMOVE = _cart_mutation(
    "cartLinesRemove", queries.CART_LINES_REMOVE_MUTATION, "Failed to remove cart line"
)

GET_PRODUCTS = Operation(
    name="getProducts",
    query=queries.PRODUCT_LIST_QUERY,
    root="products",
    fallback_message="Failed to fetch products",
)
GET_PRODUCT_BY_HANDLE = Operation(
    name="getProductByHandle",
    query=queries.PRODUCT_BY_HANDLE_QUERY,
    root="product",
    fallback_message="Failed to fetch product",
)
GET_COLLECTIONS = Operation(
    name="getCollections",
    query=queries.COLLECTIONS_QUERY,
    root="collections",
    fallback_message="Failed to fetch collections",
)
GET_COLLECTION_BY_HANDLE = Operation(
    name="getCollectionByHandle",
    query=queries.COLLECTION_BY_HANDLE_QUERY,
    root="collection",
    fallback_message="Failed to fetch collection",
)
SHOP_HEALTH = Operation(
    name="shopHealth",
    query=queries.SHOP_HEALTH_QUERY,
    root="shop",
    fallback_message="Storefront API returned no shop data",
)

OPERATIONS = {
    op.name: op
    for op in (
        GET_CART,
        CART_CREATE,
        CART_LINES_ADD,
        CART_LINES_UPDATE,
        CART_LINES_REMOVE,
        GET_PRODUCTS,
        GET_PRODUCT_BY_HANDLE,
        GET_COLLECTIONS,
        GET_COLLECTION_BY_HANDLE,
        SHOP_HEALTH,
    )
}


def fallback_message(operation_name: str) -> str:
    op = OPERATIONS.get(operation_name)
    return op.fallback_message if op else "Storefront request failed"
