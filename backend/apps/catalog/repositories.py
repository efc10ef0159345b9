from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from apps.common import get_logger
from apps.commerce import operations
from apps.commerce.errors import ErrorCode, StructuredError, classify
from apps.commerce.operations import Operation
from apps.commerce.outcomes import OperationPayload
from apps.commerce.protocols import StorefrontExecutorProtocol
from .dtos import CollectionDTO, ProductDTO
from .mappers import CollectionMapper, ProductMapper, edges_to_nodes

logger = get_logger(__name__).bind(component="catalog", layer="repository")

T = TypeVar("T")
Result = Tuple[Optional[T], Optional[StructuredError]]


class CatalogRepository:
    """Read-only product and collection lookups against the Storefront API."""

    def __init__(self, client: StorefrontExecutorProtocol):
        self.client = client
        self.logger = logger.bind(repository="CatalogRepository")

    def list_products(self, first: int) -> Result[List[ProductDTO]]:
        return self._query(
            operations.GET_PRODUCTS,
            {"first": first},
            lambda root: ProductMapper.many_to_dto(edges_to_nodes(root)),
        )

    def get_product(self, handle: str) -> Result[ProductDTO]:
        return self._query(
            operations.GET_PRODUCT_BY_HANDLE, {"handle": handle}, ProductMapper.to_dto
        )

    def list_collections(self, first: int) -> Result[List[CollectionDTO]]:
        return self._query(
            operations.GET_COLLECTIONS,
            {"first": first},
            lambda root: CollectionMapper.many_to_dto(edges_to_nodes(root)),
        )

    def get_collection(self, handle: str, products_first: int) -> Result[CollectionDTO]:
        return self._query(
            operations.GET_COLLECTION_BY_HANDLE,
            {"handle": handle, "productsFirst": products_first},
            CollectionMapper.to_dto,
        )

    def _query(
        self,
        operation: Operation,
        variables: Dict[str, Any],
        mapper: Callable[[Any], T],
    ) -> Result[T]:
        outcome = self.client.execute(operation, variables)
        if not isinstance(outcome, OperationPayload):
            error = classify(outcome)
            self.logger.info(
                "Catalog query failed",
                operation=operation.name,
                code=error.code.value,
                request_id=error.request_id,
            )
            return None, error
        if outcome.result is None:
            return None, None
        try:
            return mapper(outcome.result), None
        except (KeyError, TypeError, ValueError) as exc:
            self.logger.error(
                "Malformed catalog payload",
                operation=operation.name,
                error=str(exc),
                request_id=outcome.request_id,
            )
            return None, StructuredError.of(
                ErrorCode.UPSTREAM_ERROR, operation.fallback_message, outcome.request_id
            )
