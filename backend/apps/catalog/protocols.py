from __future__ import annotations

from typing import Any, List, Optional, Protocol, Tuple

from apps.commerce.errors import StructuredError
from .dtos import CollectionDTO, ProductDTO


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        ...


class CatalogRepositoryProtocol(Protocol):
    def list_products(self, first: int) -> Tuple[Optional[List[ProductDTO]], Optional[StructuredError]]:
        ...

    def get_product(self, handle: str) -> Tuple[Optional[ProductDTO], Optional[StructuredError]]:
        ...

    def list_collections(
        self, first: int
    ) -> Tuple[Optional[List[CollectionDTO]], Optional[StructuredError]]:
        ...

    def get_collection(
        self, handle: str, products_first: int
    ) -> Tuple[Optional[CollectionDTO], Optional[StructuredError]]:
        ...
