from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class MoneyDTO:
    amount: str
    currency_code: str


@dataclass(frozen=True)
class ImageDTO:
    url: str
    alt_text: Optional[str] = None


@dataclass(frozen=True)
class ProductRefDTO:
    id: str
    handle: str
    title: str


@dataclass(frozen=True)
class ProductVariantDTO:
    id: str
    title: str
    available_for_sale: bool
    price: MoneyDTO
    product: Optional[ProductRefDTO] = None


@dataclass(frozen=True)
class ProductDTO:
    id: str
    handle: str
    title: str
    description: str
    min_price: MoneyDTO
    variants: List[ProductVariantDTO] = field(default_factory=list)
    featured_image: Optional[ImageDTO] = None


@dataclass(frozen=True)
class CollectionDTO:
    id: str
    handle: str
    title: str
    description: Optional[str] = None
    image: Optional[ImageDTO] = None
    products: Optional[List[ProductDTO]] = None
