from typing import Optional

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.exceptions import ApplicationError
from apps.api.utils import success_response
from apps.common import get_logger
from .container import get_catalog_service
from .serializers import (
    CollectionDetailQuerySerializer,
    CollectionReadSerializer,
    ProductListQuerySerializer,
    ProductReadSerializer,
)
from .services import CatalogService

logger = get_logger(__name__).bind(component="catalog", layer="view")

FIRST_PARAMETER = OpenApiParameter(
    name="first",
    description="Number of items to return (1-100, default 20)",
    required=False,
    type=int,
)
UPSTREAM_ERRORS = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    502: OpenApiResponse(response=ErrorResponseSerializer),
}


class CatalogView(APIView):
    permission_classes = [AllowAny]
    service: Optional[CatalogService] = None

    def get_service(self) -> CatalogService:
        return self.service or get_catalog_service()


@extend_schema(tags=["Catalog"])
class ProductListView(CatalogView):
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Cached results may be served.",
        parameters=[FIRST_PARAMETER],
        responses={
            200: inline_serializer(
                name="ProductListResponse",
                fields={
                    "ok": serializers.BooleanField(),
                    "products": ProductReadSerializer(many=True),
                },
            ),
            **UPSTREAM_ERRORS,
        },
    )
    def get(self, request):
        query = ProductListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        first = query.validated_data["first"]
        self.log.debug("Handling product list request", first=first)
        products, error = self.get_service().list_products(first)
        if error:
            raise ApplicationError.from_structured(error)
        return success_response({"products": ProductReadSerializer(products, many=True).data})


@extend_schema(tags=["Catalog"])
class ProductDetailView(CatalogView):
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        summary="Get product by handle",
        parameters=[OpenApiParameter("handle", str, OpenApiParameter.PATH)],
        responses={
            200: inline_serializer(
                name="ProductDetailResponse",
                fields={"ok": serializers.BooleanField(), "product": ProductReadSerializer()},
            ),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **UPSTREAM_ERRORS,
        },
    )
    def get(self, request, handle: str):
        product, error = self.get_service().get_product(handle)
        if error:
            raise ApplicationError.from_structured(error)
        if product is None:
            self.log.info("Product not found", handle=handle)
            raise ApplicationError("NOT_FOUND", "Product not found", details={"handle": handle})
        return success_response({"product": ProductReadSerializer(product).data})


@extend_schema(tags=["Catalog"])
class CollectionListView(CatalogView):
    log = logger.bind(view="CollectionListView")

    @extend_schema(
        operation_id="collections_list",
        summary="List collections",
        parameters=[FIRST_PARAMETER],
        responses={
            200: inline_serializer(
                name="CollectionListResponse",
                fields={
                    "ok": serializers.BooleanField(),
                    "collections": CollectionReadSerializer(many=True),
                },
            ),
            **UPSTREAM_ERRORS,
        },
    )
    def get(self, request):
        query = ProductListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        collections, error = self.get_service().list_collections(query.validated_data["first"])
        if error:
            raise ApplicationError.from_structured(error)
        return success_response(
            {"collections": CollectionReadSerializer(collections, many=True).data}
        )


@extend_schema(tags=["Catalog"])
class CollectionDetailView(CatalogView):
    log = logger.bind(view="CollectionDetailView")

    @extend_schema(
        summary="Get collection with its products",
        parameters=[
            OpenApiParameter("handle", str, OpenApiParameter.PATH),
            OpenApiParameter(
                name="productsFirst",
                description="Number of products to include (1-100, default 50)",
                required=False,
                type=int,
            ),
        ],
        responses={
            200: inline_serializer(
                name="CollectionDetailResponse",
                fields={
                    "ok": serializers.BooleanField(),
                    "collection": CollectionReadSerializer(),
                },
            ),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **UPSTREAM_ERRORS,
        },
    )
    def get(self, request, handle: str):
        query = CollectionDetailQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        collection, error = self.get_service().get_collection(
            handle, query.validated_data["productsFirst"]
        )
        if error:
            raise ApplicationError.from_structured(error)
        if collection is None:
            self.log.info("Collection not found", handle=handle)
            raise ApplicationError("NOT_FOUND", "Collection not found", details={"handle": handle})
        return success_response({"collection": CollectionReadSerializer(collection).data})
