from typing import Optional

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.exceptions import ApplicationError
from apps.api.utils import success_response
from apps.common import get_logger
from . import operations
from .container import get_storefront_client
from .errors import ErrorCode, StructuredError, classify
from .outcomes import OperationPayload
from .protocols import StorefrontExecutorProtocol

logger = get_logger(__name__).bind(component="commerce", layer="view")

DISABLED_MESSAGE = (
    "Debug endpoint is disabled. Set STOREFRONT_DEBUG_ENDPOINT=true to enable."
)


@extend_schema(tags=["Diagnostics"])
class StorefrontHealthView(APIView):
    permission_classes = [AllowAny]
    client: Optional[StorefrontExecutorProtocol] = None
    log = logger.bind(view="StorefrontHealthView")

    def get_client(self) -> StorefrontExecutorProtocol:
        return self.client or get_storefront_client()

    @extend_schema(
        summary="Storefront connectivity check",
        description="Runs a minimal shop query. Disabled unless STOREFRONT_DEBUG_ENDPOINT is true.",
        responses={
            200: inline_serializer(
                name="StorefrontHealthResponse",
                fields={
                    "ok": serializers.BooleanField(),
                    "shop": inline_serializer(
                        name="StorefrontShop", fields={"name": serializers.CharField()}
                    ),
                },
            ),
            404: OpenApiResponse(response=ErrorResponseSerializer),
            502: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        if not getattr(settings, "STOREFRONT_DEBUG_ENDPOINT", False):
            self.log.debug("Storefront diagnostic requested while disabled")
            raise ApplicationError.from_structured(
                StructuredError.of(ErrorCode.DISABLED, DISABLED_MESSAGE)
            )
        outcome = self.get_client().execute(operations.SHOP_HEALTH)
        if isinstance(outcome, OperationPayload) and isinstance(outcome.result, dict):
            name = outcome.result.get("name")
            if name:
                self.log.info("Storefront reachable", shop=name, request_id=outcome.request_id)
                return success_response({"shop": {"name": name}})
        error = classify(outcome)
        self.log.warning("Storefront health check failed", code=error.code.value)
        raise ApplicationError.from_structured(error)
