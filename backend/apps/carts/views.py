from typing import Optional

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer
from apps.api.utils import structured_error_response, success_response
from apps.common import get_logger
from .commands import CartLineAddCommand, CartLineRemoveCommand, CartLineUpdateCommand
from .container import get_cart_service
from .dtos import MutationOutcome
from .serializers import (
    CartAddSerializer,
    CartReadSerializer,
    CartRemoveSerializer,
    CartUpdateSerializer,
)
from .services import CartService

logger = get_logger(__name__).bind(component="carts", layer="view")

CACHE_CONTROL = "private, no-store"
REQUEST_ID_HEADER = "X-Request-Id"
LINE_MUTATION_DESCRIPTION = (
    "Requires an existing session cart. Without a cart cookie the response is "
    "CART_NOT_FOUND 404 (\"No cart to update\") and no upstream call is made. When "
    "the upstream no longer knows the cart, the cookie is cleared and CART_NOT_FOUND "
    "404 is returned; the cart is not recreated because line ids belong to the old cart."
)

CartResponseSerializer = inline_serializer(
    name="CartResponse",
    fields={
        "ok": serializers.BooleanField(),
        "cart": CartReadSerializer(allow_null=True),
    },
)
CART_ERRORS = {
    400: OpenApiResponse(response=ErrorResponseSerializer),
    404: OpenApiResponse(response=ErrorResponseSerializer),
    502: OpenApiResponse(response=ErrorResponseSerializer),
}


def render_outcome(outcome: MutationOutcome, http_status: int = status.HTTP_200_OK) -> Response:
    if not outcome.ok:
        return structured_error_response(outcome.error)
    cart = CartReadSerializer(outcome.cart).data if outcome.cart is not None else None
    return success_response({"cart": cart}, http_status)


class CartBaseView(APIView):
    permission_classes = [AllowAny]
    service: Optional[CartService] = None

    def get_service(self) -> CartService:
        return self.service or get_cart_service()

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)
        response["Cache-Control"] = CACHE_CONTROL
        return response

    def respond(self, session, outcome: MutationOutcome, http_status: int) -> Response:
        response = render_outcome(outcome, http_status)
        self.get_service().close_session(session, response)
        return response


@extend_schema(tags=["Cart"])
class CartView(CartBaseView):
    log = logger.bind(view="CartView")

    @extend_schema(
        summary="Get the session cart",
        description="Returns cart null when the session has no cart or the cart expired upstream.",
        responses={200: CartResponseSerializer, **CART_ERRORS},
    )
    def get(self, request):
        service = self.get_service()
        session = service.open_session(request)
        outcome = service.get_cart(session)
        http_status = status.HTTP_200_OK if outcome.ok else outcome.error.http_status
        return self.respond(session, outcome, http_status)


@extend_schema(tags=["Cart"])
class CartAddView(CartBaseView):
    log = logger.bind(view="CartAddView")

    @extend_schema(
        summary="Add a line to the session cart",
        description=(
            "Creates the cart when the session has none, and transparently recreates it once "
            "when the upstream no longer knows it. Requests repeating an X-Request-Id within "
            "the replay window receive the first response verbatim."
        ),
        parameters=[
            OpenApiParameter(
                name=REQUEST_ID_HEADER,
                description="Idempotency key for duplicate submissions",
                required=False,
                type=str,
                location=OpenApiParameter.HEADER,
            )
        ],
        request=CartAddSerializer,
        responses={200: CartResponseSerializer, 201: CartResponseSerializer, **CART_ERRORS},
    )
    def post(self, request):
        service = self.get_service()
        key = (request.headers.get(REQUEST_ID_HEADER) or "").strip() or None
        if key:
            entry = service.replay.lookup(key)
            if entry is not None:
                self.log.info("Replayed cart add", request_id=key, status=entry.status)
                return render_outcome(entry.outcome, entry.status)
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartLineAddCommand.from_validated(serializer.validated_data)
        session = service.open_session(request)
        result = service.add_line(session, command, idempotency_key=key)
        if result.replayed:
            return render_outcome(result.outcome, result.status)
        self.log.info(
            "Cart add handled",
            ok=result.outcome.ok,
            status=result.status,
            request_id=key,
        )
        return self.respond(session, result.outcome, result.status)


@extend_schema(tags=["Cart"])
class CartUpdateView(CartBaseView):
    log = logger.bind(view="CartUpdateView")

    @extend_schema(
        summary="Change the quantity of a cart line",
        description=LINE_MUTATION_DESCRIPTION,
        request=CartUpdateSerializer,
        responses={200: CartResponseSerializer, **CART_ERRORS},
    )
    def post(self, request):
        serializer = CartUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartLineUpdateCommand.from_validated(serializer.validated_data)
        service = self.get_service()
        session = service.open_session(request)
        outcome, http_status = service.update_line(session, command)
        return self.respond(session, outcome, http_status)


@extend_schema(tags=["Cart"])
class CartRemoveView(CartBaseView):
    log = logger.bind(view="CartRemoveView")

    @extend_schema(
        summary="Remove a cart line",
        description=LINE_MUTATION_DESCRIPTION,
        request=CartRemoveSerializer,
        responses={200: CartResponseSerializer, **CART_ERRORS},
    )
    def post(self, request):
        serializer = CartRemoveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        command = CartLineRemoveCommand.from_validated(serializer.validated_data)
        service = self.get_service()
        session = service.open_session(request)
        outcome, http_status = service.remove_line(session, command)
        return self.respond(session, outcome, http_status)


@extend_schema(tags=["Cart"])
class CartClearView(CartBaseView):
    log = logger.bind(view="CartClearView")

    @extend_schema(
        summary="Forget the session cart",
        request=None,
        responses={200: CartResponseSerializer},
    )
    def post(self, request):
        service = self.get_service()
        session = service.open_session(request)
        outcome = service.clear_cart(session)
        self.log.info("Cart cleared")
        return self.respond(session, outcome, status.HTTP_200_OK)
