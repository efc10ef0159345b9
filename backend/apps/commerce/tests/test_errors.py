import unittest

from apps.commerce.errors import (
    ErrorCode,
    HTTP_STATUS_BY_CODE,
    StructuredError,
    classify,
    detect_not_found,
    validation_error,
)
from apps.commerce.outcomes import (
    GraphQLError,
    GraphQLFailure,
    OperationPayload,
    TransportFailure,
    UserError,
)


class ClassifyTransportTests(unittest.TestCase):
    def test_transport_failure_is_upstream_unavailable(self):
        error = classify(TransportFailure("cartLinesAdd", "Storefront request failed: ConnectTimeout"))
        self.assertEqual(error.code, ErrorCode.UPSTREAM_UNAVAILABLE)
        self.assertEqual(error.http_status, 502)
        self.assertEqual(error.message, "Storefront request failed: ConnectTimeout")

    def test_transport_failure_keeps_request_id(self):
        error = classify(
            TransportFailure("getCart", "Failed to parse Storefront response as JSON", 200, "req-9")
        )
        self.assertEqual(error.request_id, "req-9")
        self.assertEqual(error.to_payload()["requestId"], "req-9")


class ClassifyGraphQLFailureTests(unittest.TestCase):
    def test_errors_are_joined(self):
        outcome = GraphQLFailure(
            "getCart", 200, (GraphQLError("Throttled"), GraphQLError("Try again later"))
        )
        error = classify(outcome)
        self.assertEqual(error.code, ErrorCode.UPSTREAM_ERROR)
        self.assertEqual(error.http_status, 502)
        self.assertEqual(error.message, "Throttled; Try again later")

    def test_non_success_status_without_errors_uses_operation_fallback(self):
        error = classify(GraphQLFailure("cartLinesUpdate", 500))
        self.assertEqual(error.code, ErrorCode.UPSTREAM_ERROR)
        self.assertEqual(error.message, "Failed to update cart line")

    def test_cart_not_found_message_maps_to_404(self):
        error = classify(GraphQLFailure("getCart", 200, (GraphQLError("Cart not found"),)))
        self.assertEqual(error.code, ErrorCode.CART_NOT_FOUND)
        self.assertEqual(error.http_status, 404)
        self.assertEqual(error.message, "Cart not found")

    def test_structured_code_on_graphql_error(self):
        error = classify(
            GraphQLFailure("getCart", 200, (GraphQLError("Something odd", code="CART_INVALID"),))
        )
        self.assertEqual(error.code, ErrorCode.CART_NOT_FOUND)


class ClassifyUserErrorTests(unittest.TestCase):
    def test_user_errors_are_400(self):
        outcome = OperationPayload(
            "cartLinesAdd",
            200,
            result=None,
            user_errors=(UserError("Quantity exceeds stock", code="INVALID", field=("lines",)),),
        )
        error = classify(outcome)
        self.assertEqual(error.code, ErrorCode.USER_ERROR)
        self.assertEqual(error.http_status, 400)
        self.assertEqual(error.message, "Quantity exceeds stock")

    def test_stale_cart_user_error_is_404(self):
        outcome = OperationPayload(
            "cartLinesAdd",
            200,
            user_errors=(UserError("The specified cart does not exist or couldn’t find it"),),
        )
        error = classify(outcome)
        self.assertEqual(error.code, ErrorCode.CART_NOT_FOUND)
        self.assertEqual(error.http_status, 404)

    def test_only_the_first_user_error_message_is_inspected(self):
        outcome = OperationPayload(
            "cartLinesAdd",
            200,
            user_errors=(
                UserError("Merchandise is out of stock"),
                UserError("Cart not found"),
            ),
        )
        error = classify(outcome)
        self.assertEqual(error.code, ErrorCode.USER_ERROR)
        self.assertEqual(error.message, "Merchandise is out of stock; Cart not found")

    def test_structured_code_on_any_user_error_is_authoritative(self):
        outcome = OperationPayload(
            "cartLinesRemove",
            200,
            user_errors=(
                UserError("Merchandise is out of stock"),
                UserError("gone", code="CART_NOT_FOUND"),
            ),
        )
        self.assertEqual(classify(outcome).code, ErrorCode.CART_NOT_FOUND)

    def test_graphql_messages_join_before_user_messages(self):
        outcome = OperationPayload(
            "cartLinesAdd",
            200,
            user_errors=(UserError("Invalid quantity"),),
            errors=(GraphQLError("Deprecated field"),),
        )
        self.assertEqual(classify(outcome).message, "Deprecated field; Invalid quantity")


class ClassifyMalformedSuccessTests(unittest.TestCase):
    def test_payload_without_data_or_errors(self):
        error = classify(OperationPayload("cartCreate", 200, result=None))
        self.assertEqual(error.code, ErrorCode.UPSTREAM_ERROR)
        self.assertEqual(error.http_status, 502)
        self.assertEqual(error.message, "Failed to create cart")


class NotFoundDetectionTests(unittest.TestCase):
    def test_structured_code_outranks_message_heuristic(self):
        errors = (GraphQLError("Cart invalid"), GraphQLError("x", code="CART_NOT_FOUND"))
        self.assertEqual(detect_not_found(errors, ()), "code:CART_NOT_FOUND")

    def test_message_heuristic(self):
        self.assertEqual(
            detect_not_found((GraphQLError("CART NOT FOUND"),), ()), "message:cart-missing"
        )

    def test_message_needs_cart_subject(self):
        self.assertIsNone(detect_not_found((GraphQLError("Product not found"),), ()))

    def test_unrelated_code_does_not_match(self):
        self.assertIsNone(
            detect_not_found((), (UserError("Bad quantity", code="INVALID"),))
        )

    def test_classify_is_deterministic(self):
        outcome = OperationPayload(
            "cartLinesAdd", 200, user_errors=(UserError("Cart is invalid"),), request_id="r1"
        )
        results = {classify(outcome) for _ in range(5)}
        self.assertEqual(len(results), 1)
        self.assertEqual(
            results.pop(),
            StructuredError(ErrorCode.CART_NOT_FOUND, "Cart is invalid", 404, "r1"),
        )


class StatusMappingTests(unittest.TestCase):
    def test_every_code_has_status(self):
        for code in ErrorCode:
            self.assertIn(code, HTTP_STATUS_BY_CODE)

    def test_validation_error(self):
        error = validation_error("quantity must be a positive integer")
        self.assertEqual(error.http_status, 400)
        self.assertEqual(
            error.to_payload(),
            {"code": "VALIDATION_ERROR", "message": "quantity must be a positive integer"},
        )
