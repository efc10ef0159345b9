import json
import unittest

import httpx

from apps.commerce import operations
from apps.commerce.client import StorefrontClient
from apps.commerce.config import PRIVATE_TOKEN_HEADER, StorefrontConfig
from apps.commerce.outcomes import (
    GraphQLFailure,
    OperationPayload,
    TransportFailure,
)

CONFIG = StorefrontConfig(
    store_domain="shop.example.com",
    api_version="2025-01",
    token="secret",
    token_mode="private",
)


def make_client(handler):
    return StorefrontClient(CONFIG, transport=httpx.MockTransport(handler))


def json_handler(body, status=200, headers=None):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status, json=body, headers=headers or {})

    handler.seen = seen
    return handler


class StorefrontClientRequestTests(unittest.TestCase):
    def test_posts_query_and_variables_with_token(self):
        handler = json_handler({"data": {"cart": None}})
        client = make_client(handler)
        client.execute(operations.GET_CART, {"id": "gid://shopify/Cart/1"})
        request = handler.seen[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(
            str(request.url), "https://shop.example.com/api/2025-01/graphql.json"
        )
        self.assertEqual(request.headers[PRIVATE_TOKEN_HEADER], "secret")
        body = json.loads(request.content)
        self.assertEqual(body["variables"], {"id": "gid://shopify/Cart/1"})
        self.assertIn("query CartQuery", body["query"])

    def test_omits_empty_variables(self):
        handler = json_handler({"data": {"shop": {"name": "Demo"}}})
        make_client(handler).execute(operations.SHOP_HEALTH)
        self.assertNotIn("variables", json.loads(handler.seen[0].content))


class StorefrontClientOutcomeTests(unittest.TestCase):
    def test_connection_error_is_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        outcome = make_client(handler).execute(operations.GET_CART, {"id": "c1"})
        self.assertIsInstance(outcome, TransportFailure)
        self.assertEqual(outcome.message, "Storefront request failed: ConnectError")

    def test_non_json_body_is_transport_failure(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad gateway</html>")

        outcome = make_client(handler).execute(operations.GET_CART, {"id": "c1"})
        self.assertIsInstance(outcome, TransportFailure)
        self.assertEqual(outcome.status, 502)

    def test_http_error_status_is_graphql_failure(self):
        handler = json_handler({"errors": [{"message": "Unauthorized"}]}, status=401)
        outcome = make_client(handler).execute(operations.GET_CART, {"id": "c1"})
        self.assertIsInstance(outcome, GraphQLFailure)
        self.assertEqual(outcome.status, 401)
        self.assertEqual(outcome.errors[0].message, "Unauthorized")

    def test_errors_without_root_are_graphql_failure(self):
        handler = json_handler(
            {"errors": [{"message": "Cart not found", "extensions": {"code": "CART_NOT_FOUND"}}]},
            headers={"X-Request-Id": "abc-123"},
        )
        outcome = make_client(handler).execute(operations.GET_CART, {"id": "c1"})
        self.assertIsInstance(outcome, GraphQLFailure)
        self.assertEqual(outcome.errors[0].code, "CART_NOT_FOUND")
        self.assertEqual(outcome.request_id, "abc-123")

    def test_query_root_is_result(self):
        handler = json_handler({"data": {"shop": {"name": "Demo"}}})
        outcome = make_client(handler).execute(operations.SHOP_HEALTH)
        self.assertIsInstance(outcome, OperationPayload)
        self.assertEqual(outcome.result, {"name": "Demo"})
        self.assertTrue(outcome.succeeded)

    def test_null_query_root_without_errors_is_empty_payload(self):
        handler = json_handler({"data": {"cart": None}})
        outcome = make_client(handler).execute(operations.GET_CART, {"id": "c1"})
        self.assertIsInstance(outcome, OperationPayload)
        self.assertIsNone(outcome.result)

    def test_mutation_user_errors(self):
        handler = json_handler(
            {
                "data": {
                    "cartLinesAdd": {
                        "cart": None,
                        "userErrors": [
                            {"code": "INVALID", "field": ["lines", "0"], "message": "Bad line"}
                        ],
                    }
                }
            }
        )
        outcome = make_client(handler).execute(
            operations.CART_LINES_ADD, {"cartId": "c1", "lines": []}
        )
        self.assertIsInstance(outcome, OperationPayload)
        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.user_errors[0].code, "INVALID")
        self.assertEqual(outcome.user_errors[0].message, "Bad line")

    def test_missing_root_without_errors_is_graphql_failure(self):
        handler = json_handler({"data": {}})
        outcome = make_client(handler).execute(operations.CART_CREATE, {"input": {}})
        self.assertIsInstance(outcome, GraphQLFailure)
        self.assertEqual(outcome.errors, ())
