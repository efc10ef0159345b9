import unittest
from unittest.mock import patch

from django.test import override_settings
from rest_framework.test import APIRequestFactory

from apps.commerce.outcomes import GraphQLFailure, OperationPayload, TransportFailure
from apps.commerce.views import DISABLED_MESSAGE, StorefrontHealthView


class StubClient:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def execute(self, operation, variables=None):
        self.calls.append(operation.name)
        return self.outcome


class StorefrontHealthViewTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def call(self, client):
        with patch.object(StorefrontHealthView, "client", client):
            return StorefrontHealthView.as_view()(self.factory.get("/api/storefront/health"))

    @override_settings(STOREFRONT_DEBUG_ENDPOINT=False)
    def test_disabled_by_default(self):
        client = StubClient(None)
        response = self.call(client)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(
            response.data,
            {"ok": False, "error": {"code": "DISABLED", "message": DISABLED_MESSAGE}},
        )
        self.assertEqual(client.calls, [])

    @override_settings(STOREFRONT_DEBUG_ENDPOINT=True)
    def test_reports_shop_name(self):
        client = StubClient(OperationPayload("shopHealth", 200, result={"name": "Demo Shop"}))
        response = self.call(client)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {"ok": True, "shop": {"name": "Demo Shop"}})
        self.assertEqual(client.calls, ["shopHealth"])

    @override_settings(STOREFRONT_DEBUG_ENDPOINT=True)
    def test_missing_shop_is_upstream_error(self):
        response = self.call(StubClient(OperationPayload("shopHealth", 200, result=None)))
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data["error"]["code"], "UPSTREAM_ERROR")
        self.assertEqual(response.data["error"]["message"], "Storefront API returned no shop data")

    @override_settings(STOREFRONT_DEBUG_ENDPOINT=True)
    def test_transport_failure(self):
        response = self.call(StubClient(TransportFailure("shopHealth", "Storefront request failed: ConnectError")))
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data["error"]["code"], "UPSTREAM_UNAVAILABLE")

    @override_settings(STOREFRONT_DEBUG_ENDPOINT=True)
    def test_http_error_keeps_request_id(self):
        response = self.call(StubClient(GraphQLFailure("shopHealth", 401, request_id="req-5")))
        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.data["error"]["requestId"], "req-5")
