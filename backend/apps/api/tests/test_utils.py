import unittest

from rest_framework import status

from apps.api.utils import error_response, structured_error_response, success_response
from apps.commerce.errors import ErrorCode, StructuredError


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "missing", {"handle": "tee"})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(resp.data["ok"])
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.data["error"]["details"], {"handle": "tee"})

    def test_upstream_codes_map_to_bad_gateway(self):
        resp = error_response("UPSTREAM_ERROR", "Failed to fetch cart")
        self.assertEqual(resp.status_code, status.HTTP_502_BAD_GATEWAY)

    def test_custom_status_override(self):
        resp = error_response("UNKNOWN", "oops", http_status=status.HTTP_409_CONFLICT)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.data["error"]["message"], "oops")

    def test_optional_fields_are_omitted(self):
        resp = error_response("user_error", "Sold out")
        self.assertEqual(resp.data, {"ok": False, "error": {"code": "USER_ERROR", "message": "Sold out"}})

    def test_request_id_and_headers(self):
        resp = error_response("DISABLED", "Off", request_id="req-9", headers={"Retry-After": 5})
        self.assertEqual(resp.data["error"], {"code": "DISABLED", "message": "Off", "requestId": "req-9"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp["Retry-After"], "5")

    def test_rejects_blank_code_and_message(self):
        with self.assertRaises(ValueError):
            error_response(" ", "message")
        with self.assertRaises(ValueError):
            error_response("CODE", "")
        with self.assertRaises(TypeError):
            error_response(400, "message")


class EnvelopeTests(unittest.TestCase):
    def test_success_response_envelope(self):
        resp = success_response({"cart": None}, status.HTTP_201_CREATED, headers={"Cache-Control": "no-store"})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.data, {"ok": True, "cart": None})
        self.assertEqual(resp["Cache-Control"], "no-store")

    def test_structured_error_response_uses_error_status(self):
        error = StructuredError.of(ErrorCode.CART_NOT_FOUND, "Cart not found", "req-3")
        resp = structured_error_response(error)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(
            resp.data["error"],
            {"code": "CART_NOT_FOUND", "message": "Cart not found", "requestId": "req-3"},
        )
