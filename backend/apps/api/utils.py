from collections.abc import Mapping
from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.serializers import as_serializer_error

from apps.commerce.errors import HTTP_STATUS_BY_CODE, StructuredError

DEFAULT_ERROR_STATUS = status.HTTP_400_BAD_REQUEST

ERROR_STATUS_MAP = {
    **{code.value: http_status for code, http_status in HTTP_STATUS_BY_CODE.items()},
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SERVER_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "METHOD_NOT_ALLOWED": status.HTTP_405_METHOD_NOT_ALLOWED,
    "UNSUPPORTED_MEDIA_TYPE": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    "SERVICE_UNAVAILABLE": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _normalize_details(details: Any) -> Any:
    if isinstance(details, ValidationError):
        return as_serializer_error(details)
    if isinstance(details, Mapping):
        return dict(details)
    if isinstance(details, Exception):
        return {"type": details.__class__.__name__}
    return details


def success_response(
    payload: Mapping[str, Any],
    http_status: int = status.HTTP_200_OK,
    *,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """Wrap ``payload`` in the ``{"ok": true, ...}`` envelope."""
    body: Dict[str, Any] = {"ok": True}
    body.update(payload)
    return Response(body, status=http_status, headers=dict(headers) if headers else None)


def error_response(
    code: str,
    message: str,
    details: Optional[Any] = None,
    http_status: Optional[int] = None,
    *,
    request_id: Optional[str] = None,
    headers: Optional[Mapping[str, str]] = None,
) -> Response:
    """
    Return a consistently structured error response for API endpoints.

    The body is ``{"ok": false, "error": {"code", "message", "requestId"?,
    "details"?}}``.

    Args:
        code: Machine-readable error identifier.
        message: Human-readable explanation of the error.
        details: Optional context, e.g. validation errors or exception details.
        http_status: Explicit HTTP status code to override the default mapping.
        request_id: Upstream request id to surface for support lookups.
        headers: Optional response headers to include alongside the payload.
    """

    if not isinstance(code, str):
        raise TypeError("error_response requires code to be a string")
    if not isinstance(message, str):
        raise TypeError("error_response requires message to be a string")

    code = code.strip()
    message = message.strip()

    if not code:
        raise ValueError("error_response requires a non-empty code")
    if not message:
        raise ValueError("error_response requires a non-empty message")

    normalized_code = code.upper()

    status_code = (
        int(http_status)
        if http_status is not None
        else ERROR_STATUS_MAP.get(normalized_code, DEFAULT_ERROR_STATUS)
    )

    if headers is not None and not isinstance(headers, Mapping):
        raise TypeError("error_response headers must be a mapping if provided")

    if not 100 <= status_code <= 599:
        raise ValueError("error_response status must be a valid HTTP status code")

    error: Dict[str, Any] = {"code": normalized_code, "message": message}
    if request_id:
        error["requestId"] = request_id
    if details is not None:
        error["details"] = _normalize_details(details)

    headers_dict = (
        {str(key): str(value) for key, value in headers.items()} if headers else None
    )

    return Response({"ok": False, "error": error}, status=status_code, headers=headers_dict)


def structured_error_response(
    error: StructuredError, *, headers: Optional[Mapping[str, str]] = None
) -> Response:
    return error_response(
        error.code.value,
        error.message,
        http_status=error.http_status,
        request_id=error.request_id,
        headers=headers,
    )
