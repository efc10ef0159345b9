from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import (
    MethodNotAllowed,
    NotFound,
    ParseError,
    UnsupportedMediaType,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from apps.api.utils import error_response
from apps.commerce.errors import StructuredError
from apps.common import get_logger

logger = get_logger(__name__).bind(component="api", layer="exception")

STATUS_CODE_DEFAULTS: Dict[int, Tuple[str, str]] = {
    status.HTTP_400_BAD_REQUEST: ("VALIDATION_ERROR", _("Validation failed")),
    status.HTTP_404_NOT_FOUND: ("NOT_FOUND", _("Resource not found")),
    status.HTTP_405_METHOD_NOT_ALLOWED: ("METHOD_NOT_ALLOWED", _("Method not allowed")),
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: (
        "UNSUPPORTED_MEDIA_TYPE",
        _("Unsupported media type"),
    ),
    status.HTTP_500_INTERNAL_SERVER_ERROR: (
        "SERVER_ERROR",
        _("Something went wrong"),
    ),
    status.HTTP_503_SERVICE_UNAVAILABLE: (
        "SERVICE_UNAVAILABLE",
        _("Service temporarily unavailable"),
    ),
}


class ApplicationError(Exception):
    """
    Domain-level application error meant to be raised from services or views.

    Args:
        code: Machine readable error code.
        message: Human readable explanation of the error.
        status_code: Optional explicit HTTP status. If omitted, code mapping is used.
        details: Optional structured details for clients.
        request_id: Optional upstream request id echoed to the client.
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        details: Optional[Any] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.request_id = request_id

    @classmethod
    def from_structured(cls, error: StructuredError, **kwargs: Any) -> "ApplicationError":
        return cls(
            error.code.value,
            error.message,
            status_code=error.http_status,
            request_id=error.request_id,
            **kwargs,
        )

    def to_response(self) -> Response:
        return error_response(
            self.code,
            self.message,
            self.details,
            http_status=self.status_code,
            request_id=self.request_id,
        )


def global_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """
    Central exception handler for DRF views returning structured JSON errors.
    """

    bound_logger = _bind_logger(context)

    if isinstance(exc, ApplicationError):
        bound_logger.info(
            "Handled application error",
            code=exc.code,
            status=exc.status_code,
        )
        return exc.to_response()

    if isinstance(exc, DjangoValidationError):
        exc = ValidationError(_normalize_django_validation_error(exc))

    response = drf_exception_handler(exc, context)
    if response is not None:
        return _from_drf_exception(exc, response, bound_logger)

    bound_logger.exception("Unhandled exception bubbled to global handler")
    return error_response(
        "SERVER_ERROR",
        "Something went wrong",
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _bind_logger(context: Dict[str, Any]):
    log = logger
    view = context.get("view")
    request = context.get("request")
    if view:
        view_name = getattr(view, "__class__", type(view)).__name__
        log = log.bind(view=view_name)
    if request is not None:
        log = log.bind(
            method=getattr(request, "method", None),
            path=getattr(request, "path", None),
        )
    return log


def _from_drf_exception(
    exc: Exception, response: Response, bound_logger
) -> Response:
    status_code = response.status_code
    payload = response.data
    code, message, details = _normalize_payload(exc, payload, status_code)
    headers = dict(response.headers) if getattr(response, "headers", None) else None
    if headers:
        # error_response renders its own body; drop the stale entity headers.
        headers.pop("Content-Type", None)

    if status_code >= 500:
        bound_logger.error(
            "Converted server error",
            code=code,
            status=status_code,
        )
    else:
        bound_logger.info("Converted API exception", code=code, status=status_code)

    return error_response(
        code,
        message,
        details,
        http_status=status_code,
        headers=headers,
    )


def _normalize_django_validation_error(
    exc: DjangoValidationError,
) -> Union[Dict[str, Any], list]:
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    if hasattr(exc, "messages"):
        return list(exc.messages)
    return {"detail": getattr(exc, "message", "Validation failed")}


def _normalize_payload(
    exc: Exception,
    payload: Any,
    status_code: int,
) -> Tuple[str, str, Optional[Any]]:
    if isinstance(exc, ValidationError):
        return (
            "VALIDATION_ERROR",
            _validation_message(payload),
            payload,
        )
    if isinstance(exc, ParseError):
        return (
            "VALIDATION_ERROR",
            _extract_message(payload, "Malformed request", status_code),
            None,
        )
    if isinstance(exc, (NotFound, Http404)):
        return (
            "NOT_FOUND",
            _extract_message(payload, "Resource not found", status_code),
            None,
        )
    if isinstance(exc, MethodNotAllowed):
        return (
            "METHOD_NOT_ALLOWED",
            _extract_message(payload, "Method not allowed", status_code),
            None,
        )
    if isinstance(exc, UnsupportedMediaType):
        return (
            "UNSUPPORTED_MEDIA_TYPE",
            _extract_message(payload, "Unsupported media type", status_code),
            None,
        )

    code, default_message = STATUS_CODE_DEFAULTS.get(
        status_code,
        (
            "SERVER_ERROR" if status_code >= 500 else "UNKNOWN_ERROR",
            "Something went wrong" if status_code >= 500 else "Request failed",
        ),
    )
    details = payload if _include_details(status_code, payload) else None
    message = _extract_message(payload, str(default_message), status_code)
    return code, message, details


def _validation_message(payload: Any) -> str:
    """Surface the first field error as the envelope message."""
    if isinstance(payload, dict):
        for field, errors in payload.items():
            if isinstance(errors, list) and errors and isinstance(errors[0], str):
                if field == "non_field_errors":
                    return str(errors[0])
                return f"{field}: {errors[0]}"
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return str(payload[0])
    return "Validation failed"


def _include_details(status_code: int, payload: Any) -> bool:
    if status_code >= 500:
        return False
    return isinstance(payload, (dict, list)) and payload not in (None, {})


def _extract_message(payload: Any, fallback: str, status_code: int) -> str:
    if status_code >= 500:
        default_server_message = STATUS_CODE_DEFAULTS.get(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ("SERVER_ERROR", "Something went wrong"),
        )
        return str(default_server_message[1])
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        detail = payload.get("detail")
        if isinstance(detail, str):
            return detail
    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        return payload[0]
    return fallback


__all__ = ["ApplicationError", "global_exception_handler"]
