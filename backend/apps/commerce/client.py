from __future__ import annotations

import threading
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from apps.common import get_logger
from .config import StorefrontConfig
from .operations import Operation
from .outcomes import (
    GraphQLError,
    GraphQLFailure,
    OperationPayload,
    TransportFailure,
    UpstreamOutcome,
    UserError,
)

logger = get_logger(__name__).bind(component="commerce", layer="client")

REQUEST_ID_HEADER = "x-request-id"


class StorefrontClient:
    """
    Executes named operations against the Storefront GraphQL endpoint.

    Upstream failures are never raised; ``execute`` always returns one of the
    tagged outcomes from ``apps.commerce.outcomes``. The underlying
    ``httpx.Client`` is created lazily and shared across threads.
    """

    def __init__(
        self,
        config: StorefrontConfig,
        *,
        http_client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config
        self._http_client = http_client
        self._transport = transport
        self._lock = threading.Lock()
        self.logger = logger.bind(store=config.store_domain, api_version=config.api_version)

    @property
    def http(self) -> httpx.Client:
        if self._http_client is None:
            with self._lock:
                if self._http_client is None:
                    self._http_client = httpx.Client(
                        timeout=httpx.Timeout(self.config.timeout_seconds, connect=5.0),
                        limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
                        headers={
                            "Content-Type": "application/json",
                            "Accept": "application/json",
                            self.config.token_header: self.config.token,
                        },
                        transport=self._transport,
                    )
        return self._http_client

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def execute(
        self, operation: Operation, variables: Optional[Mapping[str, Any]] = None
    ) -> UpstreamOutcome:
        payload: Dict[str, Any] = {"query": operation.query}
        if variables:
            payload["variables"] = dict(variables)
        started = time.monotonic()
        try:
            response = self.http.post(self.config.endpoint, json=payload)
        except httpx.HTTPError as exc:
            self.logger.error(
                "Storefront request failed",
                operation=operation.name,
                error=str(exc),
                exception=exc.__class__.__name__,
            )
            return TransportFailure(
                operation=operation.name,
                message=f"Storefront request failed: {exc.__class__.__name__}",
            )

        request_id = response.headers.get(REQUEST_ID_HEADER)
        self.logger.info(
            "Storefront response received",
            operation=operation.name,
            status=response.status_code,
            request_id=request_id,
            latency_ms=round((time.monotonic() - started) * 1000, 2),
        )
        return self._to_outcome(operation, response, request_id)

    def _to_outcome(
        self, operation: Operation, response: httpx.Response, request_id: Optional[str]
    ) -> UpstreamOutcome:
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            self.logger.warning(
                "Unreadable storefront response", operation=operation.name, status=status
            )
            return TransportFailure(
                operation=operation.name,
                message="Failed to parse Storefront response as JSON",
                status=status,
                request_id=request_id,
            )
        if not isinstance(body, dict):
            return TransportFailure(
                operation=operation.name,
                message="Unexpected Storefront response shape",
                status=status,
                request_id=request_id,
            )

        errors = tuple(GraphQLError.from_raw(e) for e in body.get("errors") or [])
        data = body.get("data")

        if not response.is_success:
            return GraphQLFailure(operation.name, status, errors, request_id)
        if not isinstance(data, dict) or operation.root not in data:
            return GraphQLFailure(operation.name, status, errors, request_id)

        root = data.get(operation.root)
        if root is None and errors:
            return GraphQLFailure(operation.name, status, errors, request_id)

        if operation.result_key is None:
            return OperationPayload(
                operation=operation.name,
                status=status,
                result=root,
                errors=errors,
                request_id=request_id,
            )

        if not isinstance(root, dict):
            return GraphQLFailure(operation.name, status, errors, request_id)
        result = root.get(operation.result_key)
        user_errors = tuple(
            UserError.from_raw(e) for e in root.get(operation.user_errors_key or "") or []
        )
        if result is None and not user_errors and errors:
            return GraphQLFailure(operation.name, status, errors, request_id)
        return OperationPayload(
            operation=operation.name,
            status=status,
            result=result,
            user_errors=user_errors,
            errors=errors,
            request_id=request_id,
        )
