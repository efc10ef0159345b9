from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .operations import Operation
from .outcomes import UpstreamOutcome


class StorefrontExecutorProtocol(Protocol):
    def execute(
        self, operation: Operation, variables: Optional[Mapping[str, Any]] = None
    ) -> UpstreamOutcome:
        ...
