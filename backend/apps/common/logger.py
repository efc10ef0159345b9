import logging
import re
from typing import Any, Dict, Optional

# Client-supplied values (request ids, cookie contents) must not forge log lines.
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_MAX_VALUE_LENGTH = 512


class AppLogger:
    """Thin wrapper around the stdlib logger that adds lightweight context binding."""

    def __init__(
        self,
        name: str,
        context: Optional[Dict[str, Any]] = None,
        _logger: Optional[logging.Logger] = None,
    ):
        self._logger = _logger or logging.getLogger(name)
        self._name = name
        self._context = context or {}

    def bind(self, **extra: Any) -> "AppLogger":
        """Return a new logger instance with additional contextual key/value pairs."""
        merged = {**self._context, **extra}
        return AppLogger(self._name, merged, _logger=self._logger)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, context)

    def error(self, message: str, **context: Any) -> None:
        self._log(logging.ERROR, message, context)

    def exception(self, message: str, **context: Any) -> None:
        """Log an error message along with the active exception."""
        payload = {**self._context, **context}
        self._logger.error(self._format(message, payload), exc_info=True)

    def _log(self, level: int, message: str, context: Dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        payload = {**self._context, **context} if context else dict(self._context)
        self._logger.log(level, self._format(message, payload))

    @staticmethod
    def _format(message: str, context: Dict[str, Any]) -> str:
        if not context:
            return message
        ctx_str = " ".join(
            f"{key}={AppLogger._stringify(value)}" for key, value in context.items()
        )
        return f"{message} | {ctx_str}"

    @staticmethod
    def _stringify(value: Any) -> str:
        if isinstance(value, (str, int, float, bool)) or value is None:
            text = str(value)
        else:
            text = repr(value)
        if len(text) > _MAX_VALUE_LENGTH:
            text = text[:_MAX_VALUE_LENGTH] + "..."
        return _CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group()):02x}", text)


def get_logger(name: str) -> AppLogger:
    return AppLogger(name)
