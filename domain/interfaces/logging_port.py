from typing_extensions import Protocol
from typing import Any


class BoundLogger(Protocol):
    """Logger carrying context fields that appear on every event it emits."""

    def debug(self, event: str, **kwargs: Any) -> None: ...

    def info(self, event: str, **kwargs: Any) -> None: ...

    def warning(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        """
        Log a recoverable problem.

        Args:
            event: snake_case event name
            exc_info: Whether to attach the exception being handled
            **kwargs: Additional context fields
        """
        ...

    def error(self, event: str, exc_info: bool = False, **kwargs: Any) -> None:
        """
        Log a failure that is propagated to the caller.

        Args:
            event: snake_case event name
            exc_info: Whether to attach the exception being handled
            **kwargs: Additional context fields
        """
        ...


class LoggingPort(Protocol):
    """Protocol for structured logging from the application layer."""

    def bind(self, **kwargs: Any) -> BoundLogger:
        """Return a logger with `kwargs` bound as context."""
        ...
