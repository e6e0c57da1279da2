"""Event sink and progress observer interfaces.

Engine components report what they do through an injected event sink
instead of a module-level logger, and report batch progress through an
optional observer. The default sink forwards to the standard logging
module.
"""

import logging
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventSink(Protocol):
    """Receiver of structured engine events."""

    def info(self, message: str, **fields: Any) -> None: ...

    def warn(self, message: str, **fields: Any) -> None: ...

    def error(self, message: str, **fields: Any) -> None: ...


@runtime_checkable
class ProgressObserver(Protocol):
    """Receiver of batch progress, called before each item is processed."""

    def on_progress(self, done: int, total: int) -> None: ...


def _render(message: str, fields: dict[str, Any]) -> str:
    """Append fields to a message as sorted key=value pairs."""
    if not fields:
        return message
    extra = " ".join(f"{key}={fields[key]}" for key in sorted(fields))
    return f"{message} ({extra})"


class LoggingEventSink:
    """Event sink backed by a standard library logger.

    Args:
        name: Logger name. Defaults to the ``modsweep`` logger.
    """

    def __init__(self, name: str = "modsweep") -> None:
        self._logger = logging.getLogger(name)

    def info(self, message: str, **fields: Any) -> None:
        self._logger.info(_render(message, fields))

    def warn(self, message: str, **fields: Any) -> None:
        self._logger.warning(_render(message, fields))

    def error(self, message: str, **fields: Any) -> None:
        self._logger.error(_render(message, fields))


class NullEventSink:
    """Event sink that discards everything."""

    def info(self, message: str, **fields: Any) -> None:
        return None

    def warn(self, message: str, **fields: Any) -> None:
        return None

    def error(self, message: str, **fields: Any) -> None:
        return None


def default_sink(name: str = "modsweep") -> EventSink:
    """Return the sink used when a component is given none."""
    return LoggingEventSink(name)
