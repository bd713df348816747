import asyncio
import logging
import traceback
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from .utils import call_maybe_async

logger = logging.getLogger(__name__)

COMMAND_EXCEPTION = "command_exception"


class TelemetrySink:
    """Fans diagnostic events out to listeners. Listener failures never reach the emitter."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Callable]] = {}

    def listen(self, event_name: str) -> Callable:
        def decorator(func: Callable) -> Callable:
            self.add_listener(event_name, func)
            return func

        return decorator

    def add_listener(self, event_name: str, callback: Callable) -> None:
        self._listeners.setdefault(event_name, []).append(callback)
        logger.debug(f"Added telemetry listener for {event_name}: {getattr(callback, '__name__', callback)}")

    def remove_listener(self, event_name: str, callback: Callable) -> None:
        try:
            self._listeners.get(event_name, []).remove(callback)
        except ValueError:
            logger.warning(f"Listener {getattr(callback, '__name__', callback)} not found for {event_name}")

    def get_listeners(self, event_name: str) -> list[Callable]:
        return self._listeners.get(event_name, []).copy()

    async def emit(self, event_name: str, *args: Any) -> None:
        listeners = self.get_listeners(event_name)
        if not listeners:
            return

        results = await asyncio.gather(
            *(call_maybe_async(listener, *args) for listener in listeners), return_exceptions=True
        )
        for listener, result in zip(listeners, results):
            if isinstance(result, Exception):
                logger.error(
                    f"Error in telemetry listener {getattr(listener, '__name__', listener)} for {event_name}: {result}"
                )


def log_command_exception(error: BaseException, timestamp_ms: int) -> None:
    """Telemetry listener that writes unclassified command failures to the log."""
    occurred_at = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    logger.error(f"Unhandled command error (ErrorId: {timestamp_ms}, at {occurred_at.isoformat()}): {error!r}")
    logger.error("".join(traceback.format_exception(type(error), error, error.__traceback__)))
