"""
Usage telemetry recorded around the service operations.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Protocol

logger = logging.getLogger(__name__)

PODLET_GENERATE = "podlet-generate"
PODLET_COMPOSE = "podlet-compose"


class TelemetryLogger(Protocol):
    def log_usage(self, event_name: str, data: Dict[str, Any]) -> None:
        ...


class LoggingTelemetry:
    """
    Telemetry sink writing usage events to the `podlet.telemetry` logger at debug level.
    """

    def log_usage(self, event_name: str, data: Dict[str, Any]) -> None:
        logger.debug("%s %s", event_name, data)


@contextmanager
def telemetry_scope(telemetry: TelemetryLogger, event_name: str, records: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    """
    Records one usage event for the wrapped block, however it exits.

    The payload is yielded so the block may add to it. An exception raised
    inside the block is stored under `error` and re-raised unchanged. The
    telemetry sink is called exactly once, after the block; a failing sink
    is logged and never changes the outcome of the block.

    :param telemetry: The sink receiving the event.
    :param event_name: Name of the usage event.
    :param records: Initial payload of the event.
    """
    try:
        yield records
    except Exception as err:
        records["error"] = err
        raise
    finally:
        try:
            telemetry.log_usage(event_name, records)
        except Exception:
            logger.warning("failed to record telemetry event %s", event_name, exc_info=True)
