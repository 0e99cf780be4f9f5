from datetime import datetime, UTC
import time

_process_started = time.monotonic()


def iso_timestamp() -> str:
    """UTC time with millisecond precision and a trailing Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def uptime_seconds() -> float:
    return time.monotonic() - _process_started
