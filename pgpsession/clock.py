"""Process-wide clock that follows the latest time reported by a server."""

from __future__ import annotations

import time
from datetime import datetime, timezone


class _ClockState:
    __slots__ = ("latest_server_time", "generation_offset")

    def __init__(self) -> None:
        self.latest_server_time = 0
        self.generation_offset = 0


_state = _ClockState()


def _reset() -> None:
    """Forget the cached server time and the key generation offset."""
    _state.latest_server_time = 0
    _state.generation_offset = 0


def update_time(new_time: int) -> None:
    """Record a server time; only times later than the cached one are kept."""
    if new_time > _state.latest_server_time:
        _state.latest_server_time = int(new_time)


def set_key_generation_offset(offset: int) -> None:
    """Set the number of seconds added to the clock when generating keys."""
    _state.generation_offset = int(offset)


def _now_unix() -> int:
    if _state.latest_server_time == 0:
        return int(time.time())
    return _state.latest_server_time


def get_unix_time() -> int:
    """Return the cached server time, or the local time if none was set."""
    return _now_unix()


def get_time() -> datetime:
    """Return :func:`get_unix_time` as an aware UTC datetime."""
    if _state.latest_server_time == 0:
        return datetime.now(tz=timezone.utc)
    return datetime.fromtimestamp(_state.latest_server_time, tz=timezone.utc)


def key_generation_time() -> datetime:
    """Return the current time shifted by the key generation offset."""
    return datetime.fromtimestamp(_now_unix() + _state.generation_offset, tz=timezone.utc)