"""Rate-limit handling for chat API calls."""

from __future__ import annotations

import logging
import re
import threading
import time
from typing import Callable

log = logging.getLogger(__name__)

_RETRY_AFTER_RE = re.compile(r"retry after (\d+)")
SEND_INTERVAL = 0.1
"""Minimum gap in seconds between API calls to the same chat."""
DEFAULT_FLOOD_WAIT = 30.0
_RETRY_MARGIN = 1.0


class FloodControl:
    """Tracks per-chat flood bans and spaces out calls to each chat."""

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._clock = clock
        self._sleep = sleep
        self._flood_lock = threading.Lock()
        self._flood_until: dict[int, float] = {}
        self._send_lock = threading.Lock()
        self._last_send: dict[int, float] = {}

    def throttle(self, chat_id: int) -> None:
        """Wait until at least the send interval has passed since the last call."""
        with self._send_lock:
            last = self._last_send.get(chat_id)
        if last is not None:
            wait = SEND_INTERVAL - (self._clock() - last)
            if wait > 0:
                self._sleep(wait)
        with self._send_lock:
            self._last_send[chat_id] = self._clock()

    def handle_error(self, chat_id: int, error: BaseException | str | None) -> None:
        """Register a flood ban if ``error`` reports a 429 rate limit.

        The wait is taken from ``retry after N`` (plus one second), defaulting
        to thirty seconds. An existing ban is only ever extended.
        """
        if error is None:
            return
        message = str(error)
        if "Too Many Requests" not in message and "429" not in message:
            return

        wait = DEFAULT_FLOOD_WAIT
        match = _RETRY_AFTER_RE.search(message)
        if match:
            seconds = int(match.group(1))
            if seconds > 0:
                wait = seconds + _RETRY_MARGIN

        with self._flood_lock:
            new_until = self._clock() + wait
            existing = self._flood_until.get(chat_id)
            if existing is None or new_until > existing:
                self._flood_until[chat_id] = new_until
                log.warning("Flood control: chat %d rate-limited for %gs", chat_id, wait)

    def is_flooded(self, chat_id: int) -> bool:
        """Return True while a flood ban is in force for the chat."""
        with self._flood_lock:
            until = self._flood_until.get(chat_id)
        return until is not None and self._clock() <= until

    def wait_if_flooded(self, chat_id: int) -> None:
        """Block until any flood ban on the chat has expired."""
        with self._flood_lock:
            until = self._flood_until.get(chat_id)
        if until is None:
            return
        remaining = until - self._clock()
        if remaining > 0:
            self._sleep(remaining)
        self._clear_flood(chat_id)

    def _clear_flood(self, chat_id: int) -> None:
        with self._flood_lock:
            until = self._flood_until.get(chat_id)
            if until is not None and self._clock() > until:
                del self._flood_until[chat_id]