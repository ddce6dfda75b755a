"""Pluggable transcript sources, their registry and session helpers."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from volta.transcript import ParsedEntry

_PLAN_MARKER = "PLAN_JSON:"


@dataclass(frozen=True)
class ActiveSession:
    """A discovered agent session.

    ``key`` identifies the session for offset tracking and ``window_id`` is
    the terminal window running it.
    """

    key: str
    window_id: str


@dataclass(frozen=True)
class ObservingTopic:
    """A chat topic that observes an agent's output."""

    topic_id: int
    chat_id: int
    user_id: int


ObservationLookup = Callable[[str], "list[ObservingTopic]"]
"""Resolves a window ID to the topics observing the agent that owns it."""


class UnknownSourceError(LookupError):
    """Raised when no transcript source is registered under a name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown transcript source: {name!r}")
        self.name = name


class TranscriptSource(ABC):
    """A source of agent transcripts for one agent runtime."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The source's identifier, such as ``"claude"``."""

    @abstractmethod
    def discover_sessions(self) -> list[ActiveSession]:
        """Return all currently active sessions for this source."""

    @abstractmethod
    def read_new_entries(
        self, session: ActiveSession, last_offset: int
    ) -> tuple[list[ParsedEntry], int]:
        """Read entries written after ``last_offset``.

        Returns the parsed entries and the new offset; raises on failure.
        """

    @abstractmethod
    def extract_status_line(self, pane_text: str) -> str | None:
        """Return the agent's status shown in the terminal, or None."""

    @abstractmethod
    def is_interactive_ui(self, pane_text: str) -> bool:
        """Return True if the terminal shows an interactive prompt."""


_registry: dict[str, TranscriptSource] = {}
_registry_lock = threading.Lock()


def register_source(name: str, source: TranscriptSource) -> None:
    """Register ``source`` under ``name``, replacing any earlier one."""
    with _registry_lock:
        _registry[name] = source


def get_source(name: str) -> TranscriptSource:
    """Return the source registered under ``name``.

    Raises ``UnknownSourceError`` if there is none.
    """
    with _registry_lock:
        try:
            return _registry[name]
        except KeyError:
            raise UnknownSourceError(name) from None


def window_id_from_session_key(key: str) -> str:
    """Return the window ID after the last colon of a session key, or ''."""
    _, sep, window_id = key.rpartition(":")
    return window_id if sep else ""


def extract_plan_json(text: str) -> tuple[str, str] | None:
    """Find a ``PLAN_JSON:`` marker followed by a JSON array.

    Returns the array text and the remaining text with the marker and array
    removed, or None when there is no marker or the array is incomplete.
    """
    idx = text.find(_PLAN_MARKER)
    if idx < 0:
        return None
    after = text[idx + len(_PLAN_MARKER) :].lstrip(" \t\n\r")
    if not after.startswith("["):
        return None

    depth = 0
    in_string = False
    escaped = False
    for pos, ch in enumerate(after):
        if escaped:
            escaped = False
            continue
        if ch == "\\" and in_string:
            escaped = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                plan = after[: pos + 1]
                rest = (text[:idx] + after[pos + 1 :]).strip()
                return plan, rest
    return None