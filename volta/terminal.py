"""Inspection of captured terminal panes: chrome, status lines and prompts."""

from __future__ import annotations

from dataclasses import dataclass

SPINNER_CHARS = "·✻✽✶✳✢"
_SEPARATOR_CHARS = frozenset("─━")
_SEPARATOR_MIN_LEN = 20
_SEPARATOR_SEARCH_LINES = 10
_STATUS_SEARCH_LINES = 4
_SHORT_SEPARATOR = "─────"
_BASH_PREFIX_BYTES = 10


@dataclass(frozen=True)
class UIPattern:
    """Markers that delimit an interactive UI element in a pane.

    An empty ``bottom_markers`` means the element ends at the last non-empty line.
    """

    name: str
    top_markers: tuple[str, ...]
    bottom_markers: tuple[str, ...] = ()


@dataclass(frozen=True)
class UIContent:
    """Interactive content extracted from a pane."""

    name: str
    content: str


UI_PATTERNS: tuple[UIPattern, ...] = (
    UIPattern(
        "ExitPlanMode",
        ("Would you like to proceed?", "Claude has written up a plan"),
        ("ctrl-g to edit", "Esc to"),
    ),
    UIPattern("AskUserQuestion_multi", ("← ",)),
    UIPattern("AskUserQuestion_single", ("☐", "✔", "☒"), ("Enter to select",)),
    UIPattern("PermissionPrompt", ("Do you want to proceed?",), ("Esc to cancel",)),
    UIPattern("RestoreCheckpoint", ("Restore the code",), ("Enter to continue",)),
    UIPattern("Settings", ("Settings:",), ("Esc to cancel", "Type to filter")),
)


def is_chrome_separator(line: str) -> bool:
    """Return True if the line is made only of box-drawing rules, 20 or more."""
    trimmed = line.strip()
    return len(trimmed) >= _SEPARATOR_MIN_LEN and all(
        ch in _SEPARATOR_CHARS for ch in trimmed
    )


def _find_chrome_separator(lines: list[str]) -> int | None:
    """Index of the topmost separator within the last ten lines, if any."""
    start = max(0, len(lines) - _SEPARATOR_SEARCH_LINES)
    return next(
        (i for i in range(start, len(lines)) if is_chrome_separator(lines[i])),
        None,
    )


def strip_pane_chrome(pane_text: str) -> str:
    """Remove the bottom chrome (separator, prompt, status bar) from a pane."""
    lines = pane_text.split("\n")
    sep = _find_chrome_separator(lines)
    if sep is None:
        return pane_text
    return "\n".join(lines[:sep])


def extract_status_line(pane_text: str) -> str | None:
    """Return the spinner status text above the chrome separator, or None.

    Only the few lines just above the separator are examined; blank lines are
    skipped and the first non-blank line decides the outcome.
    """
    lines = pane_text.split("\n")
    sep = _find_chrome_separator(lines)
    if sep is None:
        return None
    low = max(0, sep - _STATUS_SEARCH_LINES)
    for line in map(str.strip, reversed(lines[low:sep])):
        if not line:
            continue
        if line[0] in SPINNER_CHARS:
            return line[1:].strip()
        return None
    return None


def extract_after_spinner(line: str) -> str:
    """Return the trimmed text after the first spinner character, or ''."""
    for index, ch in enumerate(line):
        if ch in SPINNER_CHARS:
            return line[index + 1 :].strip()
    return ""


def _first_line_with(lines: list[str], markers: tuple[str, ...], start: int = 0) -> int | None:
    return next(
        (
            i
            for i in range(start, len(lines))
            if any(marker in lines[i] for marker in markers)
        ),
        None,
    )


def _try_extract(lines: list[str], pattern: UIPattern) -> UIContent | None:
    top = _first_line_with(lines, pattern.top_markers)
    if top is None:
        return None
    if pattern.bottom_markers:
        bottom = _first_line_with(lines, pattern.bottom_markers, top + 1)
    else:
        bottom = next(
            (i for i in range(len(lines) - 1, top, -1) if lines[i].strip()),
            None,
        )
    if bottom is None:
        return None
    return UIContent(pattern.name, "\n".join(lines[top : bottom + 1]))


def extract_interactive_content(pane_text: str) -> UIContent | None:
    """Return the first interactive UI element found in the pane, or None."""
    lines = strip_pane_chrome(pane_text).split("\n")
    for pattern in UI_PATTERNS:
        content = _try_extract(lines, pattern)
        if content is not None:
            return content
    return None


def is_interactive_ui(pane_text: str) -> bool:
    """Return True if the pane shows an interactive UI prompt."""
    return extract_interactive_content(pane_text) is not None


def _byte_prefix(text: str, limit: int) -> str:
    return text.encode("utf-8")[:limit].decode("utf-8", errors="ignore")


def extract_bash_output(pane_text: str, command: str) -> str:
    """Return the ``! command`` echo line and everything below it.

    The command is matched on its first ten bytes to tolerate truncation in
    the terminal. Trailing blank lines are dropped; '' means not found.
    """
    lines = strip_pane_chrome(pane_text).split("\n")
    prefix = _byte_prefix(command, _BASH_PREFIX_BYTES)
    candidates = ("! " + prefix, "!" + prefix)
    start = next(
        (
            i
            for i in range(len(lines) - 1, -1, -1)
            if lines[i].strip().startswith(candidates)
        ),
        None,
    )
    if start is None:
        return ""
    output = lines[start:]
    while output and not output[-1].strip():
        output.pop()
    return "\n".join(output)


def shorten_separators(text: str) -> str:
    """Replace long separator lines with a short rule for display."""
    return "\n".join(
        _SHORT_SEPARATOR if is_chrome_separator(line) else line
        for line in text.split("\n")
    )