"""Human-readable summaries of tool-call inputs."""

from __future__ import annotations

import json
from typing import Any

_MISSING = object()


def _truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut ``text`` to at most ``limit`` UTF-8 bytes, appending ``suffix`` if cut."""
    encoded = text.encode("utf-8")
    if len(encoded) <= limit:
        return text
    return encoded[:limit].decode("utf-8", errors="ignore") + suffix


def _json_string(value: Any) -> str:
    """Return ``value`` if it is a string, otherwise an empty string."""
    return value if isinstance(value, str) else ""


def _question_summary(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if not isinstance(value, list):
        return ""
    questions = []
    for item in value:
        if item is None:
            questions.append("")
            continue
        if not isinstance(item, dict):
            return ""
        question = item.get("question")
        if question is not None and not isinstance(question, str):
            return ""
        questions.append(question or "")
    if not questions:
        return ""
    summary = _truncate(questions[0], 80)
    if len(questions) > 1:
        summary += f" (+{len(questions) - 1} more)"
    return summary


def _todo_summary(value: Any) -> str:
    if value is _MISSING:
        return ""
    if value is None:
        return "0 items"
    if not isinstance(value, list):
        return ""
    return f"{len(value)} items"


def _batch_summary(value: Any) -> str:
    if value is _MISSING:
        return ""
    if value is None:
        return "0 calls"
    if not isinstance(value, list):
        return ""
    names = []
    for call in value:
        if call is None:
            continue
        if not isinstance(call, dict):
            return ""
        tool = call.get("tool")
        if tool is not None and not isinstance(tool, str):
            return ""
        if tool:
            names.append(tool)
    if not names:
        return f"{len(value)} calls"
    return ", ".join(names)


_PATH_FIELDS = {
    "read": "file_path",
    "write": "file_path",
    "edit": "file_path",
    "multiedit": "filePath",
    "grep": "pattern",
    "glob": "pattern",
    "list": "path",
    "task": "description",
    "webfetch": "url",
    "websearch": "query",
    "codesearch": "query",
    "skill": "skill",
}


def extract_tool_input(tool_name: str, input_json: Any) -> str:
    """Summarise a tool's input for display.

    ``input_json`` may be raw JSON text (``str`` or ``bytes``), an already
    decoded object, or ``None``. Tool names are matched case-insensitively so
    both PascalCase and lowercase naming conventions work.
    """
    if input_json is None:
        return ""
    if isinstance(input_json, (str, bytes, bytearray)):
        try:
            decoded = json.loads(input_json)
        except ValueError:
            return ""
    else:
        decoded = input_json
    if decoded is None:
        decoded = {}
    if not isinstance(decoded, dict):
        return ""

    name = tool_name.lower()
    if name in _PATH_FIELDS:
        return _json_string(decoded.get(_PATH_FIELDS[name]))
    if name == "bash":
        return _truncate(_json_string(decoded.get("command")), 100)
    if name == "question":
        return _question_summary(decoded.get("questions", _MISSING))
    if name == "todowrite":
        return _todo_summary(decoded.get("todos", _MISSING))
    if name == "batch":
        return _batch_summary(decoded.get("tool_calls", _MISSING))
    if name == "apply_patch":
        return _truncate(_json_string(decoded.get("patchText")), 80)
    if name == "askuserquestion":
        return "interactive"
    if name in ("exitplanmode", "plan_exit"):
        return "plan"
    return ""