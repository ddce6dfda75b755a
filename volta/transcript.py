"""Parsing of JSONL agent transcripts into display-ready entries."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, MutableMapping

from volta.tool_input import extract_tool_input

_SYSTEM_TAGS = "bash-input|bash-stdout|bash-stderr|local-command-caveat|system-reminder"
_SYSTEM_TAGS_RE = re.compile(
    rf"<(?:{_SYSTEM_TAGS})[^>]*>[\s\S]*?</(?:{_SYSTEM_TAGS})>"
)


@dataclass
class ContentBlock:
    """A single content block within a transcript entry."""

    type: str
    text: str = ""
    tool_name: str = ""
    tool_input: str = ""
    tool_use_id: str = ""
    content: str = ""
    is_error: bool = False


@dataclass
class Entry:
    """A parsed transcript line: ``user``, ``assistant`` or ``summary``."""

    type: str
    blocks: list[ContentBlock] = field(default_factory=list)
    raw_data: dict[str, Any] | None = None


@dataclass
class PendingTool:
    """A tool_use block still waiting for its tool_result."""

    tool_use_id: str
    tool_name: str
    input: str
    summary: str


@dataclass
class ParsedEntry:
    """A display-ready entry for the message queue."""

    role: str = ""
    content_type: str = ""
    text: str = ""
    tool_use_id: str = ""
    tool_name: str = ""
    tool_input: str = ""
    is_error: bool = False


def _str_field(obj: dict[str, Any], key: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else ""


def parse_line(line: str | bytes) -> Entry | None:
    """Parse one JSONL line.

    Returns ``None`` for unrecognised or ignorable entries and raises
    ``ValueError`` when the line is not a JSON object.
    """
    raw = json.loads(line)
    if not isinstance(raw, dict):
        raise ValueError("transcript line is not a JSON object")

    entry_type = raw.get("type")
    if not isinstance(entry_type, str):
        return None
    if entry_type in ("user", "assistant"):
        return _parse_message_entry(entry_type, raw)
    if entry_type == "summary":
        return Entry(type="summary", raw_data=raw)
    return None


def _parse_message_entry(entry_type: str, raw: dict[str, Any]) -> Entry:
    if "message" not in raw:
        return Entry(type=entry_type)
    message = raw["message"]
    if message is None:
        message = {}
    if not isinstance(message, dict):
        return Entry(type=entry_type)
    blocks = _parse_content_blocks(message.get("content"))
    return Entry(type=entry_type, blocks=blocks, raw_data=raw)


def _parse_content_blocks(content: Any) -> list[ContentBlock]:
    if content is None:
        return []
    if isinstance(content, str):
        return [ContentBlock(type="text", text=content)] if content else []
    if not isinstance(content, list):
        return []

    blocks = []
    for item in content:
        if item is None:
            continue
        if not isinstance(item, dict):
            continue
        block_type = item.get("type")
        if block_type is not None and not isinstance(block_type, str):
            continue
        if block_type == "text":
            blocks.append(ContentBlock(type="text", text=_str_field(item, "text")))
        elif block_type == "tool_use":
            name = _str_field(item, "name")
            blocks.append(
                ContentBlock(
                    type="tool_use",
                    tool_name=name,
                    tool_input=extract_tool_input(name, item.get("input")),
                    tool_use_id=_str_field(item, "id"),
                )
            )
        elif block_type == "tool_result":
            blocks.append(
                ContentBlock(
                    type="tool_result",
                    tool_use_id=_str_field(item, "tool_use_id"),
                    content=_tool_result_text(item.get("content")),
                    is_error=item.get("is_error") is True,
                )
            )
        elif block_type == "thinking":
            blocks.append(ContentBlock(type="thinking", text=_str_field(item, "thinking")))
    return blocks


def _tool_result_text(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    parts = [
        block["text"]
        for block in content
        if isinstance(block, dict)
        and block.get("type") == "text"
        and isinstance(block.get("text"), str)
        and block["text"]
    ]
    return "\n".join(parts)


def parse_entries(
    entries: Iterable[Entry | None], pending: MutableMapping[str, PendingTool]
) -> list[ParsedEntry]:
    """Turn entries into display entries, pairing tool_use with tool_result.

    ``pending`` carries unmatched tool_use blocks between calls and is updated
    in place. When a tool_use and its tool_result arrive in the same batch,
    only the combined tool_result is emitted.
    """
    result: list[ParsedEntry] = []
    batch_tool_use: dict[str, int] = {}
    suppressed: set[int] = set()

    for entry in entries:
        if entry is None:
            continue
        for block in entry.blocks:
            if block.type == "text":
                text = clean_text(block.text)
                if text:
                    result.append(ParsedEntry(role=entry.type, content_type="text", text=text))

            elif block.type == "tool_use":
                summary = format_tool_use_summary(block.tool_name, block.tool_input)
                pending[block.tool_use_id] = PendingTool(
                    tool_use_id=block.tool_use_id,
                    tool_name=block.tool_name,
                    input=block.tool_input,
                    summary=summary,
                )
                batch_tool_use[block.tool_use_id] = len(result)
                result.append(
                    ParsedEntry(
                        role="assistant",
                        content_type="tool_use",
                        text=summary,
                        tool_use_id=block.tool_use_id,
                        tool_name=block.tool_name,
                    )
                )

            elif block.type == "tool_result":
                paired = pending.pop(block.tool_use_id, None)
                parsed = ParsedEntry(
                    role="user",
                    content_type="tool_result",
                    tool_use_id=block.tool_use_id,
                    text=block.content,
                    is_error=block.is_error,
                )
                if paired is not None:
                    parsed.tool_name = paired.tool_name
                    parsed.tool_input = paired.input
                else:
                    parsed.tool_name = "unknown"
                index = batch_tool_use.pop(block.tool_use_id, None)
                if index is not None:
                    suppressed.add(index)
                result.append(parsed)

            elif block.type == "thinking":
                if block.text:
                    result.append(
                        ParsedEntry(role="assistant", content_type="thinking", text=block.text)
                    )

    return [item for index, item in enumerate(result) if index not in suppressed]


def format_tool_use_summary(name: str, tool_input: str) -> str:
    """Format a tool call as ``**Name**(input)``."""
    return f"**{name}**({tool_input})"


def clean_text(text: str) -> str:
    """Strip system tags from text and trim surrounding whitespace."""
    return _SYSTEM_TAGS_RE.sub("", text).strip()