"""Transcript parsing, pane inspection, prompt building, flood control and orchestrator helpers."""

__version__ = "0.1.0"

__all__ = [
    "flood",
    "orchestrator",
    "prompt",
    "sources",
    "terminal",
    "tool_input",
    "transcript",
]