# volta

Building blocks for supervising coding agents that run in terminal windows.
The package has no dependencies outside the standard library.

## Modules

- **`volta.transcript`**: `parse_line` parses one JSONL transcript line
  (`str` or `bytes`) into an `Entry` holding `ContentBlock`s. It returns
  `None` for line types it ignores and raises `ValueError` for text that is
  not a JSON object. `parse_entries` turns a batch of entries into
  display-ready `ParsedEntry` items. It pairs each `tool_use` with its
  `tool_result` through a `pending` dict of `PendingTool`s that you keep
  between calls. When both halves arrive in the same batch, only the combined
  `tool_result` is emitted. A result with no matching `tool_use` gets the
  tool name `"unknown"`. `clean_text` strips system tags such as
  `<system-reminder>…</system-reminder>`, and `format_tool_use_summary`
  builds the `**Tool**(input)` line.
- **`volta.tool_input`**: `extract_tool_input(tool_name, input_json)` gives
  a short summary of a tool call's input, such as the file path, the command
  (cut at 100 bytes) or the search pattern. Tool names are matched without
  regard to case. `input_json` may be JSON text, an already decoded object or
  `None`.
- **`volta.terminal`**: works on captured pane text.
  - `strip_pane_chrome` drops everything from the first separator line in the
    last ten lines downwards. A separator is 20 or more `─`/`━` characters.
  - `extract_status_line` returns the text after a spinner character just
    above that separator, or `None`.
  - `extract_interactive_content` and `is_interactive_ui` recognise plan,
    question, permission, checkpoint and settings prompts. They return a
    `UIContent` (name and text) or a boolean.
  - `extract_bash_output` finds the `! command` echo line and what follows it.
  - `shorten_separators` shortens long rule lines.
  - `is_chrome_separator` tests a single line.
  - `extract_after_spinner` returns what follows the first spinner character.
- **`volta.prompt`**: `build_single_prompt`, `build_auto_prompt` and
  `build_batch_prompt` build Markdown instructions for agents from `Task`,
  `TaskContext` and `TaskWithContext` records.
- **`volta.sources`**: `TranscriptSource` is an abstract base class for a
  source of agent transcripts, with `name`, `discover_sessions`,
  `read_new_entries`, `extract_status_line` and `is_interactive_ui`. Sessions
  are described by `ActiveSession` and observing chat topics by
  `ObservingTopic`. The module keeps a thread-safe registry: `register_source`
  adds a source and `get_source` looks one up, raising `UnknownSourceError` if
  none is registered under that name. `window_id_from_session_key` returns the
  part after the last colon (`"name:@5"` → `"@5"`). `extract_plan_json` finds
  a `PLAN_JSON:` marker followed by a complete JSON array and returns
  `(plan, remaining_text)`, or `None`.
- **`volta.flood`**: `FloodControl` applies per-chat rate limiting.
  `throttle` keeps calls to the same chat at least 0.1 s apart. `handle_error`
  recognises "429"/"Too Many Requests" errors and bans the chat for
  `retry after N` seconds plus one, or for 30 s if no value is given. It only
  ever extends an existing ban. `is_flooded` and `wait_if_flooded` report and
  wait on the ban. The clock and sleep functions can be injected.
- **`volta.orchestrator`**:
  - `OrchestratorStatus` counts agents, tasks and merge-queue entries. Build
    it with `from_snapshot` and print it with `str()`.
  - `OrchestratorConfig` sets non-positive `max_agents` and `poll_interval` to
    1 and 10 s. It offers thread-safe `set_max_agents`/`get_max_agents`,
    `available_slots` (which counts only live executors) and `notify`.
  - `notify_bridge(task_events, notify)` is a coroutine that sets an
    `asyncio.Event` whenever a `TaskEvent` reaches status `ready` or `done`.

## What the package does not do

- It sends nothing to a chat service. `FloodControl` only tracks bans and
  spacing between calls.
- It ships no concrete `TranscriptSource` and no polling monitor loop.
  Reading transcript files or databases is left to your own subclasses.
- It has no task database, no agent spawning and no terminal-window
  management. The orchestrator module provides the configuration, status
  counting and wake-up signalling, not the loop that dispatches agents.
- There is no command-line program.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from volta.transcript import parse_line, parse_entries

pending = {}
entries = [
    parse_line(b'{"type":"assistant","message":{"content":[{"type":"tool_use","id":"tu_1","name":"Read","input":{"file_path":"main.go"}}]}}'),
    parse_line(b'{"type":"user","message":{"content":[{"type":"tool_result","tool_use_id":"tu_1","content":"package main"}]}}'),
]
for item in parse_entries(entries, pending):
    print(item.content_type, item.tool_name, item.text)
# tool_result Read package main
```

```python
from volta.terminal import extract_status_line

pane = "output\n✻ Reading file.go\n" + "─" * 40 + "\n> prompt"
print(extract_status_line(pane))  # Reading file.go
```

```python
from volta.flood import FloodControl

flood = FloodControl()
flood.handle_error(100, RuntimeError("Too Many Requests: retry after 5"))
print(flood.is_flooded(100))  # True
```