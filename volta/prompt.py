"""Prompt generation for agents working through the task queue."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence


@dataclass
class Task:
    """A unit of work in the task queue."""

    id: str
    title: str
    body: str = ""
    priority: int = 0


@dataclass
class TaskContext:
    """A context note attached to a task (finding, handoff, test failure...)."""

    kind: str
    content: str
    agent_id: str | None = None
    source_task: str | None = None


@dataclass
class TaskWithContext:
    """A task together with its context entries."""

    task: Task
    ctxs: list[TaskContext] = field(default_factory=list)


_ENV_SECTION = (
    "## Environment\n"
    "\n"
    "Your environment is already configured:\n"
    "- `AGENT_ID` — your unique agent identifier\n"
    "- `DATABASE_URL` — the PostgreSQL connection string\n"
    "- `PATH` includes the scripts directory "
    "(volta-claim, volta-done, volta-observe, volta-handoff, volta-pick)\n"
)


def _agent_name(ctx: TaskContext) -> str:
    return ctx.agent_id if ctx.agent_id is not None else "unknown"


def _context_section(ctxs: Iterable[TaskContext] | None) -> str:
    ctxs = list(ctxs or ())
    if not ctxs:
        return ""
    parts = ["## Context\n\n"]
    for ctx in ctxs:
        header = f"### {ctx.kind.upper()} (agent: {_agent_name(ctx)})"
        if ctx.source_task is not None:
            header += f" from: {ctx.source_task}"
        parts.append(header + "\n\n")
        parts.append(ctx.content + "\n\n")
    return "".join(parts)


def build_single_prompt(task: Task, ctxs: Iterable[TaskContext] | None = None) -> str:
    """Build the prompt for working on a single task."""
    parts = [
        f"# Task: {task.title}\n\n",
        f"**ID:** `{task.id}`\n",
        f"**Priority:** {task.priority}\n",
        "\n",
    ]
    if task.body:
        parts.append("## Specification\n\n")
        parts.append(task.body + "\n\n")
    parts.append(_context_section(ctxs))
    parts += [
        "## Instructions\n\n",
        f"1. Claim this task: `volta-pick {task.id}`\n",
        "2. Read the context above (inherited findings, handoffs, test failures).\n",
        f'3. Work on the task. Use `volta-observe {task.id} "<note>"` to record findings.\n',
        f'4. Use `volta-handoff {task.id} "<note>"` before long operations.\n',
        "5. Commit your changes (skip if in worktree mode — `volta-done` auto-commits):\n",
        '   `git add <files> && git commit -m "<message>"`\n',
        f'6. When done: `volta-done {task.id} "<summary>"`\n',
        "\n**CRITICAL:** You MUST commit before calling `volta-done` (unless in worktree "
        "mode where `$WORKTREE_DIR` is set — then `volta-done` auto-commits). You MUST "
        "call `volta-done` to mark the task complete. Without it, the task stays claimed "
        "and blocks the pipeline. Do NOT use any other mechanism to track completion.\n",
        "\n**Rule:** Do NOT loop. Complete this single task and return to interactive mode.\n\n",
        _ENV_SECTION,
    ]
    return "".join(parts)


def build_auto_prompt(project: str) -> str:
    """Build the looping prompt for working through a project's queue."""
    parts = [
        f"# Auto Mode — Project: {project}\n\n",
        f"Work through the task queue for project `{project}` until it is empty.\n\n",
        "## Loop\n\n",
        "Repeat the following:\n\n",
        f"1. **Claim**: Run `volta-claim --project {project}`\n",
        "   - If output is empty: the queue is empty. **Stop and return to interactive mode.**\n",
        "   - If JSON is returned: this is your task spec + context.\n\n",
        "2. **Read context** from the JSON:\n",
        "   - `body`: your complete specification\n",
        '   - `context[].kind == "inherited"`: findings from dependency tasks\n',
        '   - `context[].kind == "handoff"`: where a previous attempt left off\n',
        '   - `context[].kind == "test_failure"`: what broke last time — fix exactly this\n\n',
        '3. **Work** on the task. Record observations with `volta-observe <id> "<note>"`.\n\n',
        '4. **Handoff** before long operations: `volta-handoff <id> "<note>"`.\n\n',
        "5. **Commit** (skip if in worktree mode — `volta-done` auto-commits):\n",
        '   `git add <files> && git commit -m "<message>"`\n\n',
        '6. **Submit**: `volta-done <id> "<summary>"`\n',
        "   - Tests pass → task marked done, loop back to step 1\n",
        "   - Tests fail → failure recorded, task reset. Loop back to step 1.\n\n",
        "## Rules\n\n",
        "- Always commit before calling `volta-done` (unless in worktree mode).\n",
        "- Never mark a task done without calling `volta-done`. It runs the tests.\n",
        "- If you see a `test_failure` context entry: fix only what broke.\n",
        "- One task per loop iteration.\n",
        "- Stop when `volta-claim` returns no output.\n\n",
        _ENV_SECTION,
    ]
    return "".join(parts)


def build_batch_prompt(entries: Sequence[TaskWithContext]) -> str:
    """Build a prompt covering several tasks to be done in order."""
    parts = [
        "# Batch Mode\n\n",
        f"Complete the following {len(entries)} task(s) in order.\n\n",
    ]
    for number, entry in enumerate(entries, start=1):
        task = entry.task
        parts += [
            f"---\n\n## Task {number}: {task.title}\n\n",
            f"**ID:** `{task.id}`\n",
            f"**Priority:** {task.priority}\n\n",
        ]
        if task.body:
            parts.append("### Specification\n\n")
            parts.append(task.body + "\n\n")
        if entry.ctxs:
            parts.append("### Context\n\n")
            for ctx in entry.ctxs:
                parts.append(f"**{ctx.kind.upper()}** (agent: {_agent_name(ctx)})\n")
                parts.append(ctx.content + "\n\n")
        parts += [
            "### Steps\n\n",
            f"1. `volta-pick {task.id}`\n",
            "2. Work on the task. Use `volta-observe` for findings.\n",
            '3. Commit (skip if worktree mode): `git add <files> && git commit -m "<message>"`\n',
            f'4. `volta-done {task.id} "<summary>"`\n\n',
        ]
    parts += [
        "---\n\n",
        "**CRITICAL:** You MUST call `volta-done` for each task to mark it complete. "
        "Without it, tasks stay claimed and block the pipeline.\n\n",
        "**After completing all tasks, return to interactive mode.**\n\n",
        _ENV_SECTION,
    ]
    return "".join(parts)