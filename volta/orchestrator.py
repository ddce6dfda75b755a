"""Orchestrator configuration, status snapshots and task-event wake-ups."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field
from typing import AsyncIterable, Callable, Iterable, Protocol

DEFAULT_MAX_AGENTS = 1
DEFAULT_POLL_INTERVAL = 10.0
WAKE_STATUSES = frozenset({"ready", "done"})


class AgentRecord(Protocol):
    """The agent fields the orchestrator looks at."""

    role: str
    status: str


class TaskRecord(Protocol):
    """The task fields the orchestrator looks at."""

    status: str


@dataclass(frozen=True)
class TaskEvent:
    """A change of status of a task in the queue."""

    task_id: str
    status: str


@dataclass
class OrchestratorStatus:
    """A snapshot of agent, task and merge-queue counts."""

    active_agents: int = 0
    idle_agents: int = 0
    working_agents: int = 0
    planner_agents: int = 0
    ready_tasks: int = 0
    done_tasks: int = 0
    failed_tasks: int = 0
    claimed_tasks: int = 0
    merge_queue: int = 0

    @classmethod
    def from_snapshot(
        cls,
        agents: Iterable[AgentRecord],
        tasks: Iterable[TaskRecord],
        merge_entries: Iterable[object],
    ) -> OrchestratorStatus:
        """Count agents by role and status, tasks by status, and merge entries."""
        status = cls()
        for agent in agents:
            status.active_agents += 1
            if agent.role == "planner":
                status.planner_agents += 1
            elif agent.status == "idle":
                status.idle_agents += 1
            elif agent.status == "working":
                status.working_agents += 1

        task_counters = {
            "ready": "ready_tasks",
            "done": "done_tasks",
            "failed": "failed_tasks",
            "claimed": "claimed_tasks",
        }
        for task in tasks:
            counter = task_counters.get(task.status)
            if counter is not None:
                setattr(status, counter, getattr(status, counter) + 1)

        status.merge_queue = sum(1 for _ in merge_entries)
        return status

    def __str__(self) -> str:
        planners = f", {self.planner_agents} planners" if self.planner_agents > 0 else ""
        return (
            f"Agents: {self.active_agents} active ({self.idle_agents} idle, "
            f"{self.working_agents} working{planners}) | "
            f"Tasks: {self.ready_tasks} ready, {self.claimed_tasks} claimed, "
            f"{self.done_tasks} done, {self.failed_tasks} failed | "
            f"Merge queue: {self.merge_queue}"
        )


@dataclass
class OrchestratorConfig:
    """Settings for the poll-dispatch-reconcile loop.

    A non-positive ``max_agents`` becomes 1 and a non-positive
    ``poll_interval`` (seconds) becomes 10. ``max_agents`` may be changed
    safely from other threads while the loop runs.
    """

    tmux_session: str = ""
    project_id: str = ""
    max_agents: int = DEFAULT_MAX_AGENTS
    poll_interval: float = DEFAULT_POLL_INTERVAL
    use_worktrees: bool = False
    claude_md_path: str = ""
    database_url: str = ""
    notify_func: Callable[[str], None] | None = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_agents <= 0:
            self.max_agents = DEFAULT_MAX_AGENTS
        if self.poll_interval <= 0:
            self.poll_interval = DEFAULT_POLL_INTERVAL

    def set_max_agents(self, count: int) -> None:
        """Change the number of executor slots at runtime."""
        with self._lock:
            self.max_agents = count

    def get_max_agents(self) -> int:
        """Return the current number of executor slots."""
        with self._lock:
            return self.max_agents

    def available_slots(self, agents: Iterable[AgentRecord]) -> int:
        """Executor slots left free; planners and dead agents do not count."""
        executors = sum(
            1 for agent in agents if agent.status != "dead" and agent.role == "executor"
        )
        return self.get_max_agents() - executors

    def notify(self, message: str) -> None:
        """Pass a status message to ``notify_func`` if one is set."""
        if self.notify_func is not None:
            self.notify_func(message)


async def notify_bridge(
    task_events: AsyncIterable[TaskEvent], notify: asyncio.Event
) -> None:
    """Set ``notify`` whenever a task becomes ready or done.

    Runs until ``task_events`` is exhausted or the coroutine is cancelled.
    Several events before the waiter wakes collapse into one signal.
    """
    async for event in task_events:
        if event.status in WAKE_STATUSES:
            notify.set()