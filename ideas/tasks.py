# SPDX-License-Identifier: MIT
"""
Background task slots for the TUI.

A ``TaskSlot`` runs at most one slow job (a shell script, a batch of git
calls) at a time as a Textual thread worker. The job returns exactly one
``Finished`` message; the UI polls the slot once per tick, reads the
worker's state and merges the result itself. There is no cancellation and
no retry: a request made while a job is in flight is dropped.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from textual.dom import DOMNode
from textual.worker import Worker, WorkerState

from ideas.config import DEFAULT_MESSAGE_SECONDS
from ideas.debug_logger import get_logger


class MergeStrategy(Enum):
    """How a finished task's payload is folded into UI state."""

    PATCH_RECORD = "patch_record"
    REPLACE_ITEMS = "replace_items"
    REPLACE_STATUS = "replace_status"


class TaskKind(Enum):
    ANALYZE_PROJECT = "analyze_project"
    REFRESH_INVENTORY = "refresh_inventory"
    REFRESH_STATUS = "refresh_status"

    @property
    def merge(self) -> MergeStrategy:
        return _MERGE_STRATEGIES[self]

    @property
    def label(self) -> str:
        """User-facing name, as in "Analysis failed"."""
        return _LABELS[self]


_MERGE_STRATEGIES = {
    TaskKind.ANALYZE_PROJECT: MergeStrategy.PATCH_RECORD,
    TaskKind.REFRESH_INVENTORY: MergeStrategy.REPLACE_ITEMS,
    TaskKind.REFRESH_STATUS: MergeStrategy.REPLACE_STATUS,
}

_LABELS = {
    TaskKind.ANALYZE_PROJECT: "Analysis",
    TaskKind.REFRESH_INVENTORY: "Refresh",
    TaskKind.REFRESH_STATUS: "Status check",
}


@dataclass
class Finished:
    """Terminal message of a task.

    ``payload`` is None on failure; ``target`` names the record a
    PATCH_RECORD task worked on. An empty ``message`` shows nothing.
    """

    kind: TaskKind
    success: bool
    message: str = ""
    payload: Any = None
    target: Optional[str] = None


Work = Callable[[], Optional[Finished]]
Merge = Callable[[Finished], None]
# (job, category) -> worker handle exposing ``state``, ``result`` and ``error``
Runner = Callable[[Callable[[], Optional[Finished]], str], Worker]


def worker_runner(node: DOMNode) -> Runner:
    """Runner that starts jobs as thread workers owned by ``node``.

    One worker group per category; a failing job ends in
    ``WorkerState.ERROR`` instead of exiting the app.
    """

    def run(job: Callable[[], Optional[Finished]], category: str) -> Worker:
        return node.run_worker(
            job,
            name=f"ideas-{category}",
            group=category,
            thread=True,
            exit_on_error=False,
        )

    return run


class TaskSlot:
    """One background task category (e.g. "projects" or "status").

    Attributes:
        busy: True while a task is in flight
        message: Progress text while busy, then the result text until it expires
        message_deadline: Clock time at which ``message`` is cleared, if any
        target: Record the in-flight task works on
    """

    def __init__(
        self,
        category: str,
        runner: Runner,
        message_seconds: float = DEFAULT_MESSAGE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.category = category
        self.message_seconds = message_seconds
        self._runner = runner
        self._clock = clock
        self.busy = False
        self.message: Optional[str] = None
        self.message_deadline: Optional[float] = None
        self.target: Optional[str] = None
        self.kind: Optional[TaskKind] = None
        self._worker: Optional[Worker] = None
        self._mergers: Dict[MergeStrategy, Merge] = {}

    @property
    def in_flight(self) -> bool:
        return self._worker is not None

    @property
    def worker(self) -> Optional[Worker]:
        """Handle of the in-flight job, None when idle."""
        return self._worker

    def on_merge(self, strategy: MergeStrategy, merge: Merge) -> None:
        """Register how results of ``strategy`` are merged by ``poll()``."""
        self._mergers[strategy] = merge

    def start(
        self,
        kind: TaskKind,
        work: Work,
        progress_message: Optional[str] = None,
        target: Optional[str] = None,
    ) -> bool:
        """Hand ``work`` to the runner. Returns False if already busy."""
        if self._worker is not None:
            return False

        self.busy = True
        self.kind = kind
        self.target = target
        self.message = progress_message
        self.message_deadline = None

        get_logger().task_started(self.category, kind.value, target)
        self._worker = self._runner(self._job(kind, work), self.category)
        return True

    def _job(self, kind: TaskKind, work: Work) -> Callable[[], Optional[Finished]]:
        category = self.category

        def job() -> Optional[Finished]:
            started = time.monotonic()
            try:
                result = work()
            except Exception as e:
                get_logger().task_finished(
                    category, kind.value, False, str(e), (time.monotonic() - started) * 1000
                )
                raise
            if result is not None:
                get_logger().task_finished(
                    category,
                    kind.value,
                    result.success,
                    result.message,
                    (time.monotonic() - started) * 1000,
                )
            return result

        return job

    def poll(self) -> Optional[Finished]:
        """Non-blocking check for a result; merges it when one arrived.

        A job that was cancelled or returned nothing clears the busy state
        silently: no merge, no message. A job that raised becomes a failed
        ``Finished``.
        """
        worker = self._worker
        if worker is None:
            return None
        state = worker.state
        if state not in (WorkerState.SUCCESS, WorkerState.ERROR, WorkerState.CANCELLED):
            return None

        kind = self.kind
        target = self.target
        self._worker = None
        self.busy = False
        self.target = None
        self.kind = None

        if state is WorkerState.ERROR:
            received = Finished(kind, False, f"{kind.label} failed: {worker.error}", target=target)
        else:
            received = worker.result if state is WorkerState.SUCCESS else None

        if received is None:
            self.message = None
            self.message_deadline = None
            return None

        if received.message:
            self.message = received.message
            self.message_deadline = self._clock() + self.message_seconds
        else:
            self.message = None
            self.message_deadline = None

        merge = self._mergers.get(received.kind.merge)
        if merge is not None:
            merge(received)
        return received

    def tick(self) -> bool:
        """Expire the transient message. Returns True if it was cleared."""
        if self.message_deadline is not None and self._clock() >= self.message_deadline:
            self.message = None
            self.message_deadline = None
            return True
        return False
