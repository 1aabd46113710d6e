# src/nelproxy/worker/agent.py

from __future__ import annotations

"""
Worker agent.

One pass per invocation:
- fetch all pending tasks from the dispatch API,
- keep the ones for this worker's inventory (others are left for their workers),
- build and emit an ansible-playbook command per task, in fetched order,
- acknowledge each emitted task by deleting it.

Re-running the worker re-polls. There is no loop, retry or backoff here; the
external scheduler that invokes the worker owns that policy.
"""

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from ..core.ports import CommandEmitter, DispatchPort
from ..errors import AcknowledgeError, TransportError
from ..tasks.command_builder import DEFAULT_EXECUTABLE, DEFAULT_INVENTORY_ROOT, render_command, render_json
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


class PassOutcome(StrEnum):
    PROCESSED = "processed"
    NO_MATCH = "no_match"
    EMPTY = "empty"


@dataclass(slots=True)
class PassResult:
    outcome: PassOutcome
    processed_ids: list[int] = field(default_factory=list)
    skipped: int = 0


class WorkerAgent:
    def __init__(
        self,
        dispatch: DispatchPort,
        inventory: str,
        *,
        emit: CommandEmitter = print,
        json_output: bool = False,
        stop_on_ack_failure: bool = False,
        executable: str = DEFAULT_EXECUTABLE,
        inventory_root: str = DEFAULT_INVENTORY_ROOT,
    ) -> None:
        if not inventory:
            raise ValueError("inventory is required")
        self._dispatch = dispatch
        self.inventory = inventory
        self._emit = emit
        self._json_output = json_output
        self._stop_on_ack_failure = stop_on_ack_failure
        self._executable = executable
        self._inventory_root = inventory_root

    def render(self, task: Task) -> str:
        render = render_json if self._json_output else render_command
        return render(task, executable=self._executable, inventory_root=self._inventory_root)

    def run_pass(self) -> PassResult:
        """
        Run one fetch/emit/acknowledge pass.

        Raises TransportError when the fetch fails, and AcknowledgeError when any
        emitted task could not be deleted (immediately with stop_on_ack_failure,
        otherwise after the remaining tasks were processed).
        """
        tasks = self._dispatch.fetch_tasks()
        if not tasks:
            logger.info("No tasks queued")
            return PassResult(outcome=PassOutcome.EMPTY)

        mine = [t for t in tasks if t.inventory == self.inventory]
        skipped = len(tasks) - len(mine)
        if not mine:
            logger.info("No tasks for inventory=%s (%d for others)", self.inventory, skipped)
            return PassResult(outcome=PassOutcome.NO_MATCH, skipped=skipped)

        result = PassResult(outcome=PassOutcome.PROCESSED, skipped=skipped)
        failed: list[int] = []

        for task in mine:
            self._emit(self.render(task))
            logger.info("Emitted task id=%s playbook=%s", task.id, task.command.playbook)

            try:
                self._dispatch.acknowledge(task.id)
            except TransportError as exc:
                logger.error("Acknowledge failed task_id=%s: %s", task.id, exc)
                if self._stop_on_ack_failure:
                    raise AcknowledgeError([task.id], f"acknowledge failed for task id {task.id}: {exc}") from exc
                failed.append(task.id)
                continue

            result.processed_ids.append(task.id)

        if failed:
            raise AcknowledgeError(failed)
        return result
