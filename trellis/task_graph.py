"""
Task scheduling.

The context hands tasks to a TaskGraph and asks it to process them; it never looks
at the graph's internal state. Tasks run one at a time, each after its dependencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Set

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .context import Context

logger = logging.getLogger(__name__)


class Task:
    type = "task"

    def __init__(self, ctx: "Context"):
        self.ctx = ctx

    @property
    def key(self) -> str:
        raise NotImplementedError

    async def get_dependencies(self) -> List["Task"]:
        return []

    async def process(self) -> Any:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.key}>"


@dataclass(frozen=True)
class TaskResult:
    type: str
    key: str
    output: Any


class TaskGraph:
    def __init__(self, ctx: "Context"):
        self.ctx = ctx
        self._pending: Dict[str, Task] = {}

    @property
    def pending(self) -> List[Task]:
        return list(self._pending.values())

    async def add_task(self, task: Task) -> None:
        if task.key in self._pending:
            return
        self._pending[task.key] = task
        logger.debug("queued task %s", task.key)

    async def process_tasks(self) -> Dict[str, TaskResult]:
        results: Dict[str, TaskResult] = {}
        in_progress: Set[str] = set()

        async def run(task: Task, chain: List[str]) -> None:
            if task.key in results:
                return
            if task.key in in_progress:
                cycle = chain + [task.key]
                raise ConfigurationError(
                    f"Circular task dependency: {' -> '.join(cycle)}",
                    {"cycle": cycle},
                )

            in_progress.add(task.key)
            for dependency in await task.get_dependencies():
                await run(dependency, chain + [task.key])

            logger.info("processing %s", task.key)
            output = await task.process()
            results[task.key] = TaskResult(type=task.type, key=task.key, output=output)
            in_progress.discard(task.key)

        tasks = list(self._pending.values())
        self._pending.clear()
        for task in tasks:
            await run(task, [])
        return results
