# src/assetpipe/tasks.py
"""A small task graph: nodes are tasks, edges are must-complete-before.

Nodes whose prerequisites have all succeeded run concurrently on the
current event loop. A failed node never cancels its siblings; its
dependents are reported as skipped.
"""

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Literal

from .logs import getAppLogger
from .utils import plural
from .utils_logs import task_tag


TaskStatus = Literal["ok", "failed", "skipped"]
TaskFunc = Callable[[], Awaitable[Any] | Any]


class BuildError(RuntimeError):
    """A task failed in a way that should fail the build."""

    def __init__(self, task: str, message: str) -> None:
        super().__init__(f"[{task}] {message}")
        self.task = task


@dataclass
class TaskNode:
    name: str
    func: TaskFunc
    requires: tuple[str, ...] = ()


@dataclass
class TaskResult:
    name: str
    status: TaskStatus
    duration: float = 0.0
    error: BaseException | None = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class GraphReport:
    results: dict[str, TaskResult] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(r.ok for r in self.results.values())

    @property
    def failed(self) -> list[str]:
        return [n for n, r in self.results.items() if r.status == "failed"]

    @property
    def skipped(self) -> list[str]:
        return [n for n, r in self.results.items() if r.status == "skipped"]


class TaskGraph:
    def __init__(self, nodes: Iterable[TaskNode] = ()) -> None:
        self._nodes: dict[str, TaskNode] = {}
        for node in nodes:
            self.add(node)

    def add(self, node: TaskNode) -> None:
        if node.name in self._nodes:
            xmsg = f"Duplicate task name: {node.name!r}"
            raise ValueError(xmsg)
        self._nodes[node.name] = node

    def task(
        self, name: str, *, requires: Iterable[str] = ()
    ) -> Callable[[TaskFunc], TaskFunc]:
        """Decorator form of add()."""

        def decorator(func: TaskFunc) -> TaskFunc:
            self.add(TaskNode(name, func, tuple(requires)))
            return func

        return decorator

    @property
    def names(self) -> list[str]:
        return list(self._nodes)

    def topological_order(self) -> list[str]:
        """Return node names so each comes after its prerequisites.

        Raises:
            ValueError: On an unknown prerequisite or a cycle
        """
        for node in self._nodes.values():
            for req in node.requires:
                if req not in self._nodes:
                    xmsg = f"Task {node.name!r} requires unknown task {req!r}"
                    raise ValueError(xmsg)

        order: list[str] = []
        state: dict[str, str] = {}  # "visiting" | "done"

        def visit(name: str, chain: list[str]) -> None:
            if state.get(name) == "done":
                return
            if state.get(name) == "visiting":
                cycle = " → ".join([*chain, name])
                xmsg = f"Task graph has a cycle: {cycle}"
                raise ValueError(xmsg)
            state[name] = "visiting"
            for req in self._nodes[name].requires:
                visit(req, [*chain, name])
            state[name] = "done"
            order.append(name)

        for name in self._nodes:
            visit(name, [])
        return order

    async def _run_node(
        self,
        node: TaskNode,
        prerequisites: list["asyncio.Future[TaskResult]"],
    ) -> TaskResult:
        logger = getAppLogger()
        upstream = await asyncio.gather(*prerequisites)
        with task_tag(node.name):
            blocked = [r.name for r in upstream if not r.ok]
            if blocked:
                logger.warning(
                    "Skipped: prerequisite %s did not succeed", ", ".join(blocked)
                )
                return TaskResult(node.name, "skipped")

            logger.info("▶️  started")
            start = time.perf_counter()
            try:
                value = node.func()
                if inspect.isawaitable(value):
                    value = await value
            except asyncio.CancelledError:
                raise
            except Exception as e:  # noqa: BLE001
                duration = time.perf_counter() - start
                logger.error_if_not_debug("%s failed: %s", node.name, e)
                return TaskResult(node.name, "failed", duration, error=e)

            duration = time.perf_counter() - start
            logger.info("✅ done (%.2fs)", duration)
            return TaskResult(node.name, "ok", duration, value=value)

    async def run(self) -> GraphReport:
        """Run every node, respecting prerequisites; never raises for task errors."""
        logger = getAppLogger()
        order = self.topological_order()
        futures: dict[str, asyncio.Future[TaskResult]] = {}
        for name in order:
            node = self._nodes[name]
            deps = [futures[r] for r in node.requires]
            futures[name] = asyncio.ensure_future(self._run_node(node, deps))

        results = await asyncio.gather(*futures.values())
        report = GraphReport({r.name: r for r in results})

        if report.ok:
            logger.debug("All %d task%s succeeded", len(results), plural(results))
        else:
            logger.error(
                "Failed: %s%s",
                ", ".join(report.failed) or "none",
                f" (skipped: {', '.join(report.skipped)})" if report.skipped else "",
            )
        return report
