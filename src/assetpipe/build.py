# src/assetpipe/build.py
"""Task wiring: the full build graph and single-task runs."""

from functools import partial

from .builders import BUILDERS, clean_output
from .constants import CATEGORIES
from .context import BuildContext
from .logs import getAppLogger
from .tasks import GraphReport, TaskGraph, TaskNode


# Every task name the CLI accepts, in help order.
TASK_NAMES: tuple[str, ...] = ("build", "watch", "clean", *CATEGORIES)


def make_build_graph(ctx: BuildContext) -> TaskGraph:
    """`clean`, then every category builder concurrently."""
    graph = TaskGraph()
    graph.add(TaskNode("clean", partial(clean_output, ctx)))
    for name in CATEGORIES:
        graph.add(TaskNode(name, partial(BUILDERS[name], ctx), requires=("clean",)))
    return graph


def make_task_graph(name: str, ctx: BuildContext) -> TaskGraph:
    """A graph for one named task (`build`, `clean` or a category)."""
    if name == "build":
        return make_build_graph(ctx)
    if name == "clean":
        return TaskGraph([TaskNode("clean", partial(clean_output, ctx))])
    if name in BUILDERS:
        return TaskGraph([TaskNode(name, partial(BUILDERS[name], ctx))])

    xmsg = f"Unknown task {name!r} (expected one of {', '.join(TASK_NAMES)})"
    raise ValueError(xmsg)


async def run_task(name: str, ctx: BuildContext) -> GraphReport:
    logger = getAppLogger()
    graph = make_task_graph(name, ctx)
    logger.debug("Running %s in %s mode: %s", name, ctx.mode, ", ".join(graph.names))
    return await graph.run()


async def run_build(ctx: BuildContext) -> GraphReport:
    logger = getAppLogger()
    logger.info("🏗️  Building (%s) → %s", ctx.mode, ctx.out)
    report = await run_task("build", ctx)
    if report.ok:
        logger.info("🎉 Build completed.")
    return report
