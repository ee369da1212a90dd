# src/assetpipe/server.py
"""Dev server: serve the output root, rebuild on change, live-reload browsers.

Each category glob gets its own livereload watch, registered with
`delay="forever"` so livereload never sends a reload on its own. The
watch callback schedules the category's builder on the event loop; when
it finishes, the notifier tells connected browsers what changed.
"""

import asyncio
import webbrowser
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Literal

from livereload import Server
from livereload.handlers import LiveReloadHandler

from .builders import BUILDERS
from .constants import CATEGORIES, DEFAULT_OPEN_DELAY
from .context import BuildContext
from .logs import getAppLogger
from .utils_logs import task_tag


PostAction = Literal["reload", "inject"]


@dataclass(frozen=True)
class WatchSubscription:
    glob: str  # absolute glob
    category: str
    post_action: PostAction


class LiveReloadNotifier:
    """Sends livereload protocol messages to every connected browser."""

    def __init__(self, out: Path) -> None:
        self.out = out

    def reload(self) -> None:
        getAppLogger().info("🔄 Reloading browsers")
        # '*' matches no stylesheet or image, so livereload.js reloads the page
        LiveReloadHandler.reload_waiters(path="*")

    def inject(self, paths: Sequence[Path]) -> None:
        logger = getAppLogger()
        for path in paths:
            try:
                rel = path.relative_to(self.out).as_posix()
            except ValueError:
                rel = path.name
            logger.info("💉 Injecting %s", rel)
            LiveReloadHandler.reload_waiters(path=rel)


class RebuildSupervisor:
    """Runs at most one rebuild per category.

    A new change for a category cancels the rebuild already in flight for
    it. A cancelled rebuild sends nothing to the browser.
    """

    def __init__(
        self,
        ctx: BuildContext,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.ctx = ctx
        self._loop = loop
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    def schedule(self, category: str) -> "asyncio.Task[Any]":
        loop = self._loop or asyncio.get_running_loop()
        previous = self._inflight.get(category)
        if previous is not None and not previous.done():
            getAppLogger().debug("Superseding in-flight %s rebuild", category)
            previous.cancel()

        task = loop.create_task(self._rebuild(category))
        self._inflight[category] = task
        task.add_done_callback(partial(self._forget, category))
        return task

    def _forget(self, category: str, task: "asyncio.Task[Any]") -> None:
        if self._inflight.get(category) is task:
            del self._inflight[category]

    def inflight(self) -> dict[str, "asyncio.Task[Any]"]:
        return dict(self._inflight)

    async def _rebuild(self, category: str) -> bool:
        logger = getAppLogger()
        with task_tag(category):
            logger.info("🔁 changed, rebuilding")
            try:
                await BUILDERS[category](self.ctx)
            except asyncio.CancelledError:
                logger.debug("rebuild cancelled")
                raise
            except Exception as e:  # noqa: BLE001
                # the server outlives a broken rebuild
                logger.error_if_not_debug("%s rebuild failed: %s", category, e)
                return False

            if post_action_for(category) == "reload" and self.ctx.notifier is not None:
                self.ctx.notifier.reload()
            return True

    def cancel_all(self) -> None:
        for task in self._inflight.values():
            task.cancel()


def post_action_for(category: str) -> PostAction:
    # the styles builder injects its own output
    return "inject" if category == "styles" else "reload"


class DevServer:
    def __init__(
        self,
        ctx: BuildContext,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        server_factory: Callable[[], Server] = Server,
    ) -> None:
        self.ctx = ctx.with_notifier(LiveReloadNotifier(ctx.out))
        self.loop = loop
        self.supervisor = RebuildSupervisor(self.ctx, loop)
        self._server_factory = server_factory

    @property
    def url(self) -> str:
        server = self.ctx.config["server"]
        return f"http://{server['host']}:{server['port']}/"

    def subscriptions(self) -> list[WatchSubscription]:
        subs = []
        for name in CATEGORIES:
            category = self.ctx.category(name)
            subs.append(
                WatchSubscription(
                    glob=str(self.ctx.root / category["input"]),
                    category=name,
                    post_action=post_action_for(name),
                )
            )
        return subs

    def open_browser(self) -> None:
        logger = getAppLogger()
        name = self.ctx.config["server"]["browser"]
        try:
            webbrowser.get(name).open(self.url)
        except webbrowser.Error as e:
            logger.warning("Could not open a browser: %s", e)

    def start(self) -> None:
        """Serve until interrupted. Blocks."""
        with task_tag("server"):
            self._serve()

    def _serve(self) -> None:
        logger = getAppLogger()
        opts = self.ctx.config["server"]
        server = self._server_factory()

        for sub in self.subscriptions():
            logger.trace("watching %s → %s", sub.glob, sub.category)
            server.watch(
                sub.glob, partial(self.supervisor.schedule, sub.category), delay="forever"
            )

        if opts["open"]:
            loop = self.loop or asyncio.get_event_loop()
            loop.call_later(DEFAULT_OPEN_DELAY, self.open_browser)

        logger.info("🌐 Serving %s at %s", self.ctx.out, self.url)
        try:
            server.serve(
                root=str(self.ctx.out),
                host=opts["host"],
                port=opts["port"],
                open_url_delay=None,
                live_css=True,
                default_filename="index.html",
                debug=False,
            )
        finally:
            self.supervisor.cancel_all()
            logger.info("🛑 Server stopped.")
