# src/assetpipe/context.py

from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Protocol

from .config import CategoryResolved, Mode, RootConfigResolved


class ReloadNotifier(Protocol):
    """Pushes changes to connected browsers."""

    def reload(self) -> None: ...

    def inject(self, paths: Sequence[Path]) -> None: ...


@dataclass(frozen=True)
class BuildContext:
    """Everything a task may read: the resolved config and the build mode.

    Mode is carried here rather than read from a global so each builder
    invocation states which mode it runs in.
    """

    config: RootConfigResolved
    mode: Mode
    notifier: ReloadNotifier | None = None

    @classmethod
    def from_config(cls, config: RootConfigResolved) -> "BuildContext":
        return cls(config=config, mode=config["mode"])

    @property
    def is_dev(self) -> bool:
        return self.mode == "development"

    @property
    def root(self) -> Path:
        return self.config["root"]

    @property
    def out(self) -> Path:
        return self.config["out"]

    def category(self, name: str) -> CategoryResolved:
        return self.config["paths"][name]

    def with_notifier(self, notifier: ReloadNotifier | None) -> "BuildContext":
        return replace(self, notifier=notifier)
