# tests/50_core/test_make_build_graph.py

import asyncio
from functools import partial
from pathlib import Path

import pytest

import assetpipe.build as mod_build
import assetpipe.builders as mod_builders
import assetpipe.context as mod_context
import assetpipe.tasks as mod_tasks
from tests.utils import make_ctx, make_project


def test_build_graph_shape(tmp_path: Path) -> None:
    # --- execute ---
    graph = mod_build.make_build_graph(make_ctx(tmp_path))

    # --- verify ---
    order = graph.topological_order()
    assert order[0] == "clean"
    assert sorted(order[1:]) == ["fonts", "html", "images", "scripts", "styles"]


def test_unknown_task_raises(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Unknown task 'biuld'"):
        mod_build.make_task_graph("biuld", make_ctx(tmp_path))


def test_single_category_task_does_not_clean(tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"src/index.html": "<p>", "dist/keep.txt": "keep"})

    # --- execute ---
    report = asyncio.run(mod_build.run_task("html", make_ctx(tmp_path)))

    # --- verify ---
    assert report.ok
    assert list(report.results) == ["html"]
    assert (tmp_path / "dist/keep.txt").exists()
    assert (tmp_path / "dist/index.html").exists()


def test_output_is_empty_when_builders_start(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Every builder sees a freshly emptied output root."""
    # --- setup ---
    make_project(tmp_path, {"dist/stale.css": "old", "dist/js/old.js": "old"})
    seen: dict[str, list[str]] = {}

    def make_snapshot(name: str) -> mod_builders.Builder:
        async def snapshot(ctx: mod_context.BuildContext) -> list[Path]:
            seen[name] = sorted(p.name for p in ctx.out.iterdir())
            return []

        return snapshot

    for name in list(mod_builders.BUILDERS):
        monkeypatch.setitem(mod_builders.BUILDERS, name, make_snapshot(name))

    # --- execute ---
    report = asyncio.run(mod_build.run_build(make_ctx(tmp_path)))

    # --- verify ---
    assert report.ok
    assert seen == {name: [] for name in mod_builders.BUILDERS}


def test_failed_clean_skips_every_builder(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    called: list[str] = []

    async def builder(_ctx: mod_context.BuildContext) -> list[Path]:
        called.append("builder")
        return []

    for name in list(mod_builders.BUILDERS):
        monkeypatch.setitem(mod_builders.BUILDERS, name, builder)
    ctx = make_ctx(tmp_path, raw={"out": "."})

    # --- execute ---
    report = asyncio.run(mod_build.run_build(ctx))

    # --- verify ---
    assert not report.ok
    assert report.failed == ["clean"]
    assert sorted(report.skipped) == sorted(mod_builders.BUILDERS)
    assert called == []


def test_custom_output_root_is_cleaned_and_populated(tmp_path: Path) -> None:
    # --- setup ---
    make_project(
        tmp_path,
        {
            "src/index.html": "<p>",
            "src/fonts/a.woff2": b"wOF2",
            "public/stale.txt": "stale",
            "dist/untouched.txt": "keep",
        },
    )
    ctx = make_ctx(tmp_path, raw={"out": "public"})
    graph = mod_build.make_task_graph("clean", ctx)
    for name in ("html", "fonts"):
        graph.add(
            mod_tasks.TaskNode(
                name, partial(mod_builders.BUILDERS[name], ctx), requires=("clean",)
            )
        )

    # --- execute ---
    report = asyncio.run(graph.run())

    # --- verify ---
    assert report.ok
    public = tmp_path / "public"
    assert sorted(p.relative_to(public).as_posix() for p in public.rglob("*")) == [
        "fonts",
        "fonts/a.woff2",
        "index.html",
    ]
    assert sorted(p.name for p in (tmp_path / "dist").iterdir()) == ["untouched.txt"]
