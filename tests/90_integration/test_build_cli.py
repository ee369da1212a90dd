# tests/90_integration/test_build_cli.py
"""End-to-end builds through the CLI entry point."""

import io
import shutil
from pathlib import Path

import pytest
from PIL import Image

import assetpipe.cli as mod_cli
from tests.utils import (
    FAKE_TOOLS_SUPPORTED,
    make_project,
    make_tool_config,
    write_config_file,
    write_fake_bundler,
    write_fake_prefixer,
)


pytestmark = pytest.mark.skipif(
    not FAKE_TOOLS_SUPPORTED, reason="needs shebang scripts"
)


def _png() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (32, 32), (200, 10, 10)).save(buf, format="PNG", compress_level=0)
    return buf.getvalue()


def _site(root: Path, main_js: str = "console.log('hi');\n") -> Path:
    make_project(
        root,
        {
            "src/index.html": "<link rel='stylesheet' href='css/app.min.css'>",
            "src/js/main.js": main_js,
            "src/scss/_vars.scss": "$brand: red;\n",
            "src/scss/app.scss": "@import 'vars';\nbody { color: $brand; }\n",
            "src/images/logo.png": _png(),
            "src/fonts/inter.woff2": b"wOF2",
        },
    )
    bundler = write_fake_bundler(root / "bin")
    prefixer = write_fake_prefixer(root / "bin")
    write_config_file(
        root,
        {
            "scripts": {"bundler": make_tool_config(bundler, "esbuild")},
            "styles": {"prefixer": make_tool_config(prefixer, "postcss")},
        },
    )
    return root


def _tree(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


def test_production_build_repopulates_exactly_the_outputs(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    _site(tmp_path)
    monkeypatch.chdir(tmp_path)
    assert mod_cli.main(["build"]) == 0
    (tmp_path / "dist/leftover.txt").write_text("stale")
    shutil.rmtree(tmp_path / "dist")

    # --- execute ---
    code = mod_cli.main(["build", "--production"])

    # --- verify ---
    assert code == 0
    assert _tree(tmp_path / "dist") == {
        "index.html",
        "js/main.js",
        "css/app.min.css",
        "images/logo.png",
        "fonts/inter.woff2",
    }


def test_development_build_writes_style_map(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    _site(tmp_path)
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main([])

    # --- verify ---
    assert code == 0
    css = tmp_path / "dist/css"
    assert (css / "app.min.css").exists()
    assert (css / "app.min.css.map").exists()
    js = (tmp_path / "dist/js/main.js").read_text()
    assert "sourceMappingURL=data:" in js


def test_full_build_removes_stale_outputs(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    _site(tmp_path)
    make_project(tmp_path, {"dist/old/page.html": "stale"})
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["--prod"])

    # --- verify ---
    assert code == 0
    assert not (tmp_path / "dist/old").exists()


def test_mode_from_environment(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    _site(tmp_path)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BUILD_MODE", "production")

    # --- execute ---
    code = mod_cli.main(["styles"])

    # --- verify ---
    assert code == 0
    assert not (tmp_path / "dist/css/app.min.css.map").exists()


def test_single_task_runs_only_that_category(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    # --- setup ---
    _site(tmp_path)
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["fonts"])

    # --- verify ---
    assert code == 0
    assert _tree(tmp_path / "dist") == {"fonts/inter.woff2"}


def test_script_error_fails_the_build(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    # --- setup ---
    _site(tmp_path, main_js="SYNTAX ERROR\n")
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["build"])

    # --- verify ---
    assert code == 1
    err = capsys.readouterr().err
    assert "scripts failed" in err
    # siblings still ran
    assert (tmp_path / "dist/index.html").exists()


def test_clean_task(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    # --- setup ---
    make_project(tmp_path, {"dist/a/b.txt": "x", "dist/c.txt": "y"})
    monkeypatch.chdir(tmp_path)

    # --- execute ---
    code = mod_cli.main(["clean"])

    # --- verify ---
    assert code == 0
    assert list((tmp_path / "dist").iterdir()) == []
