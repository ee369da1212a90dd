# tests/0_tooling/test_lint__no_from_app_imports.py
"""Custom lint rule: enforce `import <mod> as mod_<mod>` in tests.

Tests import project modules as module objects so monkeypatch and
patch_everywhere can replace attributes where the code looks them up.
A `from assetpipe.x import f` binds `f` early and silently dodges patches.
"""

import ast
from pathlib import Path

import assetpipe.meta as mod_meta


def test_no_app_from_imports() -> None:
    tests_dir = Path(__file__).parents[1]
    bad_files: list[Path] = []

    for path in tests_dir.rglob("*.py"):
        tree = ast.parse(path.read_text(encoding="utf-8"))
        for node in ast.walk(tree):
            if (
                isinstance(node, ast.ImportFrom)
                and node.module
                and node.module.startswith(mod_meta.PROGRAM_PACKAGE)
            ):
                bad_files.append(path)
                break  # one hit per file

    if bad_files:
        print(
            "\n❌ Disallowed `from "
            + mod_meta.PROGRAM_PACKAGE
            + ".<module> import ...` imports found in test files:"
        )
        for path in bad_files:
            print(f"  - {path}")
        print(
            "\nUse module-level imports:"
            f"\n  ❌ from {mod_meta.PROGRAM_PACKAGE}.module import function"
            f"\n  ✅ import {mod_meta.PROGRAM_PACKAGE}.module as mod_module"
        )
        xmsg = (
            f"{len(bad_files)} test file(s) use disallowed"
            f" `from {mod_meta.PROGRAM_PACKAGE}.*` imports."
        )
        raise AssertionError(xmsg)
