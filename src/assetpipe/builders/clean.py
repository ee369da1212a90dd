# src/assetpipe/builders/clean.py

import shutil
from pathlib import Path

from assetpipe.context import BuildContext
from assetpipe.logs import getAppLogger
from assetpipe.utils import get_glob_root, plural


def _check_safe_to_clean(out: Path, ctx: BuildContext) -> None:
    """Refuse to empty a directory that holds the project or its sources."""
    protected = [ctx.root]
    for name, category in ctx.config["paths"].items():
        src_root = get_glob_root(category["input"])
        protected.append((ctx.root / src_root).resolve())
        if name == "scripts" and "entry" in category:
            protected.append(category["entry"])

    for path in protected:
        if path == out or out in path.parents:
            xmsg = f"Refusing to clean {out}: it contains {path}"
            raise ValueError(xmsg)


def _warn_outputs_outside(out: Path, ctx: BuildContext) -> list[str]:
    """Categories whose output is not under `out` and so survives a clean."""
    logger = getAppLogger()
    outside = []
    for name, category in ctx.config["paths"].items():
        output = category["output"]
        if output != out and out not in output.parents:
            logger.warning(
                "%s output %s is outside the output root %s and is not cleaned",
                name,
                output,
                out,
            )
            outside.append(name)
    return outside


def clean_output(ctx: BuildContext) -> list[Path]:
    """Synchronously delete everything under the output root.

    The root directory itself is kept (created if missing). Errors are
    not caught: a half-cleaned tree must fail the build.
    """
    logger = getAppLogger()
    out = ctx.out
    _check_safe_to_clean(out, ctx)
    _warn_outputs_outside(out, ctx)

    if not out.exists():
        logger.debug("Output root %s does not exist; creating it", out)
        out.mkdir(parents=True)
        return []

    removed: list[Path] = []
    for child in sorted(out.iterdir()):
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
        removed.append(child)
        logger.trace("removed %s", child)

    logger.info("🧹 Cleaned %d item%s from %s", len(removed), plural(removed), out)
    return removed
