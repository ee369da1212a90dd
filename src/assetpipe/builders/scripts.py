# src/assetpipe/builders/scripts.py
"""Bundle the JavaScript entry point with an external bundler (esbuild)."""

from pathlib import Path

from assetpipe.context import BuildContext
from assetpipe.logs import getAppLogger
from assetpipe.tasks import BuildError
from assetpipe.tools import build_tool_command, run_tool


def bundler_arguments(ctx: BuildContext, entry: Path, outfile: Path) -> list[str]:
    """Per-invocation bundler arguments for the current mode."""
    args = [
        str(entry),
        f"--outfile={outfile}",
        f"--target={ctx.config['scripts']['target']}",
    ]
    if ctx.is_dev:
        args.append("--sourcemap=inline")
    else:
        args.extend(["--minify", '--define:process.env.NODE_ENV="production"'])
    return args


async def build_scripts(ctx: BuildContext) -> list[Path]:
    """Bundle, transpile and (in production) minify the scripts entry.

    Raises:
        BuildError: If the entry is missing, the bundler is not installed,
            or the bundler reports an error
    """
    logger = getAppLogger()
    category = ctx.category("scripts")
    entry = category["entry"]
    outfile = category["output"] / category["filename"]

    if not entry.is_file():
        raise BuildError("scripts", f"Entry file not found: {entry}")

    tool = ctx.config["scripts"]["bundler"]
    command = build_tool_command(tool, bundler_arguments(ctx, entry, outfile))
    if command is None:
        raise BuildError(
            "scripts",
            f"Bundler {tool['command']!r} not found on PATH"
            " (set scripts.bundler.path in the config)",
        )

    outfile.parent.mkdir(parents=True, exist_ok=True)
    result = await run_tool(command, cwd=ctx.root)
    if not result.ok:
        raise BuildError(
            "scripts", f"Bundler exited with code {result.returncode}:\n{result.message()}"
        )
    if not outfile.is_file():
        raise BuildError("scripts", f"Bundler produced no output at {outfile}")

    logger.info("🧵 Bundled %s → %s (%s)", entry.name, outfile, ctx.mode)
    return [outfile]
