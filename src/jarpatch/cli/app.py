# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line front end for the jar patch pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from .. import __version__
from ..config import load_config
from ..constants import EXIT_MISSING_ARGUMENT, EXIT_OK, NOTICE_LINES
from ..errors import ConfigError, PatchError, UsageError
from ..logging import PatchLogger, build_logger
from ..pipeline import PatchPipeline

app = typer.Typer(
    add_completion=False,
    help="Apply binary deltas to selected jar members and rebuild a patched copy of the jar.",
)

BANNER: tuple[str, ...] = (f"jarpatch v{__version__}", "-" * 26)

EXIT_CODES_EPILOG = (
    "Exit codes: 0 - OK; 1 - Missing required arg(s); 2 - Patching error. "
    'Tip: use the "NO_COLOR" environment variable if you want to disable colours.'
)


def _print_lines(logger: PatchLogger, lines: tuple[str, ...]) -> None:
    for line in lines:
        logger.echo(line, underline=line.endswith(":"))


def _arguments_given(ctx: typer.Context) -> bool:
    """Return whether any option came from the command line rather than its default."""

    for name in ctx.params:
        source = ctx.get_parameter_source(name)
        if source is not None and source.name != "DEFAULT":
            return True
    return False


def _require(value: Path | None, message: str) -> Path:
    if value is None:
        raise UsageError(message)
    return value


@app.command(epilog=EXIT_CODES_EPILOG)
def patch(
    ctx: typer.Context,
    input_path: Path | None = typer.Option(None, "--input", "-i", help="Jar to patch."),
    output_path: Path | None = typer.Option(None, "--output", "-o", help="Desired path of the patched jar."),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Print progress details and error help."),
    version: bool = typer.Option(False, "--version", "-v", help="Print the version of this tool."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="TOML file describing the patch set."),
    workdir: Path | None = typer.Option(None, "--workdir", "-w", help="Directory used for intermediate files."),
    bundle: Path | None = typer.Option(None, "--bundle", "-b", help="Tar bundle holding the deltas."),
    jobs: int | None = typer.Option(None, "--jobs", "-j", min=1, help="Maximum concurrent tasks per stage."),
    emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Toggle emoji in CLI output."),
    color: bool = typer.Option(True, "--color/--no-color", help="Toggle coloured CLI output."),
) -> None:
    """Create a patched jar from INPUT using the deltas in the patch bundle."""

    if version:
        typer.echo(f"v{__version__}")
        raise typer.Exit(code=EXIT_OK)
    if not _arguments_given(ctx):
        typer.echo(ctx.get_help())
        raise typer.Exit(code=EXIT_OK)

    logger = build_logger(verbose=verbose, emoji=emoji, color=color)
    _print_lines(logger, BANNER)
    try:
        source = _require(input_path, "Missing an input, please specify an -i or --input argument.")
        target = _require(output_path, "Missing an output, please specify an -o or --output argument.")
    except UsageError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=EXIT_MISSING_ARGUMENT) from exc

    overrides: dict[str, Any] = {"output": {"verbose": verbose, "emoji": emoji, "color": color}}
    if workdir is not None:
        overrides["workdir"] = workdir
    if bundle is not None:
        overrides["patch_set"] = {"bundle": bundle}
    if jobs is not None:
        overrides["jobs"] = jobs
    try:
        config = load_config(config_path, overrides=overrides)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=PatchError.exit_code) from exc

    _print_lines(logger, NOTICE_LINES)
    logger.echo(f'Creating patched jar "{target}" based on "{source}"...')

    try:
        result = PatchPipeline(config, logger=logger).run(source, target)
    except PatchError as exc:
        raise typer.Exit(code=exc.exit_code) from exc

    logger.ok(f'Success! You can find your patched jar at "{result.output}"')
    raise typer.Exit(code=EXIT_OK)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "main"]
