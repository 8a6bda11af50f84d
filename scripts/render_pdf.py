#!/usr/bin/env python3
"""
Web Page to PDF CLI

Renders web pages to PDF files sized to their content using the rendering context.

Commands:
    render - Render URLs given on the command line
    batch  - Render every entry of a YAML manifest

Examples:\n

    render_pdf.py render https://example.com=example.pdf                  # Explicit output name

    render_pdf.py render https://example.com/docs --target "#content"     # Derived output name

    render_pdf.py batch manifests/docs.yaml --keep-going                   # Continue past failures
"""

import asyncio
import os
from pathlib import Path
from typing import List, Optional, Union

import typer
from dotenv import load_dotenv
from playwright.async_api import Error as PlaywrightError
from typing_extensions import Annotated

from pagefit.contexts.intake import InvalidManifestError, load_manifest, parse_entry_pairs
from pagefit.contexts.rendering import (
    EntryResult,
    PlaywrightEngine,
    RenderError,
    RendererContext,
    RendererOptions,
    UrlEntry,
)
from pagefit.contexts.rendering.logger import setup_rendering_logger
from pagefit.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Render web pages to content-sized PDF files",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


OutputDirOption = Annotated[
    Optional[Path],
    typer.Option("--output-dir", "-o", help="Directory for rendered PDFs (default: PAGEFIT_OUTPUT_DIR or ./)"),
]
TargetOption = Annotated[
    Optional[str],
    typer.Option("--target", "-t", help="CSS selector of the element that sizes the PDF page"),
]
LaunchArgOption = Annotated[
    Optional[List[str]],
    typer.Option("--launch-arg", "-a", help="Browser launch flag (repeatable), e.g. --launch-arg=--no-sandbox"),
]
IdleTimeoutOption = Annotated[
    Optional[int],
    typer.Option("--idle-timeout", help="Network-idle deadline in ms (0 waits forever)", min=0),
]
KeepGoingOption = Annotated[
    bool,
    typer.Option("--keep-going", "-k", help="Render remaining entries after a failure"),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Echo debug logging to the console"),
]
LogDirOption = Annotated[
    Optional[Path],
    typer.Option("--log-dir", help="Directory for render.log (default: timestamped under LOGS_PATH)"),
]


@app.command("render")
def render_command(
    urls: Annotated[
        List[str],
        typer.Argument(help="URL=OUTPUT.pdf pairs or bare URLs (output name derived from URL)"),
    ],
    output_dir: OutputDirOption = None,
    target: TargetOption = None,
    launch_args: LaunchArgOption = None,
    idle_timeout: IdleTimeoutOption = None,
    keep_going: KeepGoingOption = False,
    verbose: VerboseOption = False,
    log_dir: LogDirOption = None,
):
    """
    Render URLs given on the command line.

    Examples:\n

        $ render_pdf.py render https://example.com/a=a.pdf https://example.com/b=b.pdf

        $ render_pdf.py render https://example.com --output-dir outs/pdfs --launch-arg=--no-sandbox
    """
    try:
        entries = parse_entry_pairs(urls)
    except InvalidManifestError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    options = _build_options(
        output_dir=output_dir, target_class=target, idle_timeout_ms=idle_timeout
    )
    code = _run_batch(entries, options, launch_args, keep_going, verbose, log_dir)
    raise typer.Exit(code=code)


@app.command("batch")
def batch_command(
    manifest_path: Annotated[
        Path,
        typer.Argument(help="YAML manifest with an 'entries' list"),
    ],
    output_dir: OutputDirOption = None,
    target: TargetOption = None,
    launch_args: LaunchArgOption = None,
    idle_timeout: IdleTimeoutOption = None,
    keep_going: KeepGoingOption = False,
    verbose: VerboseOption = False,
    log_dir: LogDirOption = None,
):
    """
    Render every entry of a YAML manifest.

    Command-line --output-dir and --target override the manifest's values.

    Examples:\n

        $ render_pdf.py batch manifests/docs.yaml

        $ render_pdf.py batch manifests/docs.yaml --keep-going --verbose
    """
    try:
        manifest = load_manifest(manifest_path)
    except (FileNotFoundError, InvalidManifestError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    options = _build_options(
        output_dir=output_dir or manifest.output_dir,
        target_class=target or manifest.target_class,
        idle_timeout_ms=idle_timeout,
    )
    code = _run_batch(manifest.entries, options, launch_args, keep_going, verbose, log_dir)
    raise typer.Exit(code=code)


def _run_batch(
    entries: List[UrlEntry],
    options: RendererOptions,
    launch_args: Optional[List[str]],
    keep_going: bool,
    verbose: bool,
    log_dir: Optional[Path],
) -> int:
    """Render entries and print a summary. Returns the process exit code."""
    log_dir = log_dir or LOGS_PATH / f"render_{now()}"
    log_file = setup_rendering_logger(log_dir, options, console_level="DEBUG" if verbose else "INFO")

    typer.secho(f"\nRendering {len(entries)} page(s)", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Output: {options.output_dir}")
    typer.echo(f"Target: {options.target_class}")
    typer.echo("")

    try:
        rendered = asyncio.run(_render(entries, options, launch_args, keep_going))
    except (RenderError, PlaywrightError) as e:
        typer.secho(f"\n✗ Rendering failed: {e}", fg=typer.colors.RED, bold=True)
        typer.echo(f"  Log: {log_file}\n")
        return 1

    typer.echo("")
    if keep_going:
        return _report_results(rendered, log_file)

    typer.secho(f"✓ Rendered {len(rendered)} PDF(s)", fg=typer.colors.GREEN, bold=True)
    for output in rendered:
        typer.echo(f"  {options.output_dir / output}")
    typer.echo(f"  Log: {log_file}\n")
    return 0


async def _render(
    entries: List[UrlEntry],
    options: RendererOptions,
    launch_args: Optional[List[str]],
    keep_going: bool,
) -> Union[List[str], List[EntryResult]]:
    """Run one batch inside an init/dispose bracket."""
    context = RendererContext(options, engine=PlaywrightEngine(headless=options.headless))
    try:
        await context.init(launch_args or None)
        if keep_going:
            rendered = await context.render_url_results(entries)
        else:
            rendered = await context.render_url(entries)
    except BaseException:
        await context.dispose_after_failure()
        raise

    await context.dispose()
    return rendered


def _build_options(**overrides) -> RendererOptions:
    """Build options from the environment and CLI overrides, exiting on invalid values."""
    try:
        return RendererOptions.from_env(**overrides)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _report_results(results: List[EntryResult], log_file: Path) -> int:
    failed = [result for result in results if not result.success]

    if failed:
        typer.secho(
            f"✗ {len(failed)} of {len(results)} page(s) failed", fg=typer.colors.RED, bold=True
        )
    else:
        typer.secho(f"✓ Rendered {len(results)} PDF(s)", fg=typer.colors.GREEN, bold=True)

    for result in results:
        if result.success:
            size = f"{result.page_size.width}x{result.page_size.height}px"
            typer.echo(f"  ✓ {result.output_path} ({size})")
        else:
            typer.secho(f"  ✗ {result.entry.output}: {result.error}", fg=typer.colors.RED)

    typer.echo(f"  Log: {log_file}\n")
    return 1 if failed else 0


if __name__ == "__main__":
    app()
