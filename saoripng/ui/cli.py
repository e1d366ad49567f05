"""Main CLI entry point - drives the plugin from the command line."""

import sys
from pathlib import Path
from typing import Optional

import typer

from saoripng.core.configs import PluginSettings, get_plugin_settings, load_raw_config
from saoripng.host.plugin import SaoriPlugin, configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="saoripng - SAORI/1.0 image plugin driver.",
)


# ============================================================================
# Shared Setup
# ============================================================================

def _load_settings() -> PluginSettings:
    """Load settings and configure logging. Exits on error."""
    try:
        settings = get_plugin_settings(load_raw_config())
    except ValueError as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(1)

    configure_logging(settings.log_level)
    return settings


def _read_input(source: str) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    try:
        return Path(source).read_bytes()
    except OSError as e:
        typer.echo(f"Error reading {source}: {e}", err=True)
        raise typer.Exit(1)


# ============================================================================
# Commands
# ============================================================================

@app.command()
def request(
    source: str = typer.Argument("-", help="Raw request file, '-' for stdin"),
    base_dir: Optional[Path] = typer.Option(
        None, "--base-dir", "-d", help="Plugin directory for relative paths"
    ),
) -> None:
    """
    Handle one raw SAORI request and write the raw response to stdout.

    Example: printf 'GET Version SAORI/1.0\\r\\n\\r\\n' | saori_png request
    """
    settings = _load_settings()
    if base_dir is not None:
        settings.base_dir = base_dir

    plugin = SaoriPlugin.from_settings(settings)
    plugin.load()
    try:
        reply = plugin.request(_read_input(source))
    finally:
        plugin.unload()

    sys.stdout.buffer.write(reply)
    sys.stdout.buffer.flush()
    if not reply:
        raise typer.Exit(1)


@app.command()
def inspect(
    source: str = typer.Argument(..., help="Raw request file, '-' for stdin"),
) -> None:
    """
    Parse a raw request and show its fields (nothing is executed).
    """
    from saoripng.ui.inspect_commands import show_request

    ok = show_request(_read_input(source))
    if not ok:
        raise typer.Exit(1)


@app.command("image-type")
def image_type(
    path: Path = typer.Argument(..., help="Image file"),
) -> None:
    """
    Print the detected image type tag (UNKNOWN when not recognised).
    """
    from saoripng.image.resize import get_image_type

    _load_settings()
    typer.echo(get_image_type(path))


@app.command()
def resize(
    src: Path = typer.Argument(..., help="Source image"),
    dst: Path = typer.Argument(..., help="Destination PNG"),
    width: int = typer.Option(0, "--width", "-w", help="Width: >0 pixels, 0 keep, <0 keep ratio"),
    height: int = typer.Option(0, "--height", "-h", help="Height: >0 pixels, 0 keep, <0 keep ratio"),
) -> None:
    """
    Resize an image to PNG and print the result code (0 on success).

    Example: saori_png resize in.webp out.png --width -1 --height 100
    """
    from saoripng.image.resize import ResizedPngError, to_resized_png

    settings = _load_settings()
    try:
        to_resized_png(src, dst, width, height, max_pixels=settings.max_image_pixels)
    except ResizedPngError as e:
        typer.echo(str(int(e.code)))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(int(e.code))

    typer.echo("0")


@app.command()
def settings(
    action: str = typer.Argument("show", help="Action: show"),
) -> None:
    """
    Show the effective configuration.

    Lazy import of inspect_commands keeps rich off the request path.
    """
    from saoripng.ui.inspect_commands import handle_settings
    handle_settings(action)


def run() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run()
