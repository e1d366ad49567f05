"""
Inspection Commands

Rich rendering of parsed requests and of the effective settings.
This module is lazy-loaded only when these commands are used.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from saoripng.core.configs import CONFIG_PATH, get_plugin_settings, load_raw_config
from saoripng.core.request import SaoriRequest, SaoriRequestError

console = Console()


def show_request(data: bytes) -> bool:
    """
    Parse ``data`` and print the request fields.

    Returns:
        True if the request parsed, False if it would be rejected
    """
    try:
        request = SaoriRequest.from_bytes(data)
    except SaoriRequestError as e:
        console.print(f"[red]400 Bad Request[/red] {type(e).__name__}: [bold]{e.reason.name}[/bold]")
        if e.detail:
            console.print(f"[dim]{escape(e.detail)}[/dim]")
        return False

    table = Table(title="SAORI request")
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("Version", request.version.value)
    table.add_row("Command", request.command.value)
    table.add_row("Charset", f"{request.charset.value} (codepage {request.charset.codepage})")
    table.add_row(
        "SecurityLevel",
        request.security_level.value if request.security_level else "[dim]-[/dim]",
    )
    table.add_row("Sender", escape(request.sender) if request.sender is not None else "[dim]-[/dim]")
    for index, value in enumerate(request.argument):
        table.add_row(f"Argument{index}", escape(value))

    console.print(table)
    return True


def handle_settings(action: str) -> None:
    """
    Route to appropriate settings action.

    Args:
        action: Only 'show' is supported
    """
    if action != "show":
        console.print(f"[red]Unknown action: {action}[/red]")
        console.print("Available actions: show")
        raise SystemExit(1)

    try:
        settings = get_plugin_settings(load_raw_config())
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]")
        raise SystemExit(1)

    table = Table(title="saoripng settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("config file", f"{CONFIG_PATH} {'' if CONFIG_PATH.exists() else '(missing)'}")
    table.add_row("base_dir", str(settings.base_dir) if settings.base_dir else "[dim]current directory[/dim]")
    table.add_row("log_level", settings.log_level)
    table.add_row(
        "max_image_pixels",
        str(settings.max_image_pixels) if settings.max_image_pixels else "[dim]Pillow default[/dim]",
    )

    console.print(table)
