"""
Command-Line Interface for the D30 Printer.

Usage:
    d30 TEXT                          - Find the printer by name and print TEXT
    d30 TEXT --addr XX:XX:XX:XX:XX:XX - Print to a specific printer
    d30 TEXT --preview label.png      - Render only, no Bluetooth
"""

import asyncio
import logging
import sys

import click

from .address import BLUETOOTH_MAC_PATTERN
from .config import PrintConfig
from .discovery import DEFAULT_SCAN_TIME
from .errors import ImageError, PrinterError
from .printer import D30Printer

LOG_FORMAT = "[%(levelname)s] %(message)s"


def validate_bluetooth_address(ctx, param, value):
    """Validate Bluetooth address format.

    Args:
        ctx: Click context
        param: Click parameter
        value: Address value to validate

    Returns:
        The validated address (uppercased for consistency)

    Raises:
        click.BadParameter: If the address format is invalid
    """
    if value is None:
        return None
    if BLUETOOTH_MAC_PATTERN.match(value):
        return value.upper()
    raise click.BadParameter(
        f"Invalid Bluetooth address format: '{value}'. "
        "Expected format: XX:XX:XX:XX:XX:XX"
    )


def configure_logging(debug: bool):
    """Send log records to stderr, DEBUG and up with --debug, else INFO."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    # Bleak is chatty at DEBUG
    logging.getLogger("bleak").setLevel(logging.INFO)


@click.command(context_settings={"auto_envvar_prefix": "D30"})
@click.argument("text")
@click.option(
    "--addr",
    "-a",
    callback=validate_bluetooth_address,
    help="MAC address of the D30 label maker (if omitted, matches by name)",
)
@click.option(
    "--font",
    "-f",
    help="Font name or path to a font file (default: embedded font)",
)
@click.option(
    "--scan-time",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_SCAN_TIME,
    show_default=True,
    help="Seconds to scan for the printer",
)
@click.option(
    "--preview",
    type=click.Path(dir_okay=False, writable=True),
    help="Save the rendered label to this image file instead of printing",
)
@click.option("--debug/--no-debug", default=False, help="Enable debug output")
def main(text, addr, font, scan_time, preview, debug):
    """Print TEXT on a D30 label."""
    configure_logging(debug)

    config = PrintConfig(text=text, address=addr, font=font, scan_time=scan_time)
    printer = D30Printer(config)

    try:
        if preview:
            image = printer.render()
            try:
                image.save(preview)
            except (ValueError, OSError) as e:
                raise ImageError(f"Failed to save preview: {e}") from e
            click.echo(f"Label saved to {preview}")
            return

        asyncio.run(printer.run())
    except PrinterError as e:
        click.echo(f"Print failed: {e}", err=True)
        sys.exit(1)

    click.echo("Print complete!")


if __name__ == "__main__":
    main()
