"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from upmon import __version__
from upmon.core.errors import UpmonError
from upmon.core.model import OutputConfig
from upmon.core.service import MonitorService

app = typer.Typer(
    help=(
        "Monitor UPower devices over D-Bus for changes to certain properties and print "
        "a summary of each change in an easily parsable, line-oriented format."
    ),
    add_completion=False,
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"upmon {__version__}")
        raise typer.Exit()


@app.command()
def main(
    path: list[str] | None = typer.Option(
        None,
        "--path",
        "-p",
        metavar="PATH:PROPERTIES",
        help=(
            "Device to monitor, as its object path and a comma-delimited list of properties, "
            "e.g. /org/freedesktop/UPower/devices/battery_BAT0:State,Percentage. "
            "The device must implement org.freedesktop.UPower.Device. Can be repeated."
        ),
    ),
    list_properties: bool = typer.Option(
        False, "--list-properties", "-l", help="Print the properties upmon can monitor and exit."
    ),
    output_file: Path | None = typer.Option(
        None,
        "--output-file",
        "-o",
        help="Append output to this file instead of writing to standard output.",
    ),
    separator: str = typer.Option(
        "=", "--separator", "-s", help="String separating each property from its new value."
    ),
    delimiter: str = typer.Option(
        " ", "--delimiter", "-d", help="String delimiting each property-value pair."
    ),
    rules: bool = typer.Option(
        False, "--rules", "-r", help="Print the D-Bus match rules for the given paths and exit."
    ),
    timestamp: bool = typer.Option(
        False, "--timestamp", "-t", help="Prefix each line with an ISO 8601 UTC timestamp."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug details to stderr."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Watch UPower device properties and print one line per change.

    Property values are not escaped; choose a separator and delimiter that cannot
    appear in the values you monitor.
    """
    _configure_logging(verbose)
    try:
        service = MonitorService()
        if list_properties:
            for spec in service.list_properties():
                typer.echo(spec.name)
            return

        paths = path or []
        if rules:
            for rule in service.rules(paths):
                typer.echo(rule)
            return

        config = OutputConfig(
            separator=separator,
            delimiter=delimiter,
            include_timestamp=timestamp,
            output_file=output_file,
        )
        service.watch(paths, config)
    except UpmonError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None
    except KeyboardInterrupt:
        raise typer.Exit(code=0) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
