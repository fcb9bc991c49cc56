"""CLI entry point for SQLProbe using Click."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click
from rich.console import Console
from rich.markup import escape

from sqlprobe import __version__
from sqlprobe.config import ProbeSettings
from sqlprobe.parsers.connection_string import detect_dialect, parse_connection_string
from sqlprobe.probe import ConnectionProbe
from sqlprobe.reporters.console_reporter import ConsoleReporter
from sqlprobe.reporters.json_reporter import JSONReporter
from sqlprobe.sources import EnvironmentSource, discover_targets

logger = logging.getLogger(__name__)

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="sqlprobe")
def main() -> None:
    """SQLProbe — SQL Server connection tester.

    Reads SQL_SERVER_<n>_CONNECTION (and optional SQL_SERVER_<n>_NAME)
    entries from the environment or a .env file, parses each connection
    string, and checks that the server accepts connections.
    """


@main.command()
@click.argument("server_number", type=click.IntRange(min=1), required=False)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Load connection strings from this .env file",
)
@click.option("--max-servers", type=click.IntRange(min=1), default=6, help="Highest slot scanned")
@click.option("--timeout", type=int, default=15, help="Login timeout in seconds")
@click.option("--driver", default="ODBC Driver 17 for SQL Server", help="ODBC driver name")
@click.option(
    "--format",
    "-f",
    "fmt",
    default="console",
    type=click.Choice(["console", "json"]),
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Write the JSON report to this file")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def test(server_number: int | None, **kwargs: Any) -> None:
    """Test one server slot, or every configured slot when none is given.

    Exits 0 once all servers have been checked, whether or not they were
    reachable; exits 1 only if the tester itself fails.
    """
    _configure_logging(kwargs.get("verbose", False))
    settings = ProbeSettings(
        max_servers=kwargs["max_servers"],
        login_timeout=kwargs["timeout"],
        odbc_driver=kwargs["driver"],
    )

    try:
        source = EnvironmentSource(env_file=kwargs.get("env_file"))
        targets = discover_targets(source, settings, only=server_number)
        results = ConnectionProbe(settings).probe_all(targets)
    except Exception as exc:
        logger.exception("Connection tester failed")
        console.print(f"[bold red]Fatal error:[/bold red] {escape(str(exc))}")
        sys.exit(1)

    fmt = kwargs.get("fmt", "console")
    output_path = kwargs.get("output")
    reporter = JSONReporter(results)

    if fmt == "json" and not output_path:
        click.echo(reporter.render())
    else:
        ConsoleReporter(console).print_results(results)

    if output_path:
        reporter.export(output_path)
        console.print(f"\n[green]Report saved to:[/green] {output_path}")


@main.command()
@click.argument("connection_string")
@click.option(
    "--format",
    "-f",
    "fmt",
    default="console",
    type=click.Choice(["console", "json"]),
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def parse(connection_string: str, fmt: str, verbose: bool) -> None:
    """Show how a connection string is normalized (password masked)."""
    _configure_logging(verbose)
    config = parse_connection_string(connection_string)

    if fmt == "json":
        data = None
        if config is not None:
            data = {"dialect": detect_dialect(connection_string).value, **config.to_dict()}
        click.echo(json.dumps(data, indent=2))
        return

    if config is None:
        console.print("[dim]Connection string not configured[/dim]")
        return

    console.print(f"Dialect: {detect_dialect(connection_string).value}")
    ConsoleReporter(console).print_config(config)
    for err in config.validate():
        console.print(f"[yellow]Warning:[/yellow] {err}")


def _configure_logging(verbose: bool) -> None:
    """Configure logging level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


if __name__ == "__main__":
    main()
