"""Console reporter — Rich terminal output for probe results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sqlprobe.utils.formatting import format_percent, status_color, status_symbol

if TYPE_CHECKING:
    from sqlprobe.config import ConnectionConfig
    from sqlprobe.probe import ProbeResult


class ConsoleReporter:
    """Render probe results to the terminal using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def print_header(self) -> None:
        self.console.print(
            Panel("[bold white]SQL Server Connection Tester[/]", style="bold blue", expand=False)
        )

    def print_config(self, config: ConnectionConfig, title: str = "Connection Settings") -> None:
        """Print a parsed connection config with the password masked."""
        table = Table(title=title, show_header=False)
        table.add_column("Setting", style="bold")
        table.add_column("Value")

        table.add_row("Server", escape(f"{config.server}:{config.port}"))
        table.add_row("Database", escape(config.database))
        table.add_row("User", escape(config.user))
        table.add_row("Password", "***" if config.password else "")
        table.add_row("Encrypt", str(config.encrypt))
        table.add_row("TrustServerCertificate", str(config.trust_server_certificate))

        self.console.print(table)

    def print_result(self, result: ProbeResult) -> None:
        """Print the outcome for a single server."""
        color = status_color(result.status)
        marker = status_symbol(result.status)
        self.console.print(f"\n[bold]Testing: {escape(result.name)}[/bold] (slot {result.number})")

        if result.config is None:
            self.console.print(f"[{color}]{marker} Connection string not configured[/]")
            return

        self.console.print(f"Connection string: {escape(result.preview)}")
        self.print_config(result.config)

        if result.errors:
            for err in result.errors:
                self.console.print(f"[{color}]{marker} {escape(err)}[/]")
            return

        if not result.succeeded:
            self.console.print(f"[{color}]{marker} {escape(result.error)}[/]")
            self.console.print("\nPossible solutions:")
            for i, hint in enumerate(result.hints, start=1):
                self.console.print(f"  {i}. {hint}")
            return

        self.console.print(f"[{color}]{marker} Connected successfully![/]")
        self.console.print(f"  Server: {escape(result.server_name)}")
        self.console.print(f"  Version: {escape(result.version)}")
        self.console.print(f"  Active sessions: {result.active_sessions}")
        if result.cpu_supported:
            self.console.print(f"  SQL Server CPU: {format_percent(result.sql_cpu)}")
        else:
            self.console.print("  [yellow]CPU query not supported on this version[/]")

    def print_summary(self, results: list[ProbeResult]) -> None:
        """Print a one-line-per-server summary table."""
        if not results:
            self.console.print("[dim]No servers configured.[/dim]")
            return

        table = Table(title="Summary")
        table.add_column("Slot", justify="right")
        table.add_column("Name")
        table.add_column("Server")
        table.add_column("Status")

        for result in results:
            server = f"{result.config.server}:{result.config.port}" if result.config else ""
            table.add_row(
                str(result.number),
                escape(result.name),
                escape(server),
                f"[{status_color(result.status)}]{result.status}[/]",
            )

        self.console.print(table)

    def print_results(self, results: list[ProbeResult]) -> None:
        """Print every result followed by the summary."""
        self.print_header()
        for result in results:
            self.print_result(result)
        self.console.print()
        self.print_summary(results)
