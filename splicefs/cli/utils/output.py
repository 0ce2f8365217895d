"""Output formatting utilities for CLI."""

import json
from enum import Enum
from typing import Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table


class OutputFormat(Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class OutputFormatter:
    """Handle output formatting for different formats."""

    def __init__(self, format_type: str = "table", console: Optional[Console] = None):
        """
        Initialize output formatter.

        Args:
            format_type: Output format (table, json, yaml)
            console: Console to print to, stdout by default
        """
        self.console = console or Console()
        try:
            self.format = OutputFormat(format_type.lower())
        except ValueError:
            self.format = OutputFormat.TABLE

    def _print_structured(self, data: Any) -> None:
        if self.format == OutputFormat.JSON:
            text = json.dumps(data, indent=2, default=str)
        else:
            text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        self.console.print(text, soft_wrap=True, markup=False, highlight=False)

    def print_list(
        self,
        items: List[Dict[str, Any]],
        columns: Optional[List[str]] = None,
        title: Optional[str] = None,
        no_headers: bool = False,
    ):
        """
        Print a list of items.

        Args:
            items: List of items to print
            columns: Column names to display (for table format)
            title: Table title (for table format)
            no_headers: Whether to hide headers (for table format)
        """
        if self.format != OutputFormat.TABLE:
            self._print_structured(items)
            return

        if not items:
            self.console.print("[dim]No items found[/dim]")
            return

        if not columns:
            columns = list(items[0].keys())

        table = Table(title=title, show_header=not no_headers)
        for col in columns:
            table.add_column(col.replace("_", " ").title())

        for item in items:
            row = []
            for col in columns:
                value = item.get(col, "")
                if value is None:
                    value = "[dim]-[/dim]"
                elif isinstance(value, bool):
                    value = "[green]✓[/green]" if value else "[red]✗[/red]"
                else:
                    value = escape(str(value))
                row.append(value)
            table.add_row(*row)

        self.console.print(table)

    def print_detail(
        self,
        item: Dict[str, Any],
        title: Optional[str] = None,
    ):
        """
        Print detailed view of a single item.

        Args:
            item: Item to print
            title: Optional title
        """
        if self.format != OutputFormat.TABLE:
            self._print_structured(item)
            return

        if title:
            self.console.print(f"[bold]{title}[/bold]\n")

        for key, value in item.items():
            formatted_key = key.replace("_", " ").title()
            if value is None:
                formatted_value = "[dim]Not set[/dim]"
            elif isinstance(value, bool):
                formatted_value = "[green]Yes[/green]" if value else "[red]No[/red]"
            elif isinstance(value, (list, dict)):
                formatted_value = json.dumps(value, indent=2)
            else:
                formatted_value = escape(str(value))

            self.console.print(f"[cyan]{formatted_key}:[/cyan] {formatted_value}")

    def print_success(self, message: str):
        """Print success message."""
        self._print_status("success", message, "[green]✓[/green]")

    def print_error(self, message: str, code: Optional[str] = None):
        """Print error message."""
        self._print_status("error", message, "[red]✗[/red]", code=code)

    def print_warning(self, message: str):
        """Print warning message."""
        self._print_status("warning", message, "[yellow]⚠[/yellow]")

    def _print_status(self, status: str, message: str, marker: str, **extra: Any):
        if self.format == OutputFormat.TABLE:
            self.console.print(f"{marker} {escape(message)}", highlight=False)
            return
        payload = {"status": status, "message": message}
        payload.update({k: v for k, v in extra.items() if v is not None})
        self._print_structured(payload)
