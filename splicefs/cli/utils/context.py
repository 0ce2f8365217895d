"""CLI context management."""

from dataclasses import dataclass

from rich.console import Console

from splicefs.cli.utils.output import OutputFormatter
from splicefs.infrastructure.filesystem import FileSession


@dataclass
class CLIContext:
    """Context object passed through CLI commands."""

    debug: bool
    formatter: OutputFormatter
    console: Console
    session: FileSession
