import logging
from collections import Counter
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from rich.box import HEAVY, ROUNDED, SIMPLE
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from crptapi.domain.interfaces.user_interface import UserInterface
from crptapi.domain.models.common import DocumentLabel
from crptapi.domain.models.submission import (
    Accepted,
    CompletionResult,
    Rejected,
    SerializationFailed,
    SubmissionState,
    TransportFailure,
)

logger = logging.getLogger(__name__)

OUTCOME_STYLES = {
    SubmissionState.ACCEPTED: "green",
    SubmissionState.REJECTED: "yellow",
    SubmissionState.TRANSPORT_FAILURE: "red",
    SubmissionState.SERIALIZATION_FAILED: "magenta",
}


class ConsoleDisplay(UserInterface):
    """Concrete implementation of UserInterface using the rich library for console output."""

    def __init__(self, console: Optional[Console] = None):
        """Initializes the rich Console."""
        self._console = console or Console()

    @property
    def console(self) -> Console:
        """Get the Rich console instance for direct operations."""
        return self._console

    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message in a distinct style.

        Args:
            error_message: The error message to display.
        """
        panel = Panel(
            Text(error_message, style="white"),
            title="[bold red]Error[/bold red]",
            border_style="red",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message.

        Args:
            info_message: The informational message to display.
        """
        self.console.print(f"[blue]Info:[/blue] {escape(info_message)}")

    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message with enhanced styling.

        Args:
            warning_message: The warning message to display.
        """
        logger.warning(f"Display warning: {warning_message}")
        panel = Panel(
            Text(warning_message, style="white"),
            title="[bold yellow]Warning[/bold yellow]",
            border_style="yellow",
            box=HEAVY,
            padding=(0, 1)
        )
        self.console.print(panel)

    def display_request_sent(self, label: DocumentLabel) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        self.console.print(f"[dim]{timestamp}[/dim] [[cyan]{escape(label)}[/cyan]] Document creation request sent")

    def display_outcome(self, result: CompletionResult) -> None:
        """Prints one line per terminal outcome. Safe to call from worker threads."""
        style = OUTCOME_STYLES.get(result.state, "white")
        if isinstance(result, Accepted):
            message = f"Document {result.label} created"
        elif isinstance(result, Rejected):
            message = f"Document {result.label} not created (status {result.status_code})"
        elif isinstance(result, TransportFailure):
            message = f"Document {result.label} not created (transport failure: {type(result.cause).__name__})"
        elif isinstance(result, SerializationFailed):
            message = f"Document {result.label} not created (could not be serialized: {result.cause})"
        else:
            message = f"Document {getattr(result, 'label', '?')}: {result}"
        self.console.print(f"[{style}]{escape(message)}[/{style}]")

    def display_summary(self, results: Sequence[CompletionResult], elapsed_secs: float) -> None:
        """Displays a table with the number of requests per outcome."""
        counts = Counter(result.state for result in results)
        table = Table(title="Submission Summary", box=ROUNDED, border_style="cyan", padding=(0, 1))
        table.add_column("Outcome", style="bold")
        table.add_column("Requests", justify="right")
        for state, style in OUTCOME_STYLES.items():
            table.add_row(f"[{style}]{state.value}[/{style}]", str(counts.get(state, 0)))
        table.add_row("total", str(len(results)))
        table.caption = f"Finished in {elapsed_secs:.2f}s"
        self.console.print("")
        self.console.print(table)

    def display_settings(self, settings: Dict[str, Any]) -> None:
        table = Table(show_header=True, box=SIMPLE, border_style="cyan", padding=(0, 1))
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        for key, value in settings.items():
            table.add_row(escape(key), "-" if value is None else escape(str(value)))
        self.console.print(table)
