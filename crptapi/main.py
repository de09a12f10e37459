"""Main entry point for the crptapi application.

Sets up the Typer CLI application, performs dependency injection (Composition Root),
defines CLI commands, and delegates execution to the CommandHandler.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

# --- Core Layer ---
from crptapi.core.command_handler import CommandHandler
from crptapi.core.document_client import DocumentClient
from crptapi.domain.errors import ConfigurationError

# --- Infrastructure Layer ---
# Config
from crptapi.infrastructure.config.settings import (
    get_api_token,
    get_base_url,
    get_config,
    get_create_path,
    get_effective_settings,
    get_max_workers,
    get_request_limit,
    get_request_timeout,
    get_window_seconds,
    load_configuration,
)
# UI
from crptapi.infrastructure.cli.display import ConsoleDisplay
# Monitoring
from crptapi.infrastructure.monitoring.logger_setup import DEFAULT_LOG_FORMAT, resolve_level, setup_logging
# Samples
from crptapi.infrastructure.samples.document_factory import SampleDocumentFactory
# Transport / Serialization
from crptapi.infrastructure.serialization.json_serializer import JsonDocumentSerializer
from crptapi.infrastructure.transport.httpx_transport import HttpxTransport

logger = logging.getLogger(__name__)


# --- Dependency Injection Container (Manual) ---

def configure_logging(verbose: bool = False) -> None:
    """Applies logging settings from configuration (or DEBUG when verbose)."""
    log_level = logging.DEBUG if verbose else resolve_level(get_config('logging.level', 'INFO'))
    log_file = get_config('logging.file')
    log_format = get_config('logging.format', DEFAULT_LOG_FORMAT)
    setup_logging(log_level=log_level, log_file=log_file, log_format=log_format)


def create_dependencies(limit: Optional[int] = None, window: Optional[float] = None) -> Dict[str, Any]:
    """Creates and wires up all dependencies for one command run.

    This acts as the Composition Root. Command-line overrides take precedence
    over configured values.

    Raises:
        ConfigurationError: If the limit, window or any other setting is invalid.
    """
    logger.debug("Initializing application dependencies...")
    dependencies: Dict[str, Any] = {}

    dependencies['ui'] = ConsoleDisplay()
    dependencies['sample_factory'] = SampleDocumentFactory()

    effective_limit = limit if limit is not None else get_request_limit()
    effective_window = window if window is not None else get_window_seconds()

    dependencies['transport'] = HttpxTransport(
        timeout=get_request_timeout(),
        api_token=get_api_token(),
    )
    try:
        dependencies['client'] = DocumentClient.configure(
            limit=effective_limit,
            window=effective_window,
            transport=dependencies['transport'],
            serializer=JsonDocumentSerializer(),
            base_url=get_base_url(),
            create_path=get_create_path(),
            max_workers=get_max_workers(),
        )
    except ConfigurationError:
        dependencies['transport'].close()
        raise

    dependencies['command_handler'] = CommandHandler(
        client=dependencies['client'],
        ui=dependencies['ui'],
        sample_factory=dependencies['sample_factory'],
    )
    logger.debug("All dependencies initialized successfully.")
    return dependencies


def _build_or_exit(limit: Optional[int], window: Optional[float]) -> Dict[str, Any]:
    try:
        return create_dependencies(limit=limit, window=window)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        ConsoleDisplay().display_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1)


# --- Typer App Definition ---
app = typer.Typer(
    name="crptapi",
    help="Rate-limited client for the document registration API.",
    add_completion=False,
)

# --- CLI Commands ---

# Shared rate-limit options
LimitOption = Annotated[
    Optional[int],
    typer.Option("--limit", "-l", help="Maximum requests per window. Uses configuration if not set.")
]
WindowOption = Annotated[
    Optional[float],
    typer.Option("--window", "-w", help="Window length in seconds. Uses configuration if not set.")
]


@app.command(name="submit-samples")
def submit_samples(
    count: Annotated[int, typer.Option("--count", "-n", help="Number of random documents to submit.")] = 20,
    limit: LimitOption = None,
    window: WindowOption = None,
):
    """Generate random documents and submit them through the rate gate."""
    dependencies = _build_or_exit(limit, window)
    handler: CommandHandler = dependencies['command_handler']
    with dependencies['client']:
        results = handler.handle_submit_samples(count)
    if len(results) < count:
        raise typer.Exit(code=1)


@app.command()
def submit(
    files: Annotated[List[Path], typer.Argument(
        exists=True, file_okay=True, dir_okay=False, readable=True, resolve_path=True,
        help="JSON files holding one document or a list of documents.")],
    limit: LimitOption = None,
    window: WindowOption = None,
):
    """Submit documents loaded from JSON files."""
    dependencies = _build_or_exit(limit, window)
    handler: CommandHandler = dependencies['command_handler']
    with dependencies['client']:
        handler.handle_submit_files(files)


@app.command(name="show-config")
def show_config():
    """Print the effective configuration."""
    try:
        settings = get_effective_settings()
    except ConfigurationError as e:
        ConsoleDisplay().display_error(f"Invalid configuration: {e}")
        raise typer.Exit(code=1)
    ConsoleDisplay().display_settings(settings)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Loads configuration and sets up logging before any command runs."""
    try:
        load_configuration()
    except ConfigurationError as e:
        ConsoleDisplay().display_error(str(e))
        raise typer.Exit(code=1)
    configure_logging(verbose)


# --- Main Execution Guard ---

def cli_entry_point():
    """Function to be called by the script entry point in pyproject.toml."""
    app()


if __name__ == "__main__":
    cli_entry_point()
