"""Command line entry point: launches the composer or manages the saved draft."""

import argparse
from datetime import datetime, timezone
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from . import __version__
from .core.drafts import DraftStoreManager
from .core.scheduler import APSchedulerTimers
from .core.translations import SUPPORTED_LANGUAGES
from .utils.config import AppConfig, ConfigManager
from .utils.errors import DailyWordError, ErrorHandler, format_error_message
from .utils.logging import get_logger, init_logging

logger = get_logger(__name__)


def setup_argument_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``dailyword`` command."""

    parser = argparse.ArgumentParser(
        prog="dailyword",
        description="Compose a short message and share it via WhatsApp",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--lang",
        choices=["auto", *SUPPORTED_LANGUAGES],
        help="Display language (default: from config, 'auto' follows the system locale)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="File logging level (default: from config)",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to an alternative config.json",
    )

    draft_group = parser.add_mutually_exclusive_group()
    draft_group.add_argument(
        "--show-draft",
        action="store_true",
        help="Print the saved draft and exit",
    )
    draft_group.add_argument(
        "--clear-draft",
        action="store_true",
        help="Delete the saved draft and exit",
    )
    return parser


def _draft_manager(config: AppConfig) -> DraftStoreManager:
    return DraftStoreManager.from_config(config.drafts, APSchedulerTimers())


def show_draft(config: AppConfig, console: Console) -> int:
    """Print the saved draft, if there is a fresh one."""

    drafts = _draft_manager(config)
    record = drafts.load_draft()

    if record is None:
        if not drafts.autosave_enabled:
            console.print("[yellow]Draft storage is unavailable.[/yellow]")
        else:
            console.print("[dim]No saved draft.[/dim]")
        return 0

    age = datetime.now(timezone.utc) - record.saved_at_utc
    minutes = int(age.total_seconds() // 60)
    title = f"[bold]{record.author_name}[/bold]" if record.author_name else "[bold]Draft[/bold]"

    console.print(Panel(
        Text(record.body),
        title=title,
        subtitle=f"saved {minutes} min ago",
        border_style="cyan",
        padding=(1, 2),
    ))
    return 0


def clear_draft(config: AppConfig, console: Console) -> int:
    drafts = _draft_manager(config)

    if not drafts.autosave_enabled:
        console.print("[yellow]Draft storage is unavailable.[/yellow]")
        return 1

    drafts.clear_draft()
    console.print("[green]Saved draft cleared.[/green]")
    return 0


def run_app(config: AppConfig, language: Optional[str]) -> int:
    from .tui.app import DailyWordApp

    app = DailyWordApp(config, language=language)
    app.run()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code
    """
    console = Console()
    parser = setup_argument_parser()
    args = parser.parse_args(argv)

    try:
        config = ConfigManager(args.config).config
    except DailyWordError as e:
        logger.error(f"Configuration error: {e.message}")
        console.print(f"[red]Configuration error: {e.message}[/red]")
        return 1

    interactive = not (args.show_draft or args.clear_draft)

    try:
        init_logging(
            args.log_level or config.logging.log_level,
            use_textual=interactive,
            max_file_size=config.logging.max_file_size,
            backup_count=config.logging.backup_count,
        )

        if args.show_draft:
            return show_draft(config, console)
        if args.clear_draft:
            return clear_draft(config, console)

        return run_app(config, args.lang)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130

    except Exception as e:
        ErrorHandler.handle(e, "dailyword")
        console.print(f"[red]Error: {format_error_message(e)}[/red]")
        return 1
