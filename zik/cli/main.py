#!/usr/bin/env python3
"""
🎵 zik - Create a database of your music library
CLI interface with Typer and Rich
"""

import sqlite3
import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from zik import __version__
from zik.core.config import ConfigStore, format_config_row
from zik.core.database import GET_CATALOGUE_COUNTS, DatabaseManager
from zik.core.errors import PersistenceError, ZikError
from zik.core.models import Metadata, ScanResult
from zik.utils.library_scanner import LibraryScanner
from zik.utils.metadata_reader import SUPPORTED_FORMATS

# Configure Rich console
console = Console()

# Create Typer app
app = typer.Typer(
    name="zik",
    help="🎵 Create a database of your music library",
    add_completion=False,
    rich_markup_mode="rich",
)


def configure_logging(verbose: bool) -> None:
    """Route loguru to stderr, at DEBUG when verbose and WARNING otherwise"""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def print_plain(text: str) -> None:
    """Print text verbatim: no markup, highlighting or wrapping"""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def open_database() -> DatabaseManager:
    db = DatabaseManager()
    db.open()
    return db


def fail(err: Exception) -> None:
    """Print a surfaced error and exit non-zero"""
    console.print(f"[red]❌ {escape(str(err))}[/red]", soft_wrap=True)
    raise typer.Exit(1)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"zik {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose debug logging"
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """🎵 Create a database of your music library"""
    configure_logging(verbose)


@app.command()
def config(
    key: Optional[str] = typer.Argument(None, help="Configuration key"),
    value: Optional[str] = typer.Argument(None, help="New value for the key"),
) -> None:
    """⚙️ View or set the configuration"""
    try:
        with open_database() as db:
            store = ConfigStore(db)
            if key is None:
                for row_key, row_value in store.all():
                    print_plain(format_config_row(row_key, row_value))
            elif value is None:
                print_plain(format_config_row(key, store.get(key)))
            else:
                store.set(key, value)
    except ZikError as e:
        fail(e)


def print_file(path: Path, metadata: Optional[Metadata]) -> None:
    """Print one progress line per scanned file"""
    print_plain(f"file: {path}")
    if metadata is None:
        console.print("  [dim]not a supported audio file[/dim]")
        return
    print_plain(
        f'  artist="{metadata.artist_or_unknown()}", '
        f'album="{metadata.album_or_unknown()}", '
        f'album artist="{metadata.album_artist or ""}", '
        f'year="{metadata.year or ""}", '
        f'track="{metadata.track_name or ""}", '
        f"track number={metadata.track_number}"
    )


def show_summary(db: DatabaseManager, result: ScanResult) -> None:
    """Show scan counters and catalogue totals"""
    table = Table(
        title="📊 Scan Summary", show_header=True, header_style="bold magenta"
    )
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Library", str(result.library))
    table.add_row("Files Seen", str(result.files_seen))
    table.add_row("Tracks Saved", str(result.tracks_saved))
    table.add_row("Unsupported Files", str(result.unsupported))
    table.add_row("Files Without Title", str(result.untitled))
    for name, query in GET_CATALOGUE_COUNTS.items():
        try:
            row = db.execute_fetchone(query)
        except sqlite3.Error as e:
            raise PersistenceError(e) from e
        table.add_row(f"Catalogue {name.title()}", str(row[0] if row else 0))

    console.print(table)


@app.command(help=f"🔍 Scan your music library ({', '.join(SUPPORTED_FORMATS)} files)")
def scan(
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Do not print a line per file"
    ),
) -> None:
    try:
        with open_database() as db:
            scanner = LibraryScanner(db, on_file=None if quiet else print_file)
            library = scanner.config.library_path()
            if library is not None:
                print_plain(f'scanning library "{library}"')
            result = scanner.scan()
            show_summary(db, result)
    except ZikError as e:
        fail(e)


def main() -> None:
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
