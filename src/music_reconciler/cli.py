"""Command line interface for music reconciler."""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import Settings, load_settings
from .context import open_context
from .domain.models import UNKNOWN_TITLE, Artist, Release, Track, joined
from .exceptions import MusicReconcilerError, PreconditionError
from .paths import track_path
from .persistence.library import Library
from .ranking.distance import levenshtein_similarity
from .reconcile import DEFAULT_CANDIDATES, apply_match, find_match
from .sources import SourceKind, create_source
from .tags.file import TrackFile

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=verbose)],
        force=True,
    )


def _run(coro) -> None:
    """Run a command coroutine, reporting library errors in red."""
    try:
        asyncio.run(coro)
    except MusicReconcilerError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        sys.exit(1)


def _format_length(track: Track) -> str:
    seconds = track.length_seconds
    if seconds is None:
        return ""
    return f"{seconds // 60}:{seconds % 60:02d}"


def _library_location(track: Track, settings: Settings) -> str:
    """Where the track belongs in the library, empty when it cannot be placed."""
    try:
        return str(track_path(track, settings))
    except PreconditionError:
        return ""


@click.group()
@click.version_option(package_name="music-reconciler")
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    help='Configuration file path'
)
@click.option('--verbose', is_flag=True, help='Verbose output')
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool):
    """Reconcile local music files with the MusicBrainz catalog."""
    _setup_logging(verbose)
    try:
        ctx.obj = load_settings(config) if config else Settings.default()
    except MusicReconcilerError as e:
        console.print(f"\n[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('title')
@click.option('--artist', 'artists', multiple=True, help='Credited artist (repeatable)')
@click.pass_obj
def search(settings: Settings, title: str, artists: Tuple[str, ...]):
    """Search catalog releases matching TITLE."""
    original = Release(title=title, artists=[Artist(name=a) for a in artists])

    async def _search():
        async with create_source(SourceKind.MUSICBRAINZ, settings.catalog) as source:
            candidates = await source.search(original)

        if not candidates:
            console.print("[yellow]No releases found[/yellow]")
            return

        table = Table(title=f"Candidates for {title}")
        table.add_column("Score", justify="right")
        table.add_column("Similarity", justify="right")
        table.add_column("Title", style="cyan")
        table.add_column("Artists")
        table.add_column("Date")
        table.add_column("Country")
        table.add_column("Tracks", justify="right")
        table.add_column("MBID", style="dim")

        for candidate in candidates:
            table.add_row(
                str(candidate.score if candidate.score is not None else ""),
                f"{levenshtein_similarity(title.lower(), candidate.title.lower()):.2f}",
                candidate.title,
                ", ".join(candidate.artist_names()),
                candidate.date or "",
                candidate.country or "",
                str(candidate.track_count or ""),
                candidate.id,
            )
        console.print(table)

    _run(_search())


@cli.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    '--candidates',
    type=int,
    default=DEFAULT_CANDIDATES,
    show_default=True,
    help='Number of search results to compare in full'
)
@click.option('--store', is_flag=True, help='Save the matched release in the library database')
@click.option('--write-tags', is_flag=True, help='Write the matched MusicBrainz identifiers into the files')
@click.pass_obj
def match(settings: Settings, paths: Tuple[Path, ...], candidates: int, store: bool, write_tags: bool):
    """Match local audio files PATHS against catalog releases."""

    async def _match():
        files = [TrackFile.open(path) for path in paths]
        release = files[0].to_release()
        originals: List[Track] = [f.to_track(release) for f in files]

        async with create_source(SourceKind.MUSICBRAINZ, settings.catalog) as source:
            best = await find_match(source, originals, release, candidates)

        if best is None:
            console.print("[yellow]No matching release found[/yellow]")
            return

        console.print(
            f"\n[bold]{joined(best.release.artists)} - {best.release.title}[/bold] "
            f"({best.release.mbid}), cost {best.cost}"
        )
        table = Table(title="Alignment")
        table.add_column("File", style="cyan")
        table.add_column("Disc", justify="right")
        table.add_column("#", justify="right")
        table.add_column("Catalog title")
        table.add_column("Length", justify="right")

        for original, candidate in best.pairs(originals):
            if candidate is None:
                table.add_row(original.path.name, "", "", "[red]unmatched[/red]", "")
            else:
                table.add_row(
                    original.path.name,
                    str(candidate.disc or ""),
                    str(candidate.number or ""),
                    candidate.title,
                    _format_length(candidate),
                )
        console.print(table)

        if store:
            matched = apply_match(originals, best)
            async with open_context(settings) as ctx:
                await Library(ctx).store_tracks(matched)
            console.print(f"[green]Stored {len(matched)} tracks[/green]")

        if write_tags:
            written = 0
            for track_file, (_, candidate) in zip(files, best.pairs(originals)):
                if candidate is not None:
                    track_file.write_ids(candidate)
                    written += 1
            console.print(f"[green]Wrote identifiers to {written} files[/green]")

    _run(_match())


@cli.command()
@click.argument('mbid')
@click.pass_obj
def show(settings: Settings, mbid: str):
    """Show a stored release and its tracks."""

    async def _show():
        async with open_context(settings) as ctx:
            library = Library(ctx)
            release = await library.fetch_release(mbid)
            tracks = await library.tracks(release=mbid)

        info_table = Table()
        info_table.add_column("Property", style="cyan")
        info_table.add_column("Value")
        info_table.add_row("Title", release.title or UNKNOWN_TITLE)
        info_table.add_row("Artists", joined(release.artists))
        for label, value in (
            ("Date", release.date),
            ("Original date", release.original_date),
            ("Country", release.country),
            ("Label", release.label),
            ("Catalog number", release.catalog_no),
            ("Media", release.media),
            ("Status", release.status),
            ("Type", release.release_type),
        ):
            if value:
                info_table.add_row(label, str(value))
        console.print(info_table)

        track_table = Table(title=f"{len(tracks)} tracks")
        track_table.add_column("Disc", justify="right")
        track_table.add_column("#", justify="right")
        track_table.add_column("Title", style="cyan")
        track_table.add_column("Artists")
        track_table.add_column("Length", justify="right")
        track_table.add_column("File", style="dim")
        track_table.add_column("Library path", style="dim")
        for track in tracks:
            track_table.add_row(
                str(track.disc or ""),
                str(track.number or ""),
                track.title,
                joined(track.artists),
                _format_length(track),
                str(track.path or ""),
                _library_location(track, settings),
            )
        console.print(track_table)

    _run(_show())


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
