"""
Entity-to-table mappings.

Each table declares its name and columns and knows how to decode a row
into an entity, encode an entity into a row, hydrate the relationships of a
decoded entity and store an entity together with everything it owns.

Role credits (performers, producers, ...) live in one link table per role.
Every role uses the same two operations, :func:`resolve` and :func:`link`,
against its own table.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from datetime import date, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar

from ..domain.models import UNKNOWN_TITLE, Artist, Release, Track
from ..exceptions import AmbiguousError, DecodeError, NotFoundError, PreconditionError
from ..tags.format import Format
from .database import Database
from .query import Filter, QueryBuilder, link_upsert

if TYPE_CHECKING:
    from ..context import LibraryContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRACK_ROLES: Tuple[Tuple[str, str], ...] = (
    ("artists", "track_artists"),
    ("performers", "track_performers"),
    ("engineers", "track_engineers"),
    ("mixers", "track_mixers"),
    ("producers", "track_producers"),
    ("lyricists", "track_lyricists"),
    ("writers", "track_writers"),
    ("composers", "track_composers"),
)

RELEASE_ROLES: Tuple[Tuple[str, str], ...] = (
    ("artists", "release_artists"),
)


# Row decoding helpers: optional columns never fail, they become None.


def _value(row: sqlite3.Row, column: str) -> Any:
    try:
        return row[column]
    except (IndexError, KeyError):
        return None


def _text(row: sqlite3.Row, column: str) -> Optional[str]:
    value = _value(row, column)
    return value if isinstance(value, str) else None


def _required_text(row: sqlite3.Row, column: str, table: str) -> str:
    value = _value(row, column)
    if not isinstance(value, str):
        raise DecodeError(
            f"Column {table}.{column} must be text, got {type(value).__name__}"
        )
    return value


def _int(row: sqlite3.Row, column: str) -> Optional[int]:
    value = _value(row, column)
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _date(row: sqlite3.Row, column: str) -> Optional[date]:
    value = _text(row, column)
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _string_list(row: sqlite3.Row, column: str) -> List[str]:
    value = _text(row, column)
    if value is None:
        return []
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError:
        return []
    if not isinstance(decoded, list):
        return []
    return [str(item) for item in decoded]


def _instruments(row: sqlite3.Row) -> List[str]:
    # Credit rows carry their own instruments; the artist row is the default
    if _text(row, "credit_instruments") is not None:
        return _string_list(row, "credit_instruments")
    return _string_list(row, "instruments")


def _date_text(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


class Table(ABC, Generic[T]):
    """Mapping between one entity type and its table."""

    name: ClassVar[str]
    columns: ClassVar[Tuple[str, ...]]

    @property
    def query(self) -> QueryBuilder:
        return QueryBuilder(self.name, self.columns)

    @abstractmethod
    def decode(self, row: sqlite3.Row) -> T:
        """Build an entity from a row; relationships are left empty."""

    @abstractmethod
    def encode(self, entity: T) -> Tuple[Any, ...]:
        """Row values in ``columns`` order."""

    async def hydrate(self, db: Database, entity: T, cache: Dict[str, Any]) -> None:
        """Populate relationship fields after :meth:`decode`.

        ``cache`` is shared by every entity hydrated in the same call, so
        related rows loaded once are reused.
        """

    @abstractmethod
    async def store(self, db: Database, entity: T) -> None:
        """Upsert the entity and cascade into what it owns."""

    def _decode(self, row: sqlite3.Row) -> T:
        try:
            return self.decode(row)
        except DecodeError:
            raise
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Could not decode row from {self.name}: {e}") from e


class ArtistTable(Table[Artist]):
    name = "artists"
    columns = ("mbid", "name", "sort_name", "instruments")

    def decode(self, row: sqlite3.Row) -> Artist:
        return Artist(
            mbid=_text(row, "mbid"),
            name=_required_text(row, "name", self.name),
            join_phrase=_text(row, "join_phrase"),
            sort_name=_text(row, "sort_name"),
            instruments=_instruments(row),
        )

    def encode(self, entity: Artist) -> Tuple[Any, ...]:
        return (entity.mbid, entity.name, entity.sort_name, json.dumps(entity.instruments))

    async def store(self, db: Database, entity: Artist) -> None:
        await db.execute(self.query.upsert(), self.encode(entity))


ARTISTS = ArtistTable()


async def resolve(db: Database, link_table: str, owner_id: Optional[str]) -> List[Artist]:
    """Artists linked to ``owner_id`` through ``link_table``, in link order."""
    if owner_id is None:
        return []
    rows = await db.fetch_all(ARTISTS.query.linked_select(link_table), (owner_id,))
    return [ARTISTS._decode(row) for row in rows]


async def link(db: Database, link_table: str, owner_id: str, artist: Artist) -> None:
    """Upsert the ``(owner_id, artist)`` pair into ``link_table``.

    The join phrase and instruments belong to this credit, not to the artist.
    """
    await db.execute(
        link_upsert(link_table),
        (owner_id, artist.mbid, artist.join_phrase, json.dumps(artist.instruments)),
    )


async def _store_credits(db: Database, link_table: str, owner_id: str, artists: Iterable[Artist]) -> None:
    for artist in artists:
        if artist.mbid is None:
            logger.warning(f"Skipping {link_table} credit for {artist.name!r}: artist has no mbid")
            continue
        await ARTISTS.store(db, artist)
        await link(db, link_table, owner_id, artist)


def _require_mbid(entity: Any, kind: str) -> str:
    if not entity.mbid:
        raise PreconditionError(f"Cannot store {kind} {entity.title!r} without an mbid")
    return entity.mbid


class ReleaseTable(Table[Release]):
    name = "releases"
    columns = (
        "mbid",
        "release_group_mbid",
        "asin",
        "title",
        "discs",
        "media",
        "tracks",
        "country",
        "label",
        "catalog_no",
        "status",
        "release_type",
        "date",
        "original_date",
        "script",
    )

    def decode(self, row: sqlite3.Row) -> Release:
        return Release(
            mbid=_text(row, "mbid"),
            release_group_mbid=_text(row, "release_group_mbid"),
            asin=_text(row, "asin"),
            title=_required_text(row, "title", self.name),
            discs=_int(row, "discs"),
            media=_text(row, "media"),
            tracks=_int(row, "tracks"),
            country=_text(row, "country"),
            label=_text(row, "label"),
            catalog_no=_text(row, "catalog_no"),
            status=_text(row, "status"),
            release_type=_text(row, "release_type"),
            date=_date(row, "date"),
            original_date=_date(row, "original_date"),
            script=_text(row, "script"),
        )

    def encode(self, entity: Release) -> Tuple[Any, ...]:
        return (
            entity.mbid,
            entity.release_group_mbid,
            entity.asin,
            entity.title,
            entity.discs,
            entity.media,
            entity.tracks,
            entity.country,
            entity.label,
            entity.catalog_no,
            entity.status,
            entity.release_type,
            _date_text(entity.date),
            _date_text(entity.original_date),
            entity.script,
        )

    async def hydrate(self, db: Database, entity: Release, cache: Dict[str, Any]) -> None:
        for attr, link_table in RELEASE_ROLES:
            setattr(entity, attr, await resolve(db, link_table, entity.mbid))

    async def store(self, db: Database, entity: Release) -> None:
        mbid = _require_mbid(entity, "release")
        await db.execute(self.query.upsert(), self.encode(entity))
        for attr, link_table in RELEASE_ROLES:
            await _store_credits(db, link_table, mbid, getattr(entity, attr))
        logger.info(f"Stored release {entity.title!r} ({mbid})")


RELEASES = ReleaseTable()


class TrackTable(Table[Track]):
    name = "tracks"
    columns = (
        "mbid",
        "title",
        "length",
        "disc",
        "disc_mbid",
        "number",
        "genres",
        "release",
        "format",
        "path",
    )

    def decode(self, row: sqlite3.Row) -> Track:
        length = _int(row, "length")
        release = _text(row, "release")
        format_ = _text(row, "format")
        path = _text(row, "path")
        return Track(
            mbid=_text(row, "mbid"),
            title=_required_text(row, "title", self.name),
            length=timedelta(milliseconds=length) if length is not None else None,
            disc=_int(row, "disc"),
            disc_mbid=_text(row, "disc_mbid"),
            number=_int(row, "number"),
            genres=_string_list(row, "genres"),
            # Reference only; hydration swaps in the stored release.
            release=Release(title=UNKNOWN_TITLE, mbid=release) if release else None,
            format=Format.from_ext(format_) if format_ else None,
            path=Path(path) if path else None,
        )

    def encode(self, entity: Track) -> Tuple[Any, ...]:
        length = None
        if entity.length is not None:
            length = entity.length // timedelta(milliseconds=1)
        return (
            entity.mbid,
            entity.title,
            length,
            entity.disc,
            entity.disc_mbid,
            entity.number,
            json.dumps(entity.genres),
            entity.release.mbid if entity.release else None,
            entity.format.ext if entity.format else None,
            str(entity.path) if entity.path else None,
        )

    async def hydrate(self, db: Database, entity: Track, cache: Dict[str, Any]) -> None:
        for attr, link_table in TRACK_ROLES:
            setattr(entity, attr, await resolve(db, link_table, entity.mbid))

        if entity.release is None or entity.release.mbid is None:
            return
        release_id = entity.release.mbid
        key = f"{RELEASES.name}:{release_id}"
        if key not in cache:
            try:
                cache[key] = await _fetch(db, RELEASES, release_id, cache)
            except NotFoundError:
                logger.warning(f"Track {entity.mbid} references missing release {release_id}")
                cache[key] = None
        entity.release = cache[key]

    async def store(self, db: Database, entity: Track) -> None:
        mbid = _require_mbid(entity, "track")
        if entity.release is not None:
            await RELEASES.store(db, entity.release)
        await db.execute(self.query.upsert(), self.encode(entity))
        for attr, link_table in TRACK_ROLES:
            await _store_credits(db, link_table, mbid, getattr(entity, attr))
        logger.info(f"Stored track {entity.title!r} ({mbid})")


TRACKS = TrackTable()


# Generic operations


async def _filter(
    db: Database,
    table: Table[T],
    filters: Iterable[Filter],
    extra: Iterable[str],
    cache: Dict[str, Any],
) -> List[T]:
    sql, params = table.query.select(filters, extra)
    rows = await db.fetch_all(sql, params)
    entities = [table._decode(row) for row in rows]
    for entity in entities:
        await table.hydrate(db, entity, cache)
    return entities


async def _fetch(db: Database, table: Table[T], mbid: str, cache: Dict[str, Any]) -> T:
    # LIMIT 2 so a duplicated identifier is reported instead of hidden.
    sql, params = table.query.select([("mbid", mbid)], ["LIMIT 2"])
    rows = await db.fetch_all(sql, params)
    if not rows:
        raise NotFoundError(table.name, mbid)
    if len(rows) > 1:
        raise AmbiguousError(table.name, mbid)
    entity = table._decode(rows[0])
    await table.hydrate(db, entity, cache)
    return entity


async def filter_by(
    ctx: LibraryContext,
    table: Table[T],
    filters: Iterable[Filter] = (),
    extra: Iterable[str] = (),
) -> List[T]:
    """Every entity matching all ``(column, value)`` equality filters, hydrated."""
    return await _filter(ctx.require_db(), table, filters, extra, {})


async def fetch(ctx: LibraryContext, table: Table[T], mbid: str) -> T:
    """The single entity with the given identifier, hydrated.

    Raises:
        NotFoundError: No row has the identifier.
        AmbiguousError: More than one row has it.
    """
    return await _fetch(ctx.require_db(), table, mbid, {})


async def store(ctx: LibraryContext, table: Table[T], entity: T) -> None:
    """Upsert ``entity`` and everything it owns.

    Writes are not grouped in a transaction: a failure part way leaves the
    earlier writes in place.
    """
    db = ctx.require_db()
    await table.store(db, entity)
