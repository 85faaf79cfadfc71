"""
SQLite access for the persistence layer.

``sqlite3`` is synchronous, so every statement runs on a small thread pool
and is awaited through ``loop.run_in_executor``. Each worker thread owns its
own connection. Connections run in autocommit mode: every statement is
committed on its own and nothing groups several writes into a transaction.
"""

import asyncio
import logging
import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)

MEMORY = ":memory:"

ARTIST_LINK_TABLES = (
    "track_artists",
    "track_performers",
    "track_engineers",
    "track_mixers",
    "track_producers",
    "track_lyricists",
    "track_writers",
    "track_composers",
    "release_artists",
)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS artists (
        mbid TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        sort_name TEXT,
        instruments TEXT NOT NULL DEFAULT '[]'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS releases (
        mbid TEXT PRIMARY KEY,
        release_group_mbid TEXT,
        asin TEXT,
        title TEXT NOT NULL,
        discs INTEGER,
        media TEXT,
        tracks INTEGER,
        country TEXT,
        label TEXT,
        catalog_no TEXT,
        status TEXT,
        release_type TEXT,
        date TEXT,
        original_date TEXT,
        script TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tracks (
        mbid TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        length INTEGER,
        disc INTEGER,
        disc_mbid TEXT,
        number INTEGER,
        genres TEXT NOT NULL DEFAULT '[]',
        release TEXT REFERENCES releases (mbid),
        format TEXT,
        path TEXT
    )
    """,
] + [
    f"""
    CREATE TABLE IF NOT EXISTS {table} (
        ref TEXT NOT NULL,
        artist TEXT NOT NULL REFERENCES artists (mbid),
        join_phrase TEXT,
        instruments TEXT,
        UNIQUE (ref, artist)
    )
    """
    for table in ARTIST_LINK_TABLES
]


class Database:
    """Process-wide connection pool for the library database."""

    def __init__(self, path: Union[str, Path], max_workers: int = 4):
        self.path = str(path)
        # An in-memory database only exists inside a single connection.
        self.max_workers = 1 if self.path == MEMORY else max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="music-reconciler-db"
        )
        self._local = threading.local()
        self._connections: List[sqlite3.Connection] = []
        self._connections_lock = threading.Lock()
        self._closed = False

    def _connect(self) -> sqlite3.Connection:
        conn = getattr(self._local, "conn", None)
        if conn is None:
            conn = sqlite3.connect(self.path, isolation_level=None, check_same_thread=False)
            conn.row_factory = sqlite3.Row
            if self.path != MEMORY:
                conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
            self._local.conn = conn
            with self._connections_lock:
                self._connections.append(conn)
        return conn

    async def _run(self, fn, *args) -> Any:
        if self._closed:
            raise ConfigurationError(f"Library database {self.path} has been closed")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, fn, *args)

    async def initialize(self) -> None:
        """Create the schema if it does not exist yet."""
        def _init():
            conn = self._connect()
            for statement in SCHEMA:
                conn.execute(statement)

        await self._run(_init)
        logger.debug(f"Initialized library database at {self.path}")

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a write statement and return the affected row count."""
        def _execute():
            return self._connect().execute(sql, tuple(params)).rowcount

        return await self._run(_execute)

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        """Run a query and return every row."""
        def _fetch():
            return self._connect().execute(sql, tuple(params)).fetchall()

        return await self._run(_fetch)

    async def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        rows = await self.fetch_all(sql, params)
        return rows[0] if rows else None

    async def close(self) -> None:
        """Close every connection and stop the worker threads."""
        if self._closed:
            return

        def _close():
            with self._connections_lock:
                for conn in self._connections:
                    conn.close()
                self._connections.clear()

        await self._run(_close)
        self._closed = True
        self._executor.shutdown(wait=True)

    async def __aenter__(self) -> "Database":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
