"""Runtime context shared by persistence and path rendering calls."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from .config import Settings
from .exceptions import ConfigurationError
from .persistence.database import Database


@dataclass
class LibraryContext:
    """Settings and the database pool, built once at startup and passed around."""

    settings: Settings
    db: Optional[Database] = None

    def require_db(self) -> Database:
        """Return the database or fail if none was attached."""
        if self.db is None:
            raise ConfigurationError("The library database has not been initialized")
        return self.db


@asynccontextmanager
async def open_context(settings: Settings, max_workers: int = 4) -> AsyncIterator[LibraryContext]:
    """Open the configured database and yield a ready context."""
    settings.database.parent.mkdir(parents=True, exist_ok=True)
    db = Database(settings.database, max_workers=max_workers)
    await db.initialize()
    try:
        yield LibraryContext(settings=settings, db=db)
    finally:
        await db.close()
