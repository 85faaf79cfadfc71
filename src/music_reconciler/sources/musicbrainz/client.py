"""
MusicBrainz source.

Talks to the MusicBrainz web service over aiohttp and hands back wire
:class:`~music_reconciler.sources.musicbrainz.structures.Release` objects.
Each call performs exactly one request; transport failures become
:class:`NetworkError`, non-2xx answers become :class:`CatalogError`.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import aiohttp

from ...config import CatalogSettings
from ...exceptions import CatalogError, DecodeError, NetworkError, PreconditionError
from ..base import ReleaseLike, Source, SourceKind, join_artists
from .structures import Release, ReleaseSearch

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 50
RELEASE_INCLUDES = "artists+labels+recordings+release-groups"


class MusicBrainz(Source):
    """Release search and lookup against the MusicBrainz web service."""

    kind = SourceKind.MUSICBRAINZ

    def __init__(
        self,
        base_url: str = "https://musicbrainz.org/ws/2",
        user_agent: str = CatalogSettings.user_agent,
        count: int = DEFAULT_COUNT,
        timeout: float = 10.0,
        rate_limit: float = 1.0,  # requests per second
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.count = count
        self.timeout = timeout
        self.rate_limit = rate_limit
        self._session = session
        self._owns_session = session is None
        self._last_request_time = 0.0

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> "MusicBrainz":
        return cls(
            base_url=settings.base_url,
            user_agent=settings.user_agent,
            count=settings.count,
            timeout=settings.timeout,
        )

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
            )
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
        self._session = None

    async def _rate_limit(self) -> None:
        """Keep at most ``rate_limit`` requests per second."""
        current_time = time.monotonic()
        min_interval = 1.0 / self.rate_limit
        time_since_last = current_time - self._last_request_time

        if time_since_last < min_interval:
            await asyncio.sleep(min_interval - time_since_last)

        self._last_request_time = time.monotonic()

    async def _request(self, url: str, params: Dict[str, Any]) -> Any:
        session = self._get_session()
        await self._rate_limit()

        start = time.perf_counter()
        try:
            async with session.get(url, params=params, headers={"User-Agent": self.user_agent}) as response:
                request_time = time.perf_counter() - start
                logger.debug(f"MusicBrainz HTTP request took {request_time:.3f}s: {url}")

                if not 200 <= response.status < 300:
                    body = await response.text()
                    raise CatalogError(response.status, body, url)

                try:
                    data = await response.json(content_type=None)
                except ValueError as e:
                    raise DecodeError(f"MusicBrainz returned invalid JSON for {url}: {e}") from e

                logger.debug(
                    f"MusicBrainz JSON parse took {time.perf_counter() - start - request_time:.3f}s"
                )
                return data
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f"MusicBrainz request to {url} failed: {e}") from e

    async def search(self, original: ReleaseLike) -> List[Release]:
        """Search releases by title and credited artists."""
        artists = join_artists(original.artist_names())
        params = {
            "query": f"release:{original.title} artist:{artists}",
            "fmt": "json",
            "limit": self.count,
        }
        data = await self._request(f"{self.base_url}/release/", params)

        start = time.perf_counter()
        result = ReleaseSearch.from_json(data)
        logger.debug(
            f"Decoded {len(result.releases)} of {result.count} releases "
            f"in {time.perf_counter() - start:.3f}s"
        )
        return result.releases

    async def get(self, release: ReleaseLike) -> Release:
        """Look up the full record of a release by its identifier."""
        mbid = release.mbid
        if not mbid:
            raise PreconditionError(
                f"Release {release.title!r} has no identifier, cannot fetch its full record"
            )
        params = {"fmt": "json", "inc": RELEASE_INCLUDES}
        data = await self._request(f"{self.base_url}/release/{mbid}", params)
        return Release.from_json(data)
