"""语音解析与缓存：将语音名称解析为语音 ID，惰性填充并增量刷新名称索引。

Voice resolution and caching.

The cache maps lowercase voice names to voice identifiers. It starts empty,
is populated by one bulk listing on the first resolution that misses it, and
is merged into (never cleared) whenever a listing or clone succeeds.

No lock guards population. Two resolutions racing on an empty cache may
both fetch the listing; inserts are idempotent, so the duplicate fetch
costs one extra request and cannot corrupt the map.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from eleven_mcp.errors import voice_not_found
from eleven_mcp.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterable, Iterator

    from eleven_mcp.types import VoiceList, VoiceRecord

    VoiceSearch = Callable[[str | None, int], Awaitable[VoiceList]]

logger = get_logger(__name__)

_VOICE_ID_PATTERN = re.compile(r"^[a-zA-Z0-9]{20,}$")

POPULATE_PAGE_SIZE = 100
SEARCH_PAGE_SIZE = 5


def looks_like_voice_id(value: str) -> bool:
    """Check whether a string has the shape of a raw voice identifier."""
    return bool(_VOICE_ID_PATTERN.match(value))


@dataclass
class VoiceCacheStats:
    """Cache statistics.

    Attributes:
        hits: Lookups answered from the cache
        misses: Lookups that fell through to a search
        populations: Bulk listings attempted
    """

    hits: int = 0
    misses: int = 0
    populations: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"hits": self.hits, "misses": self.misses, "populations": self.populations}


class VoiceCache:
    """Name to identifier index owned by one API client."""

    def __init__(self) -> None:
        self._entries: dict[str, str] = {}
        self._populated = False
        self.stats = VoiceCacheStats()

    @property
    def populated(self) -> bool:
        return self._populated

    def mark_populated(self) -> None:
        self._populated = True

    def get(self, name: str) -> str | None:
        return self._entries.get(name.lower())

    def put(self, name: str, voice_id: str) -> bool:
        """Insert an entry. Empty names or identifiers are ignored.

        Returns:
            True if the entry was stored
        """
        if not name or not voice_id:
            return False
        self._entries[name.lower()] = voice_id
        return True

    def merge(self, voices: Iterable[VoiceRecord]) -> int:
        """Merge voice records into the index.

        Returns:
            Number of entries stored
        """
        return sum(1 for v in voices if self.put(v.name, v.voice_id))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


class VoiceResolver:
    """Resolves voice names to identifiers.

    Example:
        >>> resolver = VoiceResolver(client_search)
        >>> voice_id = await resolver.resolve("Rachel")
    """

    def __init__(
        self,
        search: VoiceSearch,
        cache: VoiceCache | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            search: Coroutine function ``(query, page_size) -> VoiceList``
            cache: Cache to read and fill (a new one by default)
        """
        self._search = search
        self._cache = cache if cache is not None else VoiceCache()

    @property
    def cache(self) -> VoiceCache:
        return self._cache

    async def resolve(self, name_or_id: str) -> str:
        """Resolve a voice name or identifier to an identifier.

        Args:
            name_or_id: Human voice name (any case) or raw identifier

        Returns:
            Voice identifier

        Raises:
            ClientError: NOT_FOUND if no voice matches
        """
        if looks_like_voice_id(name_or_id):
            return name_or_id

        cached = self._cache.get(name_or_id)
        if not cached and not self._cache.populated:
            await self.populate()
            cached = self._cache.get(name_or_id)

        if cached:
            self._cache.stats.hits += 1
            return cached

        self._cache.stats.misses += 1
        return await self._search_one(name_or_id)

    async def populate(self) -> None:
        """Fill the cache from one bulk listing.

        Attempted once: the cache is marked populated even if the listing
        fails, so a broken listing does not cost a request per resolution.
        """
        self._cache.stats.populations += 1
        try:
            listing = await self._search(None, POPULATE_PAGE_SIZE)
        except Exception as e:
            logger.warning("Voice cache population failed", error=str(e))
        else:
            stored = self._cache.merge(listing.voices)
            logger.debug(
                "Voice cache populated", voices=stored, **self._cache.stats.to_dict()
            )
        finally:
            self._cache.mark_populated()

    def refresh(self, voices: Iterable[VoiceRecord]) -> None:
        """Merge a successful listing into the cache."""
        self._cache.merge(voices)
        self._cache.mark_populated()

    async def _search_one(self, name_or_id: str) -> str:
        try:
            result = await self._search(name_or_id, SEARCH_PAGE_SIZE)
        except Exception as e:
            logger.debug("Voice search failed", voice=name_or_id, error=str(e))
            raise voice_not_found(name_or_id) from e

        if result.voices:
            voice = result.voices[0]
            if voice.voice_id:
                self._cache.put(voice.name or name_or_id, voice.voice_id)
                return voice.voice_id

        raise voice_not_found(name_or_id)
