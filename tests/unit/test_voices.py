"""Tests for voice resolution and the voice cache."""

import pytest

from eleven_mcp.errors import ClientError, ErrorKind, RemoteError
from eleven_mcp.types import VoiceList, VoiceRecord
from eleven_mcp.voices import (
    POPULATE_PAGE_SIZE,
    SEARCH_PAGE_SIZE,
    VoiceCache,
    VoiceResolver,
    looks_like_voice_id,
)

RACHEL_ID = "21m00Tcm4TlvDq8ikWAM"


class RecordingSearch:
    """Search callable returning canned pages and recording queries."""

    def __init__(self, voices: list[VoiceRecord], fail_first: int = 0) -> None:
        self.voices = voices
        self.fail_first = fail_first
        self.queries: list[tuple[str | None, int]] = []

    async def __call__(self, query: str | None, page_size: int) -> VoiceList:
        self.queries.append((query, page_size))
        if len(self.queries) <= self.fail_first:
            raise RemoteError("listing down", status_code=503)
        matches = [v for v in self.voices if not query or query.lower() in v.name.lower()]
        return VoiceList(voices=matches[:page_size], total_count=len(matches))


class TestLooksLikeVoiceId:
    """Tests for the identifier shape check."""

    def test_identifier(self) -> None:
        assert looks_like_voice_id(RACHEL_ID)
        assert looks_like_voice_id("a" * 20)

    def test_names(self) -> None:
        assert not looks_like_voice_id("Rachel")
        assert not looks_like_voice_id("a" * 19)
        assert not looks_like_voice_id("my-voice-name-with-dashes")


class TestVoiceCache:
    """Tests for VoiceCache."""

    def test_case_insensitive(self) -> None:
        cache = VoiceCache()
        cache.put("Rachel", RACHEL_ID)
        assert cache.get("rachel") == RACHEL_ID
        assert cache.get("RACHEL") == RACHEL_ID
        assert "rAcHeL" in cache

    def test_ignores_empty_entries(self) -> None:
        cache = VoiceCache()
        assert not cache.put("", "id")
        assert not cache.put("Name", "")
        assert len(cache) == 0

    def test_merge_overwrites(self) -> None:
        cache = VoiceCache()
        cache.put("Rachel", "old")
        stored = cache.merge([VoiceRecord(voice_id="new", name="RACHEL")])
        assert stored == 1
        assert cache.get("rachel") == "new"
        assert list(cache) == ["rachel"]


class TestVoiceResolver:
    """Tests for VoiceResolver."""

    @pytest.mark.asyncio
    async def test_identifier_fast_path(self) -> None:
        """An identifier-shaped input is returned with no remote call."""
        search = RecordingSearch([])
        resolver = VoiceResolver(search)

        assert await resolver.resolve(RACHEL_ID) == RACHEL_ID
        assert search.queries == []
        assert not resolver.cache.populated

    @pytest.mark.asyncio
    async def test_populates_once(self) -> None:
        search = RecordingSearch([VoiceRecord(voice_id=RACHEL_ID, name="Rachel")])
        resolver = VoiceResolver(search)

        assert await resolver.resolve("Rachel") == RACHEL_ID
        assert await resolver.resolve("rachel") == RACHEL_ID
        assert await resolver.resolve("RACHEL") == RACHEL_ID

        assert search.queries == [(None, POPULATE_PAGE_SIZE)]
        assert resolver.cache.stats.hits == 3
        assert resolver.cache.stats.populations == 1

    @pytest.mark.asyncio
    async def test_targeted_search_on_miss(self) -> None:
        search = RecordingSearch([])
        resolver = VoiceResolver(search)
        await resolver.populate()

        search.voices = [VoiceRecord(voice_id="x" * 20, name="Narrator")]
        assert await resolver.resolve("narr") == "x" * 20
        assert search.queries[-1] == ("narr", SEARCH_PAGE_SIZE)
        # Cached under the matched voice's own name
        assert resolver.cache.get("Narrator") == "x" * 20

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        resolver = VoiceResolver(RecordingSearch([]))

        with pytest.raises(ClientError) as exc_info:
            await resolver.resolve("Nonexistent")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert "Nonexistent" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_search_failure_is_not_found(self) -> None:
        resolver = VoiceResolver(RecordingSearch([], fail_first=2))

        with pytest.raises(ClientError) as exc_info:
            await resolver.resolve("Rachel")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert isinstance(exc_info.value.__cause__, RemoteError)

    @pytest.mark.asyncio
    async def test_failed_population_then_search(self) -> None:
        """A failed bulk listing still marks the cache populated; the
        targeted search then resolves the name."""
        search = RecordingSearch([VoiceRecord(voice_id=RACHEL_ID, name="Rachel")], fail_first=1)
        resolver = VoiceResolver(search)

        assert await resolver.resolve("Rachel") == RACHEL_ID
        assert resolver.cache.populated
        assert search.queries == [(None, POPULATE_PAGE_SIZE), ("Rachel", SEARCH_PAGE_SIZE)]

        # Second resolution is served from the cache
        assert await resolver.resolve("rachel") == RACHEL_ID
        assert len(search.queries) == 2

    @pytest.mark.asyncio
    async def test_refresh_merges(self) -> None:
        search = RecordingSearch([])
        resolver = VoiceResolver(search)
        resolver.refresh([VoiceRecord(voice_id="y" * 20, name="Bella")])

        assert resolver.cache.populated
        assert await resolver.resolve("bella") == "y" * 20
        assert search.queries == []

    @pytest.mark.asyncio
    async def test_cached_entry_served_before_population(self) -> None:
        """An entry stored before any listing needs no remote call."""
        search = RecordingSearch([VoiceRecord(voice_id=RACHEL_ID, name="Rachel")])
        resolver = VoiceResolver(search)
        resolver.cache.put("Test", "abc123")

        assert await resolver.resolve("TEST") == "abc123"
        assert search.queries == []
        assert not resolver.cache.populated

        # A different name still triggers the one bulk listing
        assert await resolver.resolve("rachel") == RACHEL_ID
        assert search.queries == [(None, POPULATE_PAGE_SIZE)]
        assert resolver.cache.stats.to_dict() == {"hits": 2, "misses": 0, "populations": 1}
