"""
Voice resolution module.

Maps human voice names to the identifiers the API requires.
"""

from eleven_mcp.voices.cache import (
    POPULATE_PAGE_SIZE,
    SEARCH_PAGE_SIZE,
    VoiceCache,
    VoiceCacheStats,
    VoiceResolver,
    looks_like_voice_id,
)

__all__ = [
    "POPULATE_PAGE_SIZE",
    "SEARCH_PAGE_SIZE",
    "VoiceCache",
    "VoiceCacheStats",
    "VoiceResolver",
    "looks_like_voice_id",
]
