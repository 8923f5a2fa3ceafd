"""
Type definitions for eleven-mcp-server.

Provides per-capability request types and the results the client returns.
"""

from eleven_mcp.types.requests import (
    DEFAULT_LIST_PAGE_SIZE,
    DEFAULT_MUSIC_MODEL,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SFX_MODEL,
    DEFAULT_SIMILARITY_BOOST,
    DEFAULT_STABILITY,
    DEFAULT_STS_MODEL,
    DEFAULT_STT_MODEL,
    DEFAULT_STYLE,
    DEFAULT_TTS_MODEL,
    CloneVoiceRequest,
    IsolationRequest,
    ListVoicesRequest,
    MusicRequest,
    SoundEffectRequest,
    SpeechRequest,
    SpeechToSpeechRequest,
    TranscriptionRequest,
    VoiceSettings,
)
from eleven_mcp.types.results import (
    CloneResult,
    Transcription,
    TranscriptionWord,
    VoiceList,
    VoiceRecord,
)

__all__ = [
    # Defaults
    "DEFAULT_LIST_PAGE_SIZE",
    "DEFAULT_MUSIC_MODEL",
    "DEFAULT_OUTPUT_FORMAT",
    "DEFAULT_SFX_MODEL",
    "DEFAULT_SIMILARITY_BOOST",
    "DEFAULT_STABILITY",
    "DEFAULT_STS_MODEL",
    "DEFAULT_STT_MODEL",
    "DEFAULT_STYLE",
    "DEFAULT_TTS_MODEL",
    # Requests
    "CloneVoiceRequest",
    "IsolationRequest",
    "ListVoicesRequest",
    "MusicRequest",
    "SoundEffectRequest",
    "SpeechRequest",
    "SpeechToSpeechRequest",
    "TranscriptionRequest",
    "VoiceSettings",
    # Results
    "CloneResult",
    "Transcription",
    "TranscriptionWord",
    "VoiceList",
    "VoiceRecord",
]
