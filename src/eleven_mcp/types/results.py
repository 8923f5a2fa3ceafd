"""
Result types returned by the API client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class VoiceRecord:
    """A voice as returned by the voice search endpoint."""

    voice_id: str
    name: str
    category: str | None = None
    labels: dict[str, str] | None = None
    description: str | None = None
    preview_url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> VoiceRecord:
        labels = data.get("labels")
        return cls(
            voice_id=data.get("voice_id") or data.get("voiceId") or "",
            name=data.get("name") or "",
            category=data.get("category"),
            labels=dict(labels) if isinstance(labels, dict) else None,
            description=data.get("description"),
            preview_url=data.get("preview_url") or data.get("previewUrl"),
        )


@dataclass
class VoiceList:
    """A page of voices."""

    voices: list[VoiceRecord] = field(default_factory=list)
    total_count: int | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> VoiceList:
        voices = [
            VoiceRecord.from_api(v) for v in data.get("voices") or [] if isinstance(v, dict)
        ]
        total = data.get("total_count")
        if total is None:
            total = data.get("totalCount")
        return cls(voices=voices, total_count=total)


@dataclass
class CloneResult:
    """Result of an instant voice clone."""

    voice_id: str
    name: str


@dataclass
class TranscriptionWord:
    """A word with timing, in seconds."""

    text: str
    start: float
    end: float


@dataclass
class Transcription:
    """Transcription result: text plus optional word timings."""

    text: str
    words: list[TranscriptionWord] | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Transcription:
        words_data = data.get("words")
        words = None
        if isinstance(words_data, list):
            words = [
                TranscriptionWord(
                    text=w.get("text", ""),
                    start=float(w.get("start") or 0.0),
                    end=float(w.get("end") or 0.0),
                )
                for w in words_data
                if isinstance(w, dict)
            ]
        return cls(text=data.get("text") or "", words=words)
