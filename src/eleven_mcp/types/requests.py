"""请求类型：每种能力一个显式的请求结构，字段可选并带有文档化的默认值。

Per-capability request types.

Every field is optional except the primary input. Defaults are applied when
the request is turned into a payload, never earlier, so that a field the
caller did not supply can be told apart from one set to its default value.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_OUTPUT_FORMAT = "mp3_44100_128"
DEFAULT_TTS_MODEL = "eleven_multilingual_v2"
DEFAULT_STS_MODEL = "eleven_english_sts_v2"
DEFAULT_STT_MODEL = "scribe_v2"
DEFAULT_SFX_MODEL = "eleven_text_to_sound_v2"
DEFAULT_MUSIC_MODEL = "music_v1"
DEFAULT_LIST_PAGE_SIZE = 20

DEFAULT_STABILITY = 0.5
DEFAULT_SIMILARITY_BOOST = 0.75
DEFAULT_STYLE = 0.0


@dataclass
class VoiceSettings:
    """Voice tuning block sent alongside speech requests."""

    stability: float | None = None
    similarity_boost: float | None = None
    style: float | None = None
    speed: float | None = None

    @classmethod
    def from_tuning(
        cls,
        *,
        stability: float | None = None,
        similarity_boost: float | None = None,
        style: float | None = None,
        speed: float | None = None,
        with_style: bool = True,
    ) -> VoiceSettings | None:
        """Build a settings block only when some tuning field was supplied.

        When any of stability/similarity_boost/style is present, the missing
        ones are filled from defaults. ``speed`` never triggers the defaults;
        on its own it yields a block holding only the speed.

        Args:
            stability: Voice stability (0-1)
            similarity_boost: Similarity boost (0-1)
            style: Style exaggeration (0-1)
            speed: Speech speed multiplier
            with_style: Whether the target endpoint accepts ``style``

        Returns:
            VoiceSettings, or None when nothing was supplied
        """
        tuned = stability is not None or similarity_boost is not None
        if with_style:
            tuned = tuned or style is not None

        settings: VoiceSettings | None = None
        if tuned:
            settings = cls(
                stability=DEFAULT_STABILITY if stability is None else stability,
                similarity_boost=(
                    DEFAULT_SIMILARITY_BOOST if similarity_boost is None else similarity_boost
                ),
                style=(DEFAULT_STYLE if style is None else style) if with_style else None,
            )
        if speed is not None:
            settings = settings or cls()
            settings.speed = speed
        return settings

    def to_payload(self) -> dict[str, float]:
        """Convert to the API's snake_case object, omitting unset fields."""
        payload: dict[str, float] = {}
        if self.stability is not None:
            payload["stability"] = self.stability
        if self.similarity_boost is not None:
            payload["similarity_boost"] = self.similarity_boost
        if self.style is not None:
            payload["style"] = self.style
        if self.speed is not None:
            payload["speed"] = self.speed
        return payload


@dataclass
class SpeechRequest:
    """Text-to-speech request.

    Attributes:
        text: Text to synthesize
        voice: Voice name or identifier (client default voice when None)
        model_id: TTS model (default ``eleven_multilingual_v2``)
        output_format: Output format (default ``mp3_44100_128``)
        stability: Voice stability (0-1, default 0.5 when tuning)
        similarity_boost: Similarity boost (0-1, default 0.75 when tuning)
        style: Style exaggeration (0-1, default 0 when tuning)
        speed: Speech speed (0.25-4.0)
    """

    text: str
    voice: str | None = None
    model_id: str | None = None
    output_format: str | None = None
    stability: float | None = None
    similarity_boost: float | None = None
    style: float | None = None
    speed: float | None = None

    @property
    def effective_output_format(self) -> str:
        return self.output_format or DEFAULT_OUTPUT_FORMAT

    def voice_settings(self) -> VoiceSettings | None:
        return VoiceSettings.from_tuning(
            stability=self.stability,
            similarity_boost=self.similarity_boost,
            style=self.style,
            speed=self.speed,
        )

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "text": self.text,
            "model_id": self.model_id or DEFAULT_TTS_MODEL,
        }
        settings = self.voice_settings()
        if settings is not None:
            payload["voice_settings"] = settings.to_payload()
        return payload


@dataclass
class SpeechToSpeechRequest:
    """Voice conversion request.

    Attributes:
        audio_path: Source audio file (assumed to exist)
        voice: Target voice name or identifier
        model_id: STS model (default ``eleven_english_sts_v2``)
        output_format: Output format (default ``mp3_44100_128``)
        stability: Voice stability (0-1, default 0.5 when tuning)
        similarity_boost: Similarity boost (0-1, default 0.75 when tuning)
        remove_background_noise: Clean the source before conversion
    """

    audio_path: Path
    voice: str
    model_id: str | None = None
    output_format: str | None = None
    stability: float | None = None
    similarity_boost: float | None = None
    remove_background_noise: bool | None = None

    @property
    def effective_output_format(self) -> str:
        return self.output_format or DEFAULT_OUTPUT_FORMAT

    def voice_settings(self) -> VoiceSettings | None:
        return VoiceSettings.from_tuning(
            stability=self.stability,
            similarity_boost=self.similarity_boost,
            with_style=False,
        )

    def to_form(self) -> dict[str, str]:
        form = {"model_id": self.model_id or DEFAULT_STS_MODEL}
        if self.remove_background_noise is not None:
            form["remove_background_noise"] = _form_bool(self.remove_background_noise)
        settings = self.voice_settings()
        if settings is not None:
            # The endpoint takes voice settings as a JSON-encoded form field
            form["voice_settings"] = json.dumps(settings.to_payload())
        return form


@dataclass
class SoundEffectRequest:
    """Sound effect generation request."""

    text: str
    duration_seconds: float | None = None
    prompt_influence: float | None = None
    model_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "text": self.text,
            "model_id": self.model_id or DEFAULT_SFX_MODEL,
        }
        if self.duration_seconds is not None:
            payload["duration_seconds"] = self.duration_seconds
        if self.prompt_influence is not None:
            payload["prompt_influence"] = self.prompt_influence
        return payload


@dataclass
class MusicRequest:
    """Music generation request."""

    text: str
    duration_seconds: float | None = None
    model_id: str | None = None
    output_format: str | None = None

    @property
    def effective_output_format(self) -> str:
        return self.output_format or DEFAULT_OUTPUT_FORMAT

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "prompt": self.text,
            "model_id": self.model_id or DEFAULT_MUSIC_MODEL,
        }
        if self.duration_seconds is not None:
            payload["music_length_ms"] = round(self.duration_seconds * 1000)
        return payload


@dataclass
class IsolationRequest:
    """Voice isolation request."""

    audio_path: Path


@dataclass
class TranscriptionRequest:
    """Speech-to-text request.

    Attributes:
        audio_path: Audio file to transcribe (assumed to exist)
        model_id: STT model (default ``scribe_v2``)
        language_code: ISO 639-1 hint
        diarize: Tag speakers
        num_speakers: Expected number of speakers
    """

    audio_path: Path
    model_id: str | None = None
    language_code: str | None = None
    diarize: bool | None = None
    num_speakers: int | None = None

    def to_form(self) -> dict[str, str]:
        form = {"model_id": self.model_id or DEFAULT_STT_MODEL}
        if self.language_code:
            form["language_code"] = self.language_code
        if self.diarize is not None:
            form["diarize"] = _form_bool(self.diarize)
        if self.num_speakers is not None:
            form["num_speakers"] = str(self.num_speakers)
        return form


@dataclass
class ListVoicesRequest:
    """Voice listing/search request."""

    search: str | None = None
    category: str | None = None
    page_size: int | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {
            "page_size": self.page_size or DEFAULT_LIST_PAGE_SIZE,
            "include_total_count": "true",
        }
        if self.search:
            params["search"] = self.search
        if self.category:
            params["category"] = self.category
        return params


@dataclass
class CloneVoiceRequest:
    """Instant voice clone request."""

    name: str
    file_paths: list[Path] = field(default_factory=list)
    description: str | None = None
    remove_background_noise: bool | None = None

    def to_form(self) -> dict[str, str]:
        form = {"name": self.name}
        if self.description:
            form["description"] = self.description
        if self.remove_background_noise is not None:
            form["remove_background_noise"] = _form_bool(self.remove_background_noise)
        return form


def _form_bool(value: bool) -> str:
    return "true" if value else "false"
