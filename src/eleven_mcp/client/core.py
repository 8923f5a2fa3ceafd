"""API 客户端：组合语音解析、超时竞速、流收集和错误归一化，每种能力一个操作。

Core API client.

Each capability follows the same path: resolve the voice argument (if any),
build the request, run the gateway call under its scaled deadline, drain
binary results, and normalize any failure into a ClientError. No partial
result is ever returned.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from eleven_mcp.config import DEFAULT_TIMEOUT_MS, DEFAULT_VOICE
from eleven_mcp.errors import ClientError, ErrorKind, normalize
from eleven_mcp.gateway import ElevenLabsGateway
from eleven_mcp.resilience import OperationKind, deadline_for, race_with_timeout
from eleven_mcp.streaming import drain
from eleven_mcp.telemetry import get_logger, operation_scope
from eleven_mcp.transport import HttpTransport
from eleven_mcp.types import (
    CloneResult,
    CloneVoiceRequest,
    IsolationRequest,
    ListVoicesRequest,
    MusicRequest,
    SoundEffectRequest,
    SpeechRequest,
    SpeechToSpeechRequest,
    Transcription,
    TranscriptionRequest,
    VoiceList,
)
from eleven_mcp.voices import VoiceCache, VoiceResolver

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, Awaitable, Callable

    from eleven_mcp.client.builder import ElevenLabsClientBuilder
    from eleven_mcp.config import ServerConfig
    from eleven_mcp.gateway import AudioGateway

T = TypeVar("T")
R = TypeVar("R")

logger = get_logger(__name__)


class ElevenLabsClient:
    """Client for the ElevenLabs audio API.

    Example:
        >>> async with ElevenLabsClient.from_config(load_config()) as client:
        ...     audio = await client.text_to_speech(SpeechRequest(text="Hello", voice="Rachel"))
    """

    def __init__(
        self,
        gateway: AudioGateway,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        default_voice: str = DEFAULT_VOICE,
        voice_cache: VoiceCache | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            gateway: Remote service gateway
            timeout_ms: Base timeout in milliseconds
            default_voice: Voice used when a speech request names none
            voice_cache: Voice cache (a new one by default)
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        self._gateway = gateway
        self._timeout_ms = timeout_ms
        self._default_voice = default_voice
        self._resolver = VoiceResolver(self._search_voices, voice_cache)

    @classmethod
    def from_config(cls, config: ServerConfig) -> ElevenLabsClient:
        """Create a client talking to the real API."""
        transport = HttpTransport(config.base_url, api_key=config.api_key)
        return cls(
            ElevenLabsGateway(transport),
            timeout_ms=config.timeout_ms,
            default_voice=config.default_voice,
        )

    @classmethod
    def builder(cls) -> ElevenLabsClientBuilder:
        """Get a builder for creating clients."""
        from eleven_mcp.client.builder import ElevenLabsClientBuilder

        return ElevenLabsClientBuilder()

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def default_voice(self) -> str:
        return self._default_voice

    @property
    def voice_cache(self) -> VoiceCache:
        return self._resolver.cache

    def deadline(self, kind: OperationKind) -> float:
        """Deadline in seconds for an operation kind."""
        return deadline_for(kind, self._timeout_ms)

    async def _execute(
        self,
        kind: OperationKind,
        operation: Awaitable[T],
        parse: Callable[[T], R] | None = None,
    ) -> Any:
        """Run one remote operation under its deadline.

        ``parse`` reshapes the raw response inside the same error boundary,
        so a malformed body surfaces as a REMOTE_ERROR like any other failure.
        """
        deadline = self.deadline(kind)
        with operation_scope(kind.value):
            logger.debug("Operation started", deadline_s=deadline)
            try:
                result = await race_with_timeout(operation, deadline, kind=kind)
                if parse is not None:
                    result = _parse_response(kind, parse, result)
            except Exception as exc:
                error = normalize(exc)
                logger.warning("Operation failed", kind=error.kind.value, error=str(exc))
                if error is exc:
                    raise
                raise error from exc
            logger.debug("Operation finished")
        return result

    async def _collect(self, kind: OperationKind, stream: AsyncIterable[bytes]) -> bytes:
        audio = await self._execute(kind, drain(stream))
        logger.debug("Audio received", operation=kind.value, bytes=len(audio))
        return audio

    async def _search_voices(self, search: str | None, page_size: int) -> VoiceList:
        request = ListVoicesRequest(search=search, page_size=page_size)
        return await self._execute(
            OperationKind.LIST_VOICES,
            self._gateway.search_voices(request.to_params()),
            VoiceList.from_api,
        )

    async def resolve_voice_id(self, name_or_id: str) -> str:
        """Resolve a voice name (or identifier) to an identifier.

        Raises:
            ClientError: NOT_FOUND if no voice matches
        """
        return await self._resolver.resolve(name_or_id)

    async def text_to_speech(self, request: SpeechRequest) -> bytes:
        """Synthesize speech.

        Args:
            request: Speech request; ``voice`` falls back to the default voice

        Returns:
            Encoded audio in ``request.effective_output_format``
        """
        voice_id = await self.resolve_voice_id(request.voice or self._default_voice)
        stream = self._gateway.stream_speech(
            voice_id,
            request.to_payload(),
            output_format=request.effective_output_format,
        )
        return await self._collect(OperationKind.SPEECH, stream)

    async def speech_to_speech(self, request: SpeechToSpeechRequest) -> bytes:
        """Re-voice an audio file with the target voice."""
        voice_id = await self.resolve_voice_id(request.voice)
        stream = self._gateway.stream_voice_conversion(
            voice_id,
            Path(request.audio_path).resolve(),
            request.to_form(),
            output_format=request.effective_output_format,
        )
        return await self._collect(OperationKind.SPEECH_TO_SPEECH, stream)

    async def sound_effects(self, request: SoundEffectRequest) -> bytes:
        """Generate a sound effect from a text description."""
        stream = self._gateway.stream_sound_effect(request.to_payload())
        return await self._collect(OperationKind.SOUND_EFFECT, stream)

    async def generate_music(self, request: MusicRequest) -> bytes:
        """Generate music from a text description."""
        stream = self._gateway.stream_music(
            request.to_payload(), output_format=request.effective_output_format
        )
        return await self._collect(OperationKind.MUSIC, stream)

    async def voice_isolation(self, request: IsolationRequest) -> bytes:
        """Strip background noise from an audio file."""
        stream = self._gateway.stream_isolation(Path(request.audio_path).resolve())
        return await self._collect(OperationKind.ISOLATION, stream)

    async def transcribe(self, request: TranscriptionRequest) -> Transcription:
        """Transcribe an audio file.

        Returns:
            Transcription with text and optional word timings
        """
        return await self._execute(
            OperationKind.TRANSCRIPTION,
            self._gateway.transcribe(Path(request.audio_path).resolve(), request.to_form()),
            Transcription.from_api,
        )

    async def list_voices(self, request: ListVoicesRequest | None = None) -> VoiceList:
        """List or search voices, refreshing the voice cache."""
        req = request or ListVoicesRequest()
        listing: VoiceList = await self._execute(
            OperationKind.LIST_VOICES,
            self._gateway.search_voices(req.to_params()),
            VoiceList.from_api,
        )
        self._resolver.refresh(listing.voices)
        return listing

    async def clone_voice(self, request: CloneVoiceRequest) -> CloneResult:
        """Create an instant voice clone and cache it under its name."""
        files = [Path(p).resolve() for p in request.file_paths]
        voice_id: str = await self._execute(
            OperationKind.CLONE_VOICE,
            self._gateway.add_voice(files, request.to_form()),
            _cloned_voice_id,
        )
        self.voice_cache.put(request.name, voice_id)
        logger.info("Voice cloned", name=request.name, voice_id=voice_id)
        return CloneResult(voice_id=voice_id, name=request.name)

    async def close(self) -> None:
        """Close the underlying gateway."""
        await self._gateway.close()

    async def __aenter__(self) -> ElevenLabsClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


def _parse_response(kind: OperationKind, parse: Callable[[T], R], data: T) -> R:
    try:
        return parse(data)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ClientError(
            ErrorKind.REMOTE_ERROR,
            f"ElevenLabs API error: unexpected {kind.value} response ({e})",
        ) from e


def _cloned_voice_id(data: dict[str, Any]) -> str:
    voice_id = data.get("voice_id") or data.get("voiceId")
    if not voice_id:
        raise ClientError(
            ErrorKind.REMOTE_ERROR,
            "ElevenLabs API error: voice clone response did not include a voice ID",
        )
    return str(voice_id)
