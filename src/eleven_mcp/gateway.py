"""远程服务网关：每种远程操作一个调用，返回字节流或 JSON 结果。

Remote service gateway.

One method per remote operation. Binary operations are async generators
yielding response chunks; the request is only sent once iteration starts,
so the whole exchange runs inside whatever deadline the caller wraps around
the consumer. Structured operations return the decoded JSON body.
"""

from __future__ import annotations

import mimetypes
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from eleven_mcp.transport.http import HttpTransport

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

FilePart = tuple[str, tuple[str, bytes, str]]


class AudioGateway(ABC):
    """Abstract gateway to the remote audio service."""

    @abstractmethod
    def stream_speech(
        self, voice_id: str, payload: dict[str, Any], *, output_format: str
    ) -> AsyncIterator[bytes]:
        """Synthesize speech; yields audio chunks."""

    @abstractmethod
    def stream_voice_conversion(
        self,
        voice_id: str,
        audio_path: Path,
        form: dict[str, str],
        *,
        output_format: str,
    ) -> AsyncIterator[bytes]:
        """Convert the voice in an audio file; yields audio chunks."""

    @abstractmethod
    def stream_sound_effect(self, payload: dict[str, Any]) -> AsyncIterator[bytes]:
        """Generate a sound effect; yields audio chunks."""

    @abstractmethod
    def stream_music(
        self, payload: dict[str, Any], *, output_format: str
    ) -> AsyncIterator[bytes]:
        """Generate music; yields audio chunks."""

    @abstractmethod
    def stream_isolation(self, audio_path: Path) -> AsyncIterator[bytes]:
        """Isolate vocals in an audio file; yields audio chunks."""

    @abstractmethod
    async def transcribe(self, audio_path: Path, form: dict[str, str]) -> dict[str, Any]:
        """Transcribe an audio file."""

    @abstractmethod
    async def search_voices(self, params: dict[str, Any]) -> dict[str, Any]:
        """Search/list voices."""

    @abstractmethod
    async def add_voice(self, file_paths: list[Path], form: dict[str, str]) -> dict[str, Any]:
        """Create an instant voice clone."""

    async def close(self) -> None:  # noqa: B027
        """Release network resources."""


def _file_part(field_name: str, path: Path) -> FilePart:
    mime, _ = mimetypes.guess_type(path.name)
    return (field_name, (path.name, path.read_bytes(), mime or "application/octet-stream"))


class ElevenLabsGateway(AudioGateway):
    """Gateway speaking the ElevenLabs REST API through an HttpTransport."""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    async def _stream(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: list[FilePart] | None = None,
        params: dict[str, Any] | None = None,
    ) -> AsyncIterator[bytes]:
        async with self._transport.stream_request(
            "POST", path, json=json, data=data, files=files, params=params
        ) as response:
            async for chunk in response.aiter_bytes():
                yield chunk

    def stream_speech(
        self, voice_id: str, payload: dict[str, Any], *, output_format: str
    ) -> AsyncIterator[bytes]:
        return self._stream(
            f"/v1/text-to-speech/{voice_id}",
            json=payload,
            params={"output_format": output_format},
        )

    def stream_voice_conversion(
        self,
        voice_id: str,
        audio_path: Path,
        form: dict[str, str],
        *,
        output_format: str,
    ) -> AsyncIterator[bytes]:
        return self._stream(
            f"/v1/speech-to-speech/{voice_id}",
            data=form,
            files=[_file_part("audio", audio_path)],
            params={"output_format": output_format},
        )

    def stream_sound_effect(self, payload: dict[str, Any]) -> AsyncIterator[bytes]:
        return self._stream("/v1/sound-generation", json=payload)

    def stream_music(
        self, payload: dict[str, Any], *, output_format: str
    ) -> AsyncIterator[bytes]:
        return self._stream(
            "/v1/music", json=payload, params={"output_format": output_format}
        )

    def stream_isolation(self, audio_path: Path) -> AsyncIterator[bytes]:
        return self._stream(
            "/v1/audio-isolation", files=[_file_part("audio", audio_path)]
        )

    async def transcribe(self, audio_path: Path, form: dict[str, str]) -> dict[str, Any]:
        response = await self._transport.post(
            "/v1/speech-to-text",
            data=form,
            files=[_file_part("file", audio_path)],
        )
        return response.json()

    async def search_voices(self, params: dict[str, Any]) -> dict[str, Any]:
        response = await self._transport.get("/v2/voices", params=params)
        return response.json()

    async def add_voice(self, file_paths: list[Path], form: dict[str, str]) -> dict[str, Any]:
        response = await self._transport.post(
            "/v1/voices/add",
            data=form,
            files=[_file_part("files", p) for p in file_paths],
        )
        return response.json()

    async def close(self) -> None:
        await self._transport.close()
