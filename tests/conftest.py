"""Root pytest fixtures for eleven-mcp-server tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest

from eleven_mcp.client import ElevenLabsClient
from eleven_mcp.gateway import AudioGateway


class FakeGateway(AudioGateway):
    """In-memory gateway recording every call.

    Binary operations yield ``chunks``; ``search_voices`` answers from
    ``voices`` unless ``raw_listing`` is set. Set ``fail_with`` to make every
    call raise, or ``delay`` to make every call sleep first.
    """

    def __init__(
        self,
        *,
        chunks: list[bytes] | None = None,
        voices: list[dict[str, Any]] | None = None,
        transcript: Any = None,
        clone_response: Any = None,
    ) -> None:
        self.chunks = chunks if chunks is not None else [b"ID3", b"audio", b"data"]
        self.voices = voices if voices is not None else []
        self.transcript = transcript or {"text": "hello world"}
        self.clone_response = clone_response or {"voice_id": "abc123"}
        self.fail_with: BaseException | None = None
        self.search_fail_with: BaseException | None = None
        self.raw_listing: Any = None
        self.delay: float = 0.0
        self.calls: list[tuple[str, Any]] = []
        self.closed = False

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    async def _maybe_fail(self) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

    async def _chunks(self) -> AsyncIterator[bytes]:
        await self._maybe_fail()
        for chunk in self.chunks:
            yield chunk

    def stream_speech(self, voice_id, payload, *, output_format):
        self.calls.append(("speech", {"voice_id": voice_id, "payload": payload, "format": output_format}))
        return self._chunks()

    def stream_voice_conversion(self, voice_id, audio_path, form, *, output_format):
        self.calls.append(("sts", {"voice_id": voice_id, "audio_path": audio_path, "form": form}))
        return self._chunks()

    def stream_sound_effect(self, payload):
        self.calls.append(("sfx", payload))
        return self._chunks()

    def stream_music(self, payload, *, output_format):
        self.calls.append(("music", payload))
        return self._chunks()

    def stream_isolation(self, audio_path):
        self.calls.append(("isolation", audio_path))
        return self._chunks()

    async def transcribe(self, audio_path: Path, form: dict[str, str]) -> Any:
        self.calls.append(("transcribe", form))
        await self._maybe_fail()
        return self.transcript

    async def search_voices(self, params: dict[str, Any]) -> Any:
        self.calls.append(("search", params))
        if self.search_fail_with is not None:
            raise self.search_fail_with
        await self._maybe_fail()
        if self.raw_listing is not None:
            return self.raw_listing
        search = (params.get("search") or "").lower()
        voices = [v for v in self.voices if search in v["name"].lower()]
        voices = voices[: params.get("page_size", 20)]
        return {"voices": voices, "total_count": len(voices)}

    async def add_voice(self, file_paths: list[Path], form: dict[str, str]) -> Any:
        self.calls.append(("add_voice", {"files": file_paths, "form": form}))
        await self._maybe_fail()
        return self.clone_response

    async def close(self) -> None:
        self.closed = True


RACHEL_ID = "21m00Tcm4TlvDq8ikWAM"
ADAM_ID = "pNInz6obpgDQGcFmaJgB"


@pytest.fixture
def voices() -> list[dict[str, Any]]:
    return [
        {"voice_id": RACHEL_ID, "name": "Rachel", "category": "premade", "labels": {"accent": "american"}},
        {"voice_id": ADAM_ID, "name": "Adam", "category": "premade", "labels": {}},
    ]


@pytest.fixture
def gateway(voices: list[dict[str, Any]]) -> FakeGateway:
    return FakeGateway(voices=voices)


@pytest.fixture
def client(gateway: FakeGateway) -> ElevenLabsClient:
    return ElevenLabsClient(gateway, timeout_ms=1000)


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    path = tmp_path / "input.mp3"
    path.write_bytes(b"ID3fake-audio")
    return path


@pytest.fixture
def make_gateway():
    """Factory for gateways with custom canned data."""
    return FakeGateway
