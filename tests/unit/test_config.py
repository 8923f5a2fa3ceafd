"""Tests for configuration loading and output file helpers."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from eleven_mcp.config import (
    DEFAULT_TIMEOUT_MS,
    ServerConfig,
    load_config,
)
from eleven_mcp.errors import ConfigError
from eleven_mcp.server.files import (
    auto_save_path,
    extension_for_format,
    format_size,
    save_audio,
    timestamp_slug,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self) -> None:
        config = load_config({"ELEVENLABS_API_KEY": "sk_abc"})
        assert config.api_key == "sk_abc"
        assert config.default_voice == "Rachel"
        assert config.timeout_ms == DEFAULT_TIMEOUT_MS
        assert config.timeout_seconds == 120.0
        assert config.output_dir == Path("./generated-media")
        assert config.base_url == "https://api.elevenlabs.io"

    def test_overrides(self) -> None:
        config = load_config(
            {
                "ELEVENLABS_API_KEY": "sk_abc",
                "ELEVENLABS_DEFAULT_VOICE": "Adam",
                "ELEVENLABS_TIMEOUT": "30000",
                "ELEVENLABS_OUTPUT_DIR": "/tmp/out",
                "ELEVENLABS_LOG_FORMAT": "json",
            }
        )
        assert config.default_voice == "Adam"
        assert config.timeout_ms == 30000
        assert config.output_dir == Path("/tmp/out")
        assert config.log_format == "json"

    def test_missing_key(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config({})
        assert "ELEVENLABS_API_KEY" in exc_info.value.message
        assert exc_info.value.context.hint is not None

    def test_blank_key(self) -> None:
        with pytest.raises(ConfigError):
            load_config({"ELEVENLABS_API_KEY": "   "})

    @pytest.mark.parametrize("raw", ["abc", "0", "-5"])
    def test_bad_timeout(self, raw: str) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config({"ELEVENLABS_API_KEY": "sk", "ELEVENLABS_TIMEOUT": raw})
        assert exc_info.value.variable == "ELEVENLABS_TIMEOUT"

    def test_key_not_in_repr(self) -> None:
        config = ServerConfig(api_key="sk_secret")
        assert "sk_secret" not in repr(config)

    def test_model_validation(self) -> None:
        with pytest.raises(ValidationError):
            ServerConfig(api_key="sk", timeout_ms=0)


class TestFiles:
    """Tests for output file helpers."""

    @pytest.mark.parametrize(
        ("fmt", "ext"),
        [
            ("mp3_44100_128", "mp3"),
            ("pcm_24000", "pcm"),
            ("ulaw_8000", "wav"),
            ("alaw_8000", "wav"),
            ("opus_48000_64", "mp3"),
        ],
    )
    def test_extension_for_format(self, fmt: str, ext: str) -> None:
        assert extension_for_format(fmt) == ext

    def test_timestamp_slug(self) -> None:
        moment = datetime(2026, 10, 17, 4, 28, 0, 123000, tzinfo=timezone.utc)
        assert timestamp_slug(moment) == "2026-10-17T04-28-00-123Z"

    def test_auto_save_path(self, tmp_path: Path) -> None:
        moment = datetime(2026, 1, 2, 3, 4, 5, 6000, tzinfo=timezone.utc)
        path = auto_save_path(tmp_path, "sfx", now=moment)
        assert path == tmp_path.resolve() / "sfx-2026-01-02T03-04-05-006Z.mp3"
        assert path.is_absolute()

    def test_save_audio_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "out.mp3"
        assert save_audio(b"data", target) == target
        assert target.read_bytes() == b"data"

    def test_format_size(self) -> None:
        assert format_size(b"x" * 2048) == "2.0 KB"
        assert format_size(b"") == "0.0 KB"
