"""配置：从环境变量加载服务配置，并提供模型与输出格式目录。

Server configuration.

Configuration is read once at startup from the environment. The models are
plain Pydantic models so that tests can build them directly.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from eleven_mcp.errors import ConfigError
from eleven_mcp.transport.auth import API_KEY_ENV, resolve_api_key

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_BASE_URL = "https://api.elevenlabs.io"
DEFAULT_VOICE = "Rachel"
DEFAULT_TIMEOUT_MS = 120_000
DEFAULT_OUTPUT_DIR = "./generated-media"

TtsModel = Literal[
    "eleven_v3",
    "eleven_multilingual_v2",
    "eleven_turbo_v2_5",
    "eleven_flash_v2_5",
]

StsModel = Literal["eleven_english_sts_v2"]

SttModel = Literal["scribe_v2", "scribe_v1"]

OutputFormat = Literal[
    "mp3_44100_128",
    "mp3_44100_192",
    "mp3_22050_32",
    "pcm_16000",
    "pcm_22050",
    "pcm_24000",
    "pcm_44100",
    "ulaw_8000",
    "alaw_8000",
]

VoiceCategory = Literal["premade", "cloned", "generated", "professional"]


class ServerConfig(BaseModel):
    """Runtime configuration for the server and its API client."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1, repr=False, description="ElevenLabs API key")
    default_voice: str = Field(
        default=DEFAULT_VOICE, description="Voice used when a tool call names none"
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, description="Base timeout in milliseconds"
    )
    output_dir: Path = Field(
        default=Path(DEFAULT_OUTPUT_DIR), description="Directory for auto-named output files"
    )
    base_url: str = Field(default=DEFAULT_BASE_URL, description="API base URL")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="text", description="Log format: text or json")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


def _parse_timeout(raw: str | None) -> int:
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        timeout = int(raw.strip())
    except ValueError:
        raise ConfigError(
            "ELEVENLABS_TIMEOUT must be a positive number", variable="ELEVENLABS_TIMEOUT"
        ) from None
    if timeout <= 0:
        raise ConfigError(
            "ELEVENLABS_TIMEOUT must be a positive number", variable="ELEVENLABS_TIMEOUT"
        )
    return timeout


def load_config(environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Load configuration from environment variables.

    Args:
        environ: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Validated ServerConfig

    Raises:
        ConfigError: If the API key is missing or the timeout is invalid
    """
    env = os.environ if environ is None else environ

    api_key = resolve_api_key(env=env)
    if not api_key:
        raise ConfigError(
            "ElevenLabs API key not configured. Please set the "
            f"{API_KEY_ENV} environment variable.",
            variable=API_KEY_ENV,
        ).with_hint("Get your API key at: https://elevenlabs.io -> Profile -> API Keys")

    return ServerConfig(
        api_key=api_key,
        default_voice=env.get("ELEVENLABS_DEFAULT_VOICE") or DEFAULT_VOICE,
        timeout_ms=_parse_timeout(env.get("ELEVENLABS_TIMEOUT")),
        output_dir=Path(env.get("ELEVENLABS_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR),
        base_url=env.get("ELEVENLABS_BASE_URL") or DEFAULT_BASE_URL,
        log_level=env.get("ELEVENLABS_LOG_LEVEL") or "INFO",
        log_format=env.get("ELEVENLABS_LOG_FORMAT") or "text",
    )
