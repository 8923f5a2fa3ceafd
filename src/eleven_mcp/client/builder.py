"""
Builder for fluent client construction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eleven_mcp.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS, DEFAULT_VOICE
from eleven_mcp.gateway import ElevenLabsGateway
from eleven_mcp.transport import API_KEY_ENV, HttpTransport, resolve_api_key

if TYPE_CHECKING:
    from eleven_mcp.client.core import ElevenLabsClient
    from eleven_mcp.gateway import AudioGateway
    from eleven_mcp.voices import VoiceCache


class ElevenLabsClientBuilder:
    """Builder for ElevenLabsClient.

    Example:
        >>> client = await (
        ...     ElevenLabsClient.builder()
        ...     .api_key("sk_...")
        ...     .timeout_ms(60_000)
        ...     .default_voice("Adam")
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        self._api_key: str | None = None
        self._base_url: str | None = None
        self._timeout_ms: int = DEFAULT_TIMEOUT_MS
        self._default_voice: str = DEFAULT_VOICE
        self._gateway: AudioGateway | None = None
        self._voice_cache: VoiceCache | None = None

    def api_key(self, api_key: str | None) -> ElevenLabsClientBuilder:
        self._api_key = api_key
        return self

    def base_url(self, url: str | None) -> ElevenLabsClientBuilder:
        self._base_url = url
        return self

    def timeout_ms(self, timeout_ms: int) -> ElevenLabsClientBuilder:
        self._timeout_ms = timeout_ms
        return self

    def default_voice(self, voice: str) -> ElevenLabsClientBuilder:
        self._default_voice = voice
        return self

    def gateway(self, gateway: AudioGateway) -> ElevenLabsClientBuilder:
        """Use a custom gateway instead of the HTTP one."""
        self._gateway = gateway
        return self

    def voice_cache(self, cache: VoiceCache) -> ElevenLabsClientBuilder:
        self._voice_cache = cache
        return self

    async def build(self) -> ElevenLabsClient:
        """Build the client.

        Raises:
            ValueError: If no gateway is given and no API key can be found
        """
        from eleven_mcp.client.core import ElevenLabsClient

        gateway = self._gateway
        if gateway is None:
            api_key = resolve_api_key(self._api_key)
            if not api_key:
                raise ValueError(f"API key required ({API_KEY_ENV})")
            transport = HttpTransport(self._base_url or DEFAULT_BASE_URL, api_key=api_key)
            gateway = ElevenLabsGateway(transport)

        return ElevenLabsClient(
            gateway,
            timeout_ms=self._timeout_ms,
            default_voice=self._default_voice,
            voice_cache=self._voice_cache,
        )
