"""
API key resolution utilities.

Resolves the ElevenLabs API key from:
1. An explicit value
2. The ELEVENLABS_API_KEY environment variable
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

API_KEY_ENV = "ELEVENLABS_API_KEY"
API_KEY_HEADER = "xi-api-key"


def resolve_api_key(
    explicit_key: str | None = None,
    env: Mapping[str, str] | None = None,
) -> str | None:
    """Resolve the API key.

    Args:
        explicit_key: Explicitly provided API key
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        Resolved API key or None if not found
    """
    if explicit_key:
        return explicit_key

    source = os.environ if env is None else env
    key = source.get(API_KEY_ENV, "").strip()
    return key or None


def get_auth_header(api_key: str | None = None) -> dict[str, str]:
    """Build the authentication header.

    Args:
        api_key: Explicit API key (falls back to the environment)

    Returns:
        Header dictionary, empty when no key is available
    """
    key = resolve_api_key(api_key)
    if not key:
        return {}
    return {API_KEY_HEADER: key}
