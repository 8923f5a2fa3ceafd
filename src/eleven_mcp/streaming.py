"""
Stream collector.

Drains a pull-based async byte stream into one contiguous buffer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from eleven_mcp.errors import ClientError, normalize

if TYPE_CHECKING:
    from collections.abc import AsyncIterable


async def drain(stream: AsyncIterable[bytes]) -> bytes:
    """Consume a byte stream to completion.

    Chunks are concatenated in arrival order. A failure mid-stream is
    normalized and raised; the partial buffer is discarded.

    Args:
        stream: Async iterable of byte chunks

    Returns:
        The complete body

    Raises:
        ClientError: If the stream fails before it is exhausted
    """
    buffer = bytearray()
    try:
        async for chunk in stream:
            if chunk:
                buffer.extend(chunk)
    except ClientError:
        raise
    except Exception as e:
        raise normalize(e) from e
    return bytes(buffer)
