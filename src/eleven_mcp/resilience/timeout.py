"""超时竞速：为每个远程操作设置按操作类型缩放的截止时间。

Timeout race.

Every remote operation runs against a deadline derived from one base
timeout. Slower remote operations get a larger multiple; the table is
fixed, callers cannot override it per call.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import TYPE_CHECKING, TypeVar

from eleven_mcp.errors import DeadlineExceeded

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")


class OperationKind(str, Enum):
    """Remote operation kinds, each with a fixed deadline multiplier."""

    LIST_VOICES = "list_voices"
    SPEECH = "speech"
    SOUND_EFFECT = "sound_effect"
    CLONE_VOICE = "clone_voice"
    SPEECH_TO_SPEECH = "speech_to_speech"
    MUSIC = "music"
    TRANSCRIPTION = "transcription"
    ISOLATION = "isolation"

    @property
    def multiplier(self) -> int:
        return DEADLINE_MULTIPLIERS[self]


DEADLINE_MULTIPLIERS: dict[OperationKind, int] = {
    OperationKind.LIST_VOICES: 1,
    OperationKind.SPEECH: 2,
    OperationKind.SOUND_EFFECT: 2,
    OperationKind.CLONE_VOICE: 2,
    OperationKind.SPEECH_TO_SPEECH: 2,
    OperationKind.MUSIC: 3,
    OperationKind.TRANSCRIPTION: 3,
    OperationKind.ISOLATION: 3,
}


def deadline_for(kind: OperationKind, base_timeout_ms: int) -> float:
    """Return the deadline for an operation kind, in seconds.

    Args:
        kind: Operation kind
        base_timeout_ms: Configured base timeout in milliseconds

    Returns:
        Scaled deadline in seconds
    """
    if base_timeout_ms <= 0:
        raise ValueError("base_timeout_ms must be positive")
    return base_timeout_ms * kind.multiplier / 1000.0


async def race_with_timeout(
    operation: Awaitable[T],
    timeout: float,
    *,
    kind: OperationKind | None = None,
) -> T:
    """Await an operation, giving up once the deadline passes.

    The abandoned operation is cancelled; nothing else is done to stop the
    remote side.

    Args:
        operation: Awaitable to run
        timeout: Deadline in seconds
        kind: Operation kind, recorded on the error

    Returns:
        The operation's result

    Raises:
        DeadlineExceeded: If the deadline passes first
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout)
    except asyncio.TimeoutError:
        raise DeadlineExceeded(
            f"Request timeout after {timeout:.3f}s",
            deadline=timeout,
            operation=kind.value if kind else None,
        ) from None
