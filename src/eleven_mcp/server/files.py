"""
Output file helpers for tool handlers.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path


def extension_for_format(output_format: str) -> str:
    """Infer a file extension from an output format string.

    ``mp3*`` -> mp3, ``pcm*`` -> pcm, ``ulaw*``/``alaw*`` -> wav, else mp3.
    """
    if output_format.startswith("mp3"):
        return "mp3"
    if output_format.startswith("pcm"):
        return "pcm"
    if output_format.startswith(("ulaw", "alaw")):
        return "wav"
    return "mp3"


def timestamp_slug(now: datetime | None = None) -> str:
    """UTC ISO-8601 timestamp with millisecond precision, ':' and '.' replaced by '-'."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def auto_save_path(
    output_dir: str | Path,
    prefix: str,
    ext: str = "mp3",
    *,
    now: datetime | None = None,
) -> Path:
    """Build ``{output_dir}/{prefix}-{timestamp}.{ext}`` as an absolute path."""
    return Path(output_dir).resolve() / f"{prefix}-{timestamp_slug(now)}.{ext}"


def save_audio(data: bytes, save_path: str | Path) -> Path:
    """Write audio to disk, creating parent directories as needed.

    Returns:
        The path written to
    """
    path = Path(save_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def format_size(data: bytes) -> str:
    return f"{len(data) / 1024:.1f} KB"
