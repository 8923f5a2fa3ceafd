#!/usr/bin/env python3
"""
Basic client example.

Uses the API client directly, without the MCP server: lists a few voices,
synthesizes a sentence and writes it next to this script.

Usage:
    export ELEVENLABS_API_KEY="your-api-key"
    python examples/basic_speech.py
"""

import asyncio
from pathlib import Path

from eleven_mcp import ClientError, ElevenLabsClient, load_config
from eleven_mcp.types import ListVoicesRequest, SpeechRequest


async def main() -> None:
    """Run basic speech example."""
    config = load_config()

    async with ElevenLabsClient.from_config(config) as client:
        voices = await client.list_voices(ListVoicesRequest(page_size=5))
        for voice in voices.voices:
            print(f"{voice.name:<20} {voice.voice_id}")
        print()

        try:
            # Names resolve through the voice cache filled by the listing above
            audio = await client.text_to_speech(
                SpeechRequest(text="Hello from ElevenLabs!", voice="Rachel", style=0.2)
            )
        except ClientError as e:
            print(f"Failed ({e.kind.value}): {e}")
            return

        out = Path(__file__).with_name("hello.mp3")
        out.write_bytes(audio)
        print(f"Wrote {len(audio)} bytes to {out}")


if __name__ == "__main__":
    asyncio.run(main())
