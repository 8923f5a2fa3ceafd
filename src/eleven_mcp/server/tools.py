"""工具分发：每个工具的输入校验、文件预检、输出保存与响应文本格式化。

Tool handlers.

Each tool has a Pydantic input model (which doubles as its JSON schema) and
an async handler that calls the API client, writes any audio to disk and
formats a text reply. Handlers raise on failure; the server turns the
exception message into an error result.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from eleven_mcp.config import OutputFormat, StsModel, SttModel, TtsModel, VoiceCategory
from eleven_mcp.errors import ElevenMcpError, ToolInputError
from eleven_mcp.server.files import (
    auto_save_path,
    extension_for_format,
    format_size,
    save_audio,
)
from eleven_mcp.telemetry import call_context, get_logger
from eleven_mcp.types import (
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_TTS_MODEL,
    CloneVoiceRequest,
    IsolationRequest,
    ListVoicesRequest,
    MusicRequest,
    SoundEffectRequest,
    SpeechRequest,
    SpeechToSpeechRequest,
    TranscriptionRequest,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from eleven_mcp.client import ElevenLabsClient

logger = get_logger(__name__)

_SAVE_PATH_DESCRIPTION = (
    "File path to save the audio. If not provided, auto-saves to output directory."
)


@dataclass
class ToolContext:
    """What every handler needs: the API client and where to write files."""

    client: ElevenLabsClient
    output_dir: Path


class ToolInput(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TextToSpeechInput(ToolInput):
    text: str = Field(min_length=1, max_length=10000, description="The text to convert to speech")
    voice: str | None = Field(
        default=None,
        description='Voice name (e.g., "Rachel", "Adam", "Bella") or voice ID. '
        "Use list_voices to see options.",
    )
    model: TtsModel | None = Field(
        default=None,
        description='TTS model: "eleven_multilingual_v2" (default, 29 languages), '
        '"eleven_v3" (latest), "eleven_turbo_v2_5" (fast), "eleven_flash_v2_5" (ultra-fast)',
    )
    stability: float | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Voice stability (0.0-1.0). Lower = more expressive, "
        "higher = more consistent. Default: 0.5",
    )
    similarity_boost: float | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Voice clarity/similarity (0.0-1.0). Higher = closer to original voice. "
        "Default: 0.75",
    )
    style: float | None = Field(
        default=None,
        ge=0,
        le=1,
        description="Style exaggeration (0.0-1.0). Higher = more expressive delivery. Default: 0",
    )
    speed: float | None = Field(
        default=None, ge=0.25, le=4.0, description="Speech speed (0.25-4.0). Default: 1.0"
    )
    output_format: OutputFormat | None = Field(
        default=None, description='Audio format: "mp3_44100_128" (default), "mp3_44100_192", '
        '"pcm_44100", "pcm_24000", "pcm_16000", "ulaw_8000"'
    )
    save_path: str | None = Field(default=None, description=_SAVE_PATH_DESCRIPTION)


class SoundEffectsInput(ToolInput):
    text: str = Field(
        min_length=1,
        max_length=1000,
        description="Description of the sound effect to generate (e.g., "
        '"thunder rumbling in the distance", "wooden door creaking open slowly")',
    )
    duration_seconds: float | None = Field(
        default=None,
        ge=0.5,
        le=30,
        description="Duration in seconds (0.5-30). Auto-determined if omitted.",
    )
    prompt_influence: float | None = Field(
        default=None,
        ge=0,
        le=1,
        description="How closely to follow the text prompt (0.0-1.0). Default: 0.3",
    )
    save_path: str | None = Field(default=None, description=_SAVE_PATH_DESCRIPTION)


class GenerateMusicInput(ToolInput):
    text: str = Field(
        min_length=1,
        max_length=1000,
        description="Description of the music to generate (e.g., "
        '"lo-fi hip hop beat with piano and soft drums", '
        '"epic orchestral score for a movie trailer")',
    )
    duration_seconds: float | None = Field(
        default=None,
        ge=10,
        le=300,
        description="Duration in seconds (10-300). Auto-determined if omitted.",
    )
    save_path: str | None = Field(default=None, description=_SAVE_PATH_DESCRIPTION)


class ListVoicesInput(ToolInput):
    search: str | None = Field(
        default=None,
        description="Search query to filter voices by name, description, or labels",
    )
    category: VoiceCategory | None = Field(
        default=None,
        description='Filter by category: "premade", "cloned", "generated", "professional"',
    )
    page_size: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Number of voices to return (default: 20, max: 100)",
    )


class CloneVoiceInput(ToolInput):
    name: str = Field(min_length=1, description="Name for the cloned voice")
    files: list[str] = Field(
        min_length=1,
        description="Array of absolute paths to audio files for cloning "
        "(1-2 minutes of clear audio recommended)",
    )
    description: str | None = Field(default=None, description="Optional description of the voice")
    remove_background_noise: bool | None = Field(
        default=None,
        description="Apply audio isolation to samples before cloning (default: false)",
    )


class SpeechToSpeechInput(ToolInput):
    audio_path: str = Field(min_length=1, description="Absolute path to the source audio file")
    voice: str = Field(min_length=1, description="Target voice name or ID to apply")
    model: StsModel | None = Field(
        default=None, description='STS model: "eleven_english_sts_v2" (default)'
    )
    stability: float | None = Field(
        default=None, ge=0, le=1, description="Voice stability (0.0-1.0). Default: 0.5"
    )
    similarity_boost: float | None = Field(
        default=None, ge=0, le=1, description="Voice clarity/similarity (0.0-1.0). Default: 0.75"
    )
    remove_background_noise: bool | None = Field(
        default=None,
        description="Remove background noise from source audio (default: false)",
    )
    save_path: str | None = Field(default=None, description=_SAVE_PATH_DESCRIPTION)


class TranscribeInput(ToolInput):
    audio_path: str = Field(
        min_length=1, description="Absolute path to the audio file to transcribe"
    )
    model: SttModel | None = Field(
        default=None,
        description='Transcription model: "scribe_v2" (default, 90+ languages), "scribe_v1"',
    )
    language_code: str | None = Field(
        default=None,
        description='Language code (ISO 639-1, e.g., "en", "es", "fr") to improve accuracy',
    )
    diarize: bool | None = Field(
        default=None, description="Identify which speaker is talking (default: false)"
    )
    num_speakers: int | None = Field(
        default=None,
        ge=1,
        le=32,
        description="Expected number of speakers (up to 32). "
        "Helps improve diarization accuracy.",
    )


class VoiceIsolationInput(ToolInput):
    audio_path: str = Field(
        min_length=1, description="Absolute path to the audio file to process"
    )
    save_path: str | None = Field(
        default=None,
        description="File path to save the isolated audio. "
        "If not provided, auto-saves to output directory.",
    )


def require_file(path: str) -> Path:
    """Resolve a path and check that it exists."""
    resolved = Path(path).resolve()
    if not resolved.exists():
        raise ToolInputError(f"Audio file not found: {resolved}", field="audio_path")
    return resolved


async def text_to_speech(ctx: ToolContext, args: TextToSpeechInput) -> str:
    voice_name = args.voice or ctx.client.default_voice
    output_format = args.output_format or DEFAULT_OUTPUT_FORMAT

    audio = await ctx.client.text_to_speech(
        SpeechRequest(
            text=args.text,
            voice=voice_name,
            model_id=args.model,
            output_format=output_format,
            stability=args.stability,
            similarity_boost=args.similarity_boost,
            style=args.style,
            speed=args.speed,
        )
    )

    ext = extension_for_format(output_format)
    saved_to = save_audio(audio, args.save_path or auto_save_path(ctx.output_dir, "speech", ext))
    return (
        f"Audio saved to: {saved_to}\n"
        f"Voice: {voice_name}\n"
        f"Model: {args.model or DEFAULT_TTS_MODEL}\n"
        f"Format: {output_format}\n"
        f"Size: {format_size(audio)}"
    )


async def sound_effects(ctx: ToolContext, args: SoundEffectsInput) -> str:
    audio = await ctx.client.sound_effects(
        SoundEffectRequest(
            text=args.text,
            duration_seconds=args.duration_seconds,
            prompt_influence=args.prompt_influence,
        )
    )
    saved_to = save_audio(audio, args.save_path or auto_save_path(ctx.output_dir, "sfx"))
    return (
        f"Sound effect saved to: {saved_to}\n"
        f"Description: {args.text}\n"
        f"Size: {format_size(audio)}"
    )


async def generate_music(ctx: ToolContext, args: GenerateMusicInput) -> str:
    audio = await ctx.client.generate_music(
        MusicRequest(text=args.text, duration_seconds=args.duration_seconds)
    )
    saved_to = save_audio(audio, args.save_path or auto_save_path(ctx.output_dir, "music"))
    return (
        f"Music saved to: {saved_to}\n"
        f"Description: {args.text}\n"
        f"Size: {format_size(audio)}"
    )


async def list_voices(ctx: ToolContext, args: ListVoicesInput) -> str:
    result = await ctx.client.list_voices(
        ListVoicesRequest(search=args.search, category=args.category, page_size=args.page_size)
    )

    lines: list[str] = []
    if result.total_count is not None:
        lines.append(f"**Found {result.total_count} voice(s)**\n")
    lines.append("| Name | Voice ID | Category | Labels |")
    lines.append("|------|----------|----------|--------|")
    for voice in result.voices:
        labels = ", ".join(f"{k}: {v}" for k, v in (voice.labels or {}).items())
        lines.append(f"| {voice.name} | {voice.voice_id} | {voice.category or ''} | {labels} |")
    return "\n".join(lines) + "\n"


async def clone_voice(ctx: ToolContext, args: CloneVoiceInput) -> str:
    paths = []
    for i, file_path in enumerate(args.files):
        resolved = Path(file_path).resolve()
        if not resolved.exists():
            raise ToolInputError(f"Audio file not found: {resolved}", field=f"files[{i}]")
        paths.append(resolved)

    result = await ctx.client.clone_voice(
        CloneVoiceRequest(
            name=args.name,
            file_paths=paths,
            description=args.description,
            remove_background_noise=args.remove_background_noise,
        )
    )
    return (
        "Voice cloned successfully!\n"
        f"Name: {result.name}\n"
        f"Voice ID: {result.voice_id}\n\n"
        "You can now use this voice with text_to_speech by setting "
        f'voice: "{result.name}" or voice: "{result.voice_id}"'
    )


async def speech_to_speech(ctx: ToolContext, args: SpeechToSpeechInput) -> str:
    audio_path = require_file(args.audio_path)
    audio = await ctx.client.speech_to_speech(
        SpeechToSpeechRequest(
            audio_path=audio_path,
            voice=args.voice,
            model_id=args.model,
            stability=args.stability,
            similarity_boost=args.similarity_boost,
            remove_background_noise=args.remove_background_noise,
        )
    )
    saved_to = save_audio(audio, args.save_path or auto_save_path(ctx.output_dir, "sts"))
    return (
        f"Converted audio saved to: {saved_to}\n"
        f"Target voice: {args.voice}\n"
        f"Size: {format_size(audio)}"
    )


async def transcribe(ctx: ToolContext, args: TranscribeInput) -> str:
    audio_path = require_file(args.audio_path)
    result = await ctx.client.transcribe(
        TranscriptionRequest(
            audio_path=audio_path,
            model_id=args.model,
            language_code=args.language_code,
            diarize=args.diarize,
            num_speakers=args.num_speakers,
        )
    )
    text = f"**Transcription:**\n\n{result.text}"
    if result.words:
        text += f"\n\n---\n*{len(result.words)} words detected*"
    return text


async def voice_isolation(ctx: ToolContext, args: VoiceIsolationInput) -> str:
    audio_path = require_file(args.audio_path)
    audio = await ctx.client.voice_isolation(IsolationRequest(audio_path=audio_path))
    saved_to = save_audio(audio, args.save_path or auto_save_path(ctx.output_dir, "isolated"))
    return (
        f"Isolated audio saved to: {saved_to}\n"
        f"Source: {audio_path}\n"
        f"Size: {format_size(audio)}"
    )


@dataclass(frozen=True)
class ToolSpec:
    """A tool as advertised to MCP clients."""

    name: str
    description: str
    input_model: type[ToolInput]
    handler: Callable[[ToolContext, Any], Awaitable[str]]

    def input_schema(self) -> dict[str, Any]:
        return self.input_model.model_json_schema()


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            "text_to_speech",
            "Convert text to natural speech using ElevenLabs' industry-leading TTS. "
            "Saves audio file to disk. Trigger: 'elevenlabs tts', 'elevenlabs speak', "
            "or 'elevenlabs text to speech'.",
            TextToSpeechInput,
            text_to_speech,
        ),
        ToolSpec(
            "sound_effects",
            "Generate sound effects from text descriptions using ElevenLabs. Great for game "
            "audio, video production, and creative projects. Trigger: 'elevenlabs sfx', "
            "'elevenlabs sound effect', or 'elevenlabs generate sound'.",
            SoundEffectsInput,
            sound_effects,
        ),
        ToolSpec(
            "generate_music",
            "Generate studio-grade music from text descriptions using ElevenLabs. "
            "Trigger: 'elevenlabs music', 'elevenlabs generate music', or 'elevenlabs compose'.",
            GenerateMusicInput,
            generate_music,
        ),
        ToolSpec(
            "list_voices",
            "List and search available ElevenLabs voices. Trigger: 'elevenlabs voices', "
            "'elevenlabs list voices', or 'show elevenlabs voices'.",
            ListVoicesInput,
            list_voices,
        ),
        ToolSpec(
            "clone_voice",
            "Create an instant voice clone from audio samples. Requires 1-2 minutes of clear "
            "audio. Trigger: 'elevenlabs clone', 'elevenlabs clone voice', "
            "or 'elevenlabs create voice'.",
            CloneVoiceInput,
            clone_voice,
        ),
        ToolSpec(
            "speech_to_speech",
            "Transform audio to use a different voice while preserving emotion and cadence. "
            "Trigger: 'elevenlabs voice change', 'elevenlabs speech to speech', "
            "or 'elevenlabs sts'.",
            SpeechToSpeechInput,
            speech_to_speech,
        ),
        ToolSpec(
            "transcribe",
            "Transcribe audio to text using ElevenLabs Scribe with optional speaker "
            "diarization. Supports 90+ languages. Trigger: 'elevenlabs transcribe', "
            "'elevenlabs stt', or 'elevenlabs speech to text'.",
            TranscribeInput,
            transcribe,
        ),
        ToolSpec(
            "voice_isolation",
            "Isolate vocals from background noise in audio files. Great for cleaning up "
            "recordings. Trigger: 'elevenlabs isolate', 'elevenlabs voice isolation', "
            "or 'elevenlabs clean audio'.",
            VoiceIsolationInput,
            voice_isolation,
        ),
    )
}


def describe_validation_error(tool: str, error: ValidationError) -> str:
    problems = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "arguments"
        problems.append(f"{loc}: {err.get('msg', 'invalid value')}")
    return f"Invalid arguments for {tool}: " + "; ".join(problems)


async def dispatch(ctx: ToolContext, name: str, arguments: dict[str, Any] | None) -> str:
    """Validate arguments and run a tool.

    Args:
        ctx: Handler context
        name: Tool name
        arguments: Raw tool arguments

    Returns:
        Text reply for the caller

    Raises:
        ToolInputError: Unknown tool, invalid arguments or missing input file
        ClientError: The remote operation failed
    """
    spec = TOOLS.get(name)
    if spec is None:
        raise ToolInputError(f"Unknown tool: {name}")

    try:
        args = spec.input_model.model_validate(arguments or {})
    except ValidationError as e:
        raise ToolInputError(describe_validation_error(name, e)) from e

    with call_context(name):
        logger.info("Tool call started")
        try:
            text = await spec.handler(ctx, args)
        except ElevenMcpError as e:
            logger.warning("Tool call failed", error=e.message)
            raise
        except Exception:
            logger.exception("Tool call crashed")
            raise
        logger.info("Tool call finished")
        return text
