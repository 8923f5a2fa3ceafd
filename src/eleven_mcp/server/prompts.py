"""
Prompt guides exposed alongside the tools.
"""

from __future__ import annotations

from dataclasses import dataclass

SOUND_EFFECTS_PROMPT = """When describing sound effects, be specific about:
- The type of sound (e.g., "wooden door creaking open slowly")
- Duration and timing (e.g., "a short 2-second burst")
- Environment and ambience (e.g., "in a large cathedral with echo")
- Intensity and dynamics (e.g., "starting quiet and building to loud")
Specific, descriptive prompts produce much better results than vague ones."""

MUSIC_GENERATION_PROMPT = """When describing music to generate, be specific about:
- Genre and style (e.g., "lo-fi hip hop beat", "epic orchestral score")
- Tempo and energy (e.g., "slow and melancholic", "upbeat and energetic")
- Instruments (e.g., "piano and strings", "electric guitar with drums")
- Mood and atmosphere (e.g., "peaceful morning", "intense action sequence")
Detailed descriptions produce much better musical results."""


@dataclass(frozen=True)
class PromptGuide:
    name: str
    description: str
    text: str


PROMPTS: dict[str, PromptGuide] = {
    guide.name: guide
    for guide in (
        PromptGuide(
            name="sound_effects_guide",
            description="How to describe a sound effect for the sound_effects tool",
            text=SOUND_EFFECTS_PROMPT,
        ),
        PromptGuide(
            name="music_generation_guide",
            description="How to describe music for the generate_music tool",
            text=MUSIC_GENERATION_PROMPT,
        ),
    )
}
