"""Script generator for the production pipeline.

Uses Gemini to turn a topic (or a user-written script) into an ordered list
of Scenes. Any malformed or failed AI response degrades to newline chunking
of the raw input; that fallback never translates.
"""

import json
import logging
from typing import Any, Optional

from models.catalog import DURATION_TIERS, DurationTier, language_name
from models.scene import MediaType, Scene, estimate_duration
from services.prompts import (
    MANUAL_SCRIPT_PARSER_V1,
    PROMPT_VERSIONS,
    SCRIPT_GENERATOR_V1,
    strip_markdown_code_blocks,
)
from utils.errors import DocuGenError, UpstreamServiceError, ValidationError

logger = logging.getLogger(__name__)


class ScriptGenerationError(DocuGenError):
    """Neither the AI response nor the raw input produced any scene."""

    pass


def get_duration_tier(duration: str) -> DurationTier:
    """Look up the scene count and detail level for a duration tier.

    Raises:
        ValidationError: If the tier is not short, medium or long
    """
    try:
        return DURATION_TIERS[duration]
    except KeyError:
        raise ValidationError(
            f"Unknown duration tier: {duration} (expected one of {', '.join(DURATION_TIERS)})"
        ) from None


def build_scenes(items: list[dict[str, str]]) -> list[Scene]:
    """Create scenes with sequential ids from ``{text, visualPrompt}`` items."""
    return [
        Scene(
            id=f"scene_{index}",
            text=item["text"],
            duration=estimate_duration(item["text"]),
            media_type=MediaType.IMAGE,
            visual_prompt=item.get("visualPrompt") or None,
        )
        for index, item in enumerate(items)
    ]


def chunk_by_lines(raw: str) -> list[Scene]:
    """Fallback: one scene per non-empty line, the line doubling as visual prompt."""
    lines = [line.strip() for line in raw.splitlines() if line.strip()]
    return build_scenes([{"text": line, "visualPrompt": line} for line in lines])


def parse_scene_items(response_text: str) -> Optional[list[dict[str, str]]]:
    """Parse the AI JSON array.

    Returns:
        Normalized items, or None when the response is malformed (not a
        list, empty, or an item without narration text)
    """
    cleaned = strip_markdown_code_blocks(response_text)
    try:
        data: Any = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.warning(f"JSON parsing failed for script response: {e}")
        return None

    if not isinstance(data, list) or not data:
        return None

    items = []
    for entry in data:
        if not isinstance(entry, dict):
            return None
        text = entry.get("text")
        if not isinstance(text, str) or not text.strip():
            return None
        visual_prompt = entry.get("visualPrompt")
        items.append(
            {
                "text": text.strip(),
                "visualPrompt": visual_prompt.strip() if isinstance(visual_prompt, str) else "",
            }
        )
    return items


class ScriptGenerator:
    """Generates scene lists from topics or manual scripts using Gemini.

    Takes an existing AIService instance for Gemini API access.
    """

    def __init__(self, ai_service):
        """Initialize with an AIService instance.

        Args:
            ai_service: Configured AIService with Gemini client
        """
        self.ai = ai_service

    async def _scenes_from_prompt(self, prompt: str, raw_input: str) -> list[Scene]:
        try:
            response_text = await self.ai.generate_text(prompt, json_output=True)
        except UpstreamServiceError as e:
            logger.error(f"Script generation failed, chunking raw input: {e}")
            response_text = ""

        items = parse_scene_items(response_text) if response_text else None
        if items is None:
            logger.warning("Malformed script response, falling back to line chunking")
            scenes = chunk_by_lines(raw_input)
        else:
            scenes = build_scenes(items)

        if not scenes:
            raise ScriptGenerationError("No scenes could be produced from the input")

        total_duration = sum(s.duration for s in scenes)
        logger.info(f"Script ready: {len(scenes)} scenes, ~{total_duration:.0f}s total")
        return scenes

    async def generate_script(
        self,
        topic: str,
        input_language: str = "en",
        output_language: str = "en",
        style: str = "documentary",
        duration: str = "short",
    ) -> list[Scene]:
        """Generate scenes for a topic.

        Args:
            topic: The video topic/subject
            input_language: Language code the topic is written in
            output_language: Language code for the narration
            style: Video style id
            duration: Duration tier (short, medium, long)

        Returns:
            Ordered scenes with ids scene_0, scene_1, ...
        """
        if not topic or not topic.strip():
            raise ValidationError("Topic is required")
        tier = get_duration_tier(duration)

        logger.info(
            f"Generating script: topic='{topic[:60]}', style={style}, "
            f"duration={duration}, target_scenes={tier.scene_count}, "
            f"prompt={PROMPT_VERSIONS['generate_script']}"
        )

        prompt = SCRIPT_GENERATOR_V1.format(
            topic=topic,
            input_language=language_name(input_language),
            output_language=language_name(output_language),
            style=style,
            duration=duration,
            target_scenes=tier.scene_count,
            detail_level=tier.detail_level,
        )
        return await self._scenes_from_prompt(prompt, topic)

    async def parse_manual_script(
        self,
        script: str,
        input_language: str = "en",
        output_language: str = "en",
    ) -> list[Scene]:
        """Split a user-written script into scenes, translating if needed."""
        if not script or not script.strip():
            raise ValidationError("Script text is required")

        logger.info(
            f"Parsing manual script: {len(script)} chars, {input_language}->{output_language}, "
            f"prompt={PROMPT_VERSIONS['parse_manual_script']}"
        )
        prompt = MANUAL_SCRIPT_PARSER_V1.format(
            script=script,
            input_language=language_name(input_language),
            output_language=language_name(output_language),
        )
        return await self._scenes_from_prompt(prompt, script)
