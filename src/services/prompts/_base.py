"""Base utilities for prompts module.

Contains shared helper functions used across prompt modules.
"""

import re

_FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_markdown_code_blocks(text: str) -> str:
    """Strip markdown code fences from AI response text.

    Gemini sometimes wraps JSON in ```json fences even when asked not to;
    every fence marker is removed, wherever it appears.

    Args:
        text: Raw text that may contain markdown code blocks

    Returns:
        Cleaned text with markdown code fences removed
    """
    return _FENCE_PATTERN.sub("", text or "").strip()
