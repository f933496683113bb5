"""Prompts module - centralized prompt templates for AI services.

Re-exports all prompt constants and utilities for easy importing:
    from services.prompts import PROMPT_VERSIONS, strip_markdown_code_blocks
    from services.prompts import SCRIPT_GENERATOR_V1, KEYWORD_EXTRACTOR_V1
"""

from services.prompts._base import strip_markdown_code_blocks
from services.prompts.keywords import KEYWORD_EXTRACTOR_V1
from services.prompts.script_generation import MANUAL_SCRIPT_PARSER_V1, SCRIPT_GENERATOR_V1

# Increment these when prompts change so logged outputs can be told apart
PROMPT_VERSIONS = {
    "generate_script": "v1",
    "parse_manual_script": "v1",
    "extract_keywords": "v1",
}

__all__ = [
    # Utilities
    "strip_markdown_code_blocks",
    # Version tracking
    "PROMPT_VERSIONS",
    # Script prompts
    "SCRIPT_GENERATOR_V1",
    "MANUAL_SCRIPT_PARSER_V1",
    # Stock search prompts
    "KEYWORD_EXTRACTOR_V1",
]
