"""Script generation prompt templates.

Contains prompts for:
- SCRIPT_GENERATOR_V1: Turn a topic into narrated scenes
- MANUAL_SCRIPT_PARSER_V1: Split (and translate) a user-written script into scenes
"""

# Script Generator v1 prompt
# Template placeholders: {topic}, {input_language}, {output_language}, {style},
# {duration}, {target_scenes}, {detail_level}
SCRIPT_GENERATOR_V1 = """Create a professional video script.

Topic: {topic}
Input Language: {input_language}
Output Language: {output_language}
Style: {style}
Duration: {duration}

REQUIREMENTS
- Write exactly {target_scenes} scenes with a {detail_level} level of detail.
- The topic is written in {input_language}; every "text" field must be narration
  written in {output_language}.
- Every "visualPrompt" must be written in English regardless of the narration
  language: a concrete, filmable description for an image generator.
- Keep each narration to one or two spoken sentences.

OUTPUT
Return ONLY a JSON array, no markdown, no extra keys:
[
 {{ "text": "... narration ...", "visualPrompt": "... image prompt ..." }}
]
"""

# Manual Script Parser v1 prompt
# Template placeholders: {script}, {input_language}, {output_language}
MANUAL_SCRIPT_PARSER_V1 = """Split the following video script into scenes.

Input Language: {input_language}
Output Language: {output_language}

REQUIREMENTS
- Keep the author's wording; split at natural narration breaks.
- If the output language differs from the input language, translate each
  scene's narration into {output_language}.
- Every "visualPrompt" must be written in English: a concrete, filmable
  description for an image generator.

SCRIPT
<<<
{script}
>>>

OUTPUT
Return ONLY a JSON array, no markdown, no extra keys:
[
 {{ "text": "... narration ...", "visualPrompt": "... image prompt ..." }}
]
"""
