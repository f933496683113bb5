"""Stock search keyword prompt templates."""

# Keyword Extractor v1 prompt
# Template placeholders: {text}
KEYWORD_EXTRACTOR_V1 = (
    "Extract 1 or 2 specific visual English keywords for a stock video search "
    'based on this text: "{text}". Return ONLY the keywords separated by space.'
)
