"""Fixed catalogs: voices, video styles, duration tiers, languages and avatars."""

from dataclasses import dataclass

from models.avatar import Avatar, AvatarStyle


@dataclass(frozen=True)
class Voice:
    """A prebuilt narration voice."""

    id: str
    name: str
    gender: str
    description: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "gender": self.gender,
            "description": self.description,
        }


@dataclass(frozen=True)
class VideoStyle:
    """A narrative/visual style preset."""

    id: str
    label: str
    description: str

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "description": self.description}


@dataclass(frozen=True)
class DurationTier:
    """Target scene count and narrative depth for a duration level."""

    scene_count: int
    detail_level: str


VOICE_OPTIONS: list[Voice] = [
    Voice("Puck", "Puck", "Male", "Deep, resonant, storytelling"),
    Voice("Charon", "Charon", "Male", "Authoritative, news, serious"),
    Voice("Fenrir", "Fenrir", "Male", "Energetic, fast-paced, explainer"),
    Voice("Kore", "Kore", "Female", "Calm, soothing, educational"),
    Voice("Zephyr", "Zephyr", "Female", "Bright, friendly, conversational"),
]

VOICE_IDS = frozenset(voice.id for voice in VOICE_OPTIONS)
DEFAULT_VOICE = "Puck"

VIDEO_STYLES: list[VideoStyle] = [
    VideoStyle("documentary", "Documentary", "Cinematic, factual, and immersive storytelling."),
    VideoStyle("explainer", "Explainer", "Clear, concise, and focused on breaking down concepts."),
    VideoStyle("educational", "Educational", "Academic tone, suitable for lectures and learning."),
    VideoStyle("storytelling", "Storytelling", "Narrative-driven, emotional, and engaging."),
    VideoStyle("news", "News Report", "Formal, urgent, and information-heavy style."),
]

STYLE_IDS = frozenset(style.id for style in VIDEO_STYLES)

# short < 1m, medium 1-5m, long 5-30m
DURATION_TIERS: dict[str, DurationTier] = {
    "short": DurationTier(scene_count=5, detail_level="concise"),
    "medium": DurationTier(scene_count=12, detail_level="moderate"),
    "long": DurationTier(scene_count=30, detail_level="deep-dive"),
}

LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "zh": "Chinese (Simplified)",
    "ja": "Japanese",
    "ko": "Korean",
    "hi": "Hindi",
    "ru": "Russian",
    "ar": "Arabic",
    "tr": "Turkish",
    "nl": "Dutch",
    "pl": "Polish",
    "sv": "Swedish",
    "da": "Danish",
    "fi": "Finnish",
    "no": "Norwegian",
    "el": "Greek",
    "he": "Hebrew",
    "id": "Indonesian",
    "ms": "Malay",
    "th": "Thai",
    "vi": "Vietnamese",
    "cs": "Czech",
    "ro": "Romanian",
    "hu": "Hungarian",
    "uk": "Ukrainian",
    "bg": "Bulgarian",
    "hr": "Croatian",
    "sk": "Slovak",
    "sl": "Slovenian",
    "et": "Estonian",
    "lv": "Latvian",
    "lt": "Lithuanian",
    "sr": "Serbian",
    "bn": "Bengali",
    "ur": "Urdu",
    "fa": "Persian",
    "ta": "Tamil",
    "te": "Telugu",
    "mr": "Marathi",
    "gu": "Gujarati",
    "kn": "Kannada",
    "ml": "Malayalam",
    "pa": "Punjabi",
    "sw": "Swahili",
    "af": "Afrikaans",
    "tl": "Filipino",
    "is": "Icelandic",
}


def language_name(code: str) -> str:
    """Resolve a language code to its English name (English if unknown)."""
    return LANGUAGES.get(code, "English")


_PEXELS_PHOTO = "https://images.pexels.com/photos/{id}/pexels-photo-{id}.jpeg?auto=compress&cs=tinysrgb&w=600"
_COVERR_VIDEO = "https://cdn.coverr.co/videos/{slug}/1080p.mp4"

SYSTEM_AVATARS: list[Avatar] = [
    Avatar(
        "anna",
        "Anna",
        _PEXELS_PHOTO.format(id=415829),
        "Female",
        AvatarStyle.REALISTIC,
        _COVERR_VIDEO.format(slug="coverr-woman-talking-to-camera-5496"),
    ),
    Avatar(
        "david",
        "David",
        _PEXELS_PHOTO.format(id=220453),
        "Male",
        AvatarStyle.REALISTIC,
        _COVERR_VIDEO.format(slug="coverr-man-talking-on-phone-5506"),
    ),
    Avatar(
        "sarah",
        "Sarah",
        _PEXELS_PHOTO.format(id=774909),
        "Female",
        AvatarStyle.REALISTIC,
        _COVERR_VIDEO.format(slug="coverr-woman-working-at-home-4752"),
    ),
    Avatar(
        "james",
        "James",
        _PEXELS_PHOTO.format(id=2379004),
        "Male",
        AvatarStyle.REALISTIC,
        _COVERR_VIDEO.format(slug="coverr-man-working-in-office-5234"),
    ),
    # No preview clip; generation falls back to DEFAULT_AVATAR_VIDEO
    Avatar("anime_girl", "Yuki", _PEXELS_PHOTO.format(id=1767434), "Female", AvatarStyle.ANIME),
]

DEFAULT_AVATAR_VIDEO = _COVERR_VIDEO.format(slug="coverr-woman-talking-to-camera-5496")
