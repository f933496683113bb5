"""Subtitle service - SRT export/import and the mock transcription endpoint.

SRT text is produced and parsed with pysubs2, which keeps cue times in
integer milliseconds; seconds are rounded to the nearest millisecond.
"""

import asyncio
import base64
import logging
from typing import Awaitable, Callable, Optional

import pysubs2

from models.scene import Scene
from models.subtitle import Subtitle
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

# Fixed transcript returned by the simulated speech-to-text pass
MOCK_TRANSCRIPT = (
    (0.5, 3.0, "Welcome to this specialized video presentation."),
    (3.2, 5.5, "Today, we are exploring the power of AI automation."),
    (6.0, 8.5, "Subtitle generation is traditionally a slow process."),
    (9.0, 12.0, "But with tools like Vosk and DocuGen, it is instant."),
    (12.5, 15.0, "This technology ensures accessibility for everyone."),
    (15.5, 18.0, "You can download these captions as an SRT file."),
    (18.5, 21.0, "Or burn them directly into your final video render."),
)


def _to_ms(seconds: float) -> int:
    return int(round(seconds * 1000))


def generate_srt(subtitles: list[Subtitle]) -> str:
    """Render cues as SRT text, numbered in list order.

    Cue text is written verbatim: braces and HTML tags in narration are not
    treated as SubStation override blocks.
    """
    subs = pysubs2.SSAFile()
    for subtitle in subtitles:
        subs.append(
            pysubs2.SSAEvent(
                start=_to_ms(subtitle.start_time),
                end=_to_ms(subtitle.end_time),
                text=subtitle.text.replace("\n", r"\N"),
            )
        )
    return subs.to_string("srt", keep_ssa_tags=True)


def parse_srt(text: str) -> list[Subtitle]:
    """Parse SRT text into cues with ids "1", "2", ... in file order.

    Cue text comes back exactly as written, HTML tags included.

    Raises:
        ValidationError: If the text is not parseable as SRT
    """
    try:
        subs = pysubs2.SSAFile.from_string(text, format_="srt", keep_html_tags=True)
    except (pysubs2.exceptions.Pysubs2Error, ValueError) as e:
        raise ValidationError(f"Invalid SRT content: {e}") from e

    return [
        Subtitle(
            id=str(index),
            start_time=event.start / 1000,
            end_time=event.end / 1000,
            text=event.text.replace(r"\N", "\n"),
        )
        for index, event in enumerate(subs, start=1)
    ]


def scenes_to_subtitles(scenes: list[Scene]) -> list[Subtitle]:
    """Lay scenes back-to-back on one timeline, one cue per scene."""
    subtitles = []
    cursor = 0.0
    for index, scene in enumerate(scenes, start=1):
        end = cursor + scene.duration
        subtitles.append(
            Subtitle(id=str(index), start_time=cursor, end_time=end, text=scene.text)
        )
        cursor = end
    return subtitles


def srt_data_url(srt_text: str) -> str:
    """Encode SRT text as a downloadable data URL."""
    encoded = base64.b64encode(srt_text.encode("utf-8")).decode("ascii")
    return f"data:text/plain;base64,{encoded}"


class SubtitleService:
    """Simulated speech-to-text for uploaded videos."""

    def __init__(
        self,
        max_upload_mb: int = 100,
        delay: float = 2.5,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.max_upload_mb = max_upload_mb
        self.delay = delay
        self.sleep = sleep or asyncio.sleep

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    async def transcribe_video(self, filename: str, size_bytes: int) -> list[Subtitle]:
        """Return the transcript for an uploaded video.

        Raises:
            ValidationError: (413) if the upload is larger than the limit
        """
        if size_bytes > self.max_upload_bytes:
            raise ValidationError(
                f"File too large: {filename} exceeds {self.max_upload_mb}MB",
                status_code=413,
            )

        logger.info(f"Transcribing {filename} ({size_bytes} bytes)")
        if self.delay > 0:
            await self.sleep(self.delay)

        return [
            Subtitle(id=str(index), start_time=start, end_time=end, text=text)
            for index, (start, end, text) in enumerate(MOCK_TRANSCRIPT, start=1)
        ]
