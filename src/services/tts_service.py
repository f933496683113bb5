"""TTS Service - Gemini speech generation with prebuilt voices."""

import asyncio
import base64
import io
import logging
import wave
from typing import Optional

from google.genai import Client
from google.genai import types

from models.catalog import VOICE_IDS
from utils.errors import ConfigurationError, UpstreamServiceError, ValidationError

logger = logging.getLogger(__name__)

# Gemini TTS returns raw PCM: 24 kHz, mono, 16-bit little endian
PCM_SAMPLE_RATE = 24000
PCM_CHANNELS = 1
PCM_SAMPLE_WIDTH = 2


class TTSServiceError(UpstreamServiceError):
    """Error from TTS service."""

    pass


class TTSService:
    """Client for Gemini text-to-speech.

    No retries: a failed call surfaces to the caller, which is expected to
    cache the returned URL on the scene instead of regenerating it.
    """

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash-preview-tts"):
        """Initialize TTS service.

        Args:
            api_key: Google GenAI API key
            model_name: Gemini TTS model
        """
        self.api_key = api_key
        self.model_name = model_name
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("GEMINI_API_KEY missing")
            self._client = Client(api_key=self.api_key)
        return self._client

    @staticmethod
    def detect_audio_format(audio_bytes: bytes) -> str:
        """Detect audio format from magic bytes."""
        if len(audio_bytes) >= 12 and audio_bytes[:4] == b"RIFF" and audio_bytes[8:12] == b"WAVE":
            return "wav"
        if audio_bytes[:3] == b"ID3" or (
            len(audio_bytes) >= 2
            and audio_bytes[0] == 0xFF
            and (audio_bytes[1] & 0xE0) == 0xE0
        ):
            return "mp3"
        if audio_bytes[:4] == b"OggS":
            return "ogg"
        return "pcm"

    @staticmethod
    def media_type_for_audio_format(audio_format: str) -> str:
        """Map internal audio format to HTTP content-type."""
        return {
            "wav": "audio/wav",
            "mp3": "audio/mpeg",
            "ogg": "audio/ogg",
        }.get(audio_format, "application/octet-stream")

    @staticmethod
    def pcm_to_wav(
        pcm: bytes,
        sample_rate: int = PCM_SAMPLE_RATE,
        channels: int = PCM_CHANNELS,
        sample_width: int = PCM_SAMPLE_WIDTH,
    ) -> bytes:
        """Wrap raw PCM frames in a WAV container."""
        output = io.BytesIO()
        with wave.open(output, "wb") as wav_file:
            wav_file.setnchannels(channels)
            wav_file.setsampwidth(sample_width)
            wav_file.setframerate(sample_rate)
            wav_file.writeframes(pcm)
        return output.getvalue()

    @classmethod
    def to_data_url(cls, audio_bytes: bytes) -> str:
        """Encode audio as a data URL, wrapping raw PCM into WAV first."""
        audio_format = cls.detect_audio_format(audio_bytes)
        if audio_format == "pcm":
            audio_bytes = cls.pcm_to_wav(audio_bytes)
            audio_format = "wav"
        media_type = cls.media_type_for_audio_format(audio_format)
        encoded = base64.b64encode(audio_bytes).decode("ascii")
        return f"data:{media_type};base64,{encoded}"

    def _extract_audio(self, response) -> bytes:
        """Pull the inline audio payload out of a generate_content response."""
        for candidate in response.candidates or []:
            content = candidate.content
            if content is None:
                continue
            for part in content.parts or []:
                inline = part.inline_data
                if inline is not None and inline.data:
                    data = inline.data
                    if isinstance(data, str):
                        data = base64.b64decode(data)
                    return data
        raise TTSServiceError("Gemini returned no audio data")

    async def generate_speech(self, text: str, voice_id: str) -> str:
        """Synthesize narration.

        Args:
            text: Text to speak
            voice_id: Prebuilt voice name (see VOICE_OPTIONS)

        Returns:
            ``data:audio/...;base64,...`` URL

        Raises:
            ValidationError: Empty text or unknown voice
            ConfigurationError: No API key configured
            TTSServiceError: The upstream call failed
        """
        if not text or not text.strip():
            raise ValidationError("Cannot synthesize empty text")
        if voice_id not in VOICE_IDS:
            raise ValidationError(f"Unknown voice: {voice_id}")

        client = self.client
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice_id),
                ),
            ),
        )

        logger.info(f"Generating speech ({len(text)} chars, voice={voice_id})")
        try:
            response = await asyncio.to_thread(
                client.models.generate_content,
                model=self.model_name,
                contents=text,
                config=config,
            )
        except Exception as e:
            logger.error(f"Speech generation failed: {e}")
            raise TTSServiceError(str(e)) from e

        return self.to_data_url(self._extract_audio(response))
