"""
Fallback Speaker

On-device speech synthesis through pyttsx3, used when the remote
synthesis endpoint cannot be reached or its audio cannot be played.
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional

from speakthai.playback.errors import NoFallbackVoice
from speakthai.utils.config import config
from speakthai.utils import logger

# Voice names some engines use instead of language tags
LANGUAGE_NAMES = {
    "th": "thai",
    "en": "english",
}


@dataclass
class VoiceInfo:
    """An on-device voice and whether it speaks the target language."""

    id: str
    name: str
    languages: List[str] = field(default_factory=list)
    matches: bool = False


def _language_tags(voice) -> List[str]:
    """Normalize a pyttsx3 voice's languages to lowercase strings."""
    tags = []
    for lang in getattr(voice, "languages", None) or []:
        if isinstance(lang, bytes):
            # espeak prefixes the tag with a priority byte
            lang = lang.decode("utf-8", errors="ignore")
        tag = "".join(ch for ch in str(lang) if ch.isprintable())
        tags.append(tag.strip().lower())
    return tags


def voice_matches(voice, language: str) -> bool:
    """Check whether a pyttsx3 voice speaks the given language."""
    language = language.lower()
    for tag in _language_tags(voice):
        if tag == language or tag.startswith(language + "_") or tag.startswith(language + "-"):
            return True

    name = LANGUAGE_NAMES.get(language)
    if name:
        voice_id = str(getattr(voice, "id", "") or "").lower()
        voice_name = str(getattr(voice, "name", "") or "").lower()
        return name in voice_id or name in voice_name
    return False


class FallbackSpeaker:
    """
    Speak text with the host's speech synthesizer.

    Only one utterance is active at a time: every speak() cancels
    whatever the engine was still saying.
    """

    def __init__(
        self,
        language: Optional[str] = None,
        rate: Optional[float] = None,
        base_rate: Optional[int] = None,
    ):
        """
        Initialize the fallback speaker.

        Args:
            language: Language code the voice should match (e.g., "th")
            rate: Speed multiplier relative to the engine's normal rate
            base_rate: Engine's normal rate in words per minute
        """
        self.language = language or config.fallback_language
        self.rate = rate or config.fallback_rate
        self.base_rate = base_rate or config.fallback_base_rate

        self._engine = None

    def _get_engine(self):
        """Lazy load pyttsx3 engine."""
        if self._engine is None:
            try:
                import pyttsx3

                self._engine = pyttsx3.init()
            except ImportError as e:
                logger.error("pyttsx3 not installed")
                raise RuntimeError(
                    "pyttsx3 not found. Install with: pip install pyttsx3"
                ) from e

        return self._engine

    def select_voice(self, engine) -> str:
        """
        Find a voice for the target language.

        Raises:
            NoFallbackVoice: If the host has no matching voice
        """
        for voice in engine.getProperty("voices") or []:
            if voice_matches(voice, self.language):
                return voice.id
        raise NoFallbackVoice(f"No on-device voice for language '{self.language}'")

    def list_voices(self) -> List[VoiceInfo]:
        """List the host's voices, marking the ones for the target language."""
        engine = self._get_engine()
        return [
            VoiceInfo(
                id=str(v.id),
                name=str(v.name),
                languages=_language_tags(v),
                matches=voice_matches(v, self.language),
            )
            for v in engine.getProperty("voices") or []
        ]

    def cancel(self) -> None:
        """Stop any in-flight speech."""
        if self._engine is not None:
            self._engine.stop()

    def _speak_blocking(self, text: str) -> None:
        engine = self._get_engine()

        try:
            engine.setProperty("voice", self.select_voice(engine))
        except NoFallbackVoice as e:
            logger.warning(f"{e}, using default voice")

        engine.setProperty("rate", int(self.base_rate * self.rate))
        engine.say(text)
        engine.runAndWait()

    async def speak(self, text: str) -> None:
        """Speak text, resolving on completion or on any engine error."""
        self.cancel()

        if not text or not text.strip():
            return

        logger.info("Falling back to on-device speech")
        try:
            await asyncio.to_thread(self._speak_blocking, text)
        except Exception as e:
            logger.warning(f"On-device speech failed: {e}")
