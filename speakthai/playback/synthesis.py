"""
Remote Speech Synthesis

Fetches spoken audio for short text chunks from the Google Translate
TTS endpoint. The endpoint only accepts about 200 characters per
request, so callers chunk the text first.
"""

import asyncio
import io
from typing import Optional

import numpy as np
import requests
import soundfile as sf

from speakthai.playback.audio_step import AudioClip
from speakthai.playback.errors import SynthesisUnavailable
from speakthai.utils.config import config


class RemoteSynthesizer:
    """Synthesize speech for a text chunk over HTTP."""

    def __init__(
        self,
        url: Optional[str] = None,
        language: Optional[str] = None,
        client: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the synthesizer.

        Args:
            url: Synthesis endpoint
            language: Target language code (e.g., "th")
            client: Client identifier the endpoint expects
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        self.url = url or config.tts_url
        self.language = language or config.tts_language
        self.client = client or config.tts_client
        self.timeout = timeout or config.tts_timeout
        self.session = session or requests.Session()

    def _params(self, text: str) -> dict:
        return {
            "ie": "UTF-8",
            "tl": self.language,
            "client": self.client,
            "q": text,
        }

    def fetch(self, text: str) -> bytes:
        """
        Download encoded audio for a chunk.

        Raises:
            SynthesisUnavailable: On connection errors, bad status or
                a response that is not audio
        """
        try:
            res = self.session.get(self.url, params=self._params(text), timeout=self.timeout)
        except requests.RequestException as e:
            raise SynthesisUnavailable(f"synthesis request failed: {e}") from e

        if not 200 <= res.status_code < 300:
            raise SynthesisUnavailable(f"synthesis endpoint returned {res.status_code}")

        content_type = res.headers.get("Content-Type", "")
        if not content_type.startswith("audio"):
            raise SynthesisUnavailable(f"unexpected content type {content_type!r}")

        if not res.content:
            raise SynthesisUnavailable("synthesis endpoint returned no audio")

        return res.content

    def decode(self, data: bytes) -> AudioClip:
        """Decode MP3/WAV bytes into a mono clip."""
        try:
            samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32")
        except (RuntimeError, TypeError) as e:
            raise SynthesisUnavailable(f"could not decode synthesized audio: {e}") from e

        if samples.ndim > 1:
            samples = samples.mean(axis=1).astype(np.float32)

        return AudioClip(samples=samples, sample_rate=sample_rate)

    def synthesize_sync(self, text: str) -> AudioClip:
        return self.decode(self.fetch(text))

    async def synthesize(self, text: str) -> AudioClip:
        """Fetch and decode speech for a chunk without blocking the event loop."""
        return await asyncio.to_thread(self.synthesize_sync, text)
