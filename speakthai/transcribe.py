"""
Local English transcription with faster-whisper.
"""

from typing import Optional

import numpy as np

from speakthai.playback.audio_step import AudioClip
from speakthai.utils.config import config
from speakthai.utils import logger

# Whisper expects 16 kHz mono input
WHISPER_SAMPLE_RATE = 16000
MIN_DURATION = 0.3


class NoSpeechDetected(Exception):
    """The recording contained no recognizable speech."""


def resample(samples: np.ndarray, source_rate: int, target_rate: int) -> np.ndarray:
    """Linear resampling, good enough for speech recognition input."""
    if source_rate == target_rate or len(samples) == 0:
        return samples.astype(np.float32)
    target_len = int(round(len(samples) * target_rate / source_rate))
    positions = np.linspace(0, len(samples) - 1, num=target_len)
    return np.interp(positions, np.arange(len(samples)), samples).astype(np.float32)


class Transcriber:
    """Transcribe recorded clips to English text."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        language: Optional[str] = None,
        device: Optional[str] = None,
        compute_type: Optional[str] = None,
    ):
        self.model_name = model_name or config.whisper_model
        self.language = language or config.whisper_language
        self.device = device or config.whisper_device
        self.compute_type = compute_type or config.whisper_compute_type

        self._model = None

    def _get_model(self):
        """Lazy load the Whisper model."""
        if self._model is None:
            try:
                from faster_whisper import WhisperModel

                logger.info(f"Loading Whisper model '{self.model_name}'...")
                self._model = WhisperModel(
                    self.model_name,
                    device=self.device,
                    compute_type=self.compute_type,
                )
                logger.success("Whisper model loaded")
            except ImportError as e:
                logger.error("faster-whisper not installed")
                raise RuntimeError(
                    "faster-whisper not found. Install with: pip install faster-whisper"
                ) from e

        return self._model

    def load(self) -> None:
        """Load the model ahead of the first recording."""
        self._get_model()

    def transcribe(self, clip: AudioClip) -> str:
        """
        Transcribe a clip.

        Args:
            clip: Recorded audio

        Returns:
            Trimmed transcript ("" for clips too short to hold speech)
        """
        if clip.duration < MIN_DURATION:
            return ""

        audio = resample(clip.samples, clip.sample_rate, WHISPER_SAMPLE_RATE)
        model = self._get_model()
        segments, _info = model.transcribe(
            audio,
            language=self.language,
            task="transcribe",
        )
        return " ".join(seg.text.strip() for seg in segments).strip()
