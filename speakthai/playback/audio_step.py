"""
Audio Playback Step

Plays a single audio clip to completion through sounddevice. Slowed
playback is time-stretched first, so the device always runs at the
clip's own sample rate.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from speakthai.playback.errors import PlaybackRejected
from speakthai.playback.tempo import change_tempo
from speakthai.utils import logger


@dataclass
class AudioClip:
    """Playable audio held in memory."""

    samples: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))
    sample_rate: int = 16000

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return len(self.samples) / self.sample_rate

    @property
    def is_empty(self) -> bool:
        return len(self.samples) == 0


def _load_sounddevice():
    """Import sounddevice, which needs the PortAudio library at import time."""
    try:
        import sounddevice as sd
    except (ImportError, OSError) as e:
        raise PlaybackRejected(f"audio output unavailable: {e}") from e
    return sd


class AudioPlaybackStep:
    """
    Play audio clips one at a time.

    play() is best effort: a failed clip is logged and treated as
    finished so the lesson keeps moving. play_strict() reports the
    failure instead, for callers that have a fallback.
    """

    def __init__(self, device: Optional[int] = None):
        """
        Initialize the playback step.

        Args:
            device: sounddevice output device (None = system default)
        """
        self.device = device

    async def play(self, clip: AudioClip) -> None:
        """Play a clip, resolving on end of playback or on any error."""
        try:
            await self.play_strict(clip)
        except PlaybackRejected as e:
            logger.warning(f"Playback failed: {e}")

    async def play_strict(
        self,
        clip: AudioClip,
        rate: float = 1.0,
        on_start: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Play a clip at the given speed.

        Args:
            clip: Audio to play
            rate: Speed multiplier (0.5 = half speed)
            on_start: Called once playback has started

        Raises:
            PlaybackRejected: If the clip is empty or the device refuses it
        """
        if clip.is_empty:
            raise PlaybackRejected("clip contains no audio")

        if rate <= 0:
            raise PlaybackRejected(f"invalid playback rate {rate}")

        samples = clip.samples
        if rate != 1.0:
            samples = await asyncio.to_thread(change_tempo, samples, clip.sample_rate, rate)

        sd = _load_sounddevice()
        try:
            sd.play(samples, samplerate=clip.sample_rate, device=self.device)
        except (sd.PortAudioError, ValueError) as e:
            raise PlaybackRejected(str(e)) from e

        if on_start:
            on_start()

        try:
            await asyncio.to_thread(sd.wait)
        except sd.PortAudioError as e:
            raise PlaybackRejected(str(e)) from e
