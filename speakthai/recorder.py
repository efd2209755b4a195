"""
Microphone recording into an in-memory clip.
"""

import threading
from typing import List, Optional

import numpy as np

from speakthai.playback.audio_step import AudioClip
from speakthai.utils.config import config
from speakthai.utils import logger


class Recorder:
    """Capture mono float32 audio from the default input device."""

    def __init__(
        self,
        sample_rate: Optional[int] = None,
        channels: Optional[int] = None,
        device: Optional[int] = None,
    ):
        self.sample_rate = sample_rate or config.sample_rate
        self.channels = channels or config.channels
        self.device = device

        self._frames: List[np.ndarray] = []
        self._lock = threading.Lock()
        self._stream = None

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def _callback(self, indata, frames, time_info, status) -> None:
        if status:
            logger.warning(f"Audio input status: {status}")
        with self._lock:
            self._frames.append(indata.copy())

    def _open_stream(self):
        import sounddevice as sd

        return sd.InputStream(
            samplerate=self.sample_rate,
            channels=self.channels,
            dtype="float32",
            device=self.device,
            callback=self._callback,
        )

    def start(self) -> None:
        """Start capturing audio, discarding anything recorded before."""
        if self._stream is not None:
            return

        with self._lock:
            self._frames = []

        self._stream = self._open_stream()
        self._stream.start()

    def stop(self) -> AudioClip:
        """
        Stop capturing and return the recording.

        Returns:
            The recorded clip (empty if nothing was captured)
        """
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None

        with self._lock:
            if not self._frames:
                return AudioClip(sample_rate=self.sample_rate)
            audio = np.concatenate(self._frames, axis=0)
            self._frames = []

        if audio.ndim > 1:
            audio = audio.mean(axis=1)

        clip = AudioClip(samples=audio.astype(np.float32), sample_rate=self.sample_rate)
        logger.info(f"Recorded {clip.duration:.1f}s of audio")
        return clip
