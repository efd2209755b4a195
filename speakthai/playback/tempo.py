"""
Tempo Change

Slows speech down without lowering its pitch by running it through
ffmpeg's atempo filter. The clip keeps its sample rate, so the output
device is always opened at the rate the audio was decoded at.

Requires: ffmpeg on PATH. Without it the clip is stretched by linear
resampling, which keeps the device rate but lowers the pitch.
"""

import shutil
import subprocess
from typing import Optional

import numpy as np

from speakthai.utils import logger

# atempo accepts 0.5 to 2.0 per filter instance
ATEMPO_MIN = 0.5
ATEMPO_MAX = 2.0

_warned_missing = False


def find_ffmpeg() -> Optional[str]:
    """Find the ffmpeg executable."""
    return shutil.which("ffmpeg")


def atempo_filter(rate: float) -> str:
    """Build an atempo filter chain for any positive rate."""
    parts = []
    remaining = float(rate)
    while remaining > ATEMPO_MAX:
        parts.append("atempo=2.0")
        remaining /= ATEMPO_MAX
    while remaining < ATEMPO_MIN:
        parts.append("atempo=0.5")
        remaining /= ATEMPO_MIN
    parts.append(f"atempo={remaining:.4f}")
    return ",".join(parts)


def stretch_with_ffmpeg(samples: np.ndarray, sample_rate: int, rate: float, ffmpeg: str) -> np.ndarray:
    """
    Change tempo with ffmpeg, piping raw float32 mono audio both ways.

    Raises:
        RuntimeError: If ffmpeg fails or returns no audio
    """
    raw = ["-f", "f32le", "-ar", str(sample_rate), "-ac", "1"]
    cmd = [
        ffmpeg, "-hide_banner", "-loglevel", "error",
        *raw, "-i", "pipe:0",
        "-filter:a", atempo_filter(rate),
        *raw, "pipe:1",
    ]
    data = np.ascontiguousarray(samples, dtype=np.float32).tobytes()
    proc = subprocess.run(cmd, input=data, capture_output=True, check=False)

    if proc.returncode != 0 or not proc.stdout:
        stderr = proc.stderr.decode("utf-8", errors="replace").strip()
        raise RuntimeError(f"ffmpeg atempo failed: {stderr[:240] or proc.returncode}")

    usable = len(proc.stdout) - len(proc.stdout) % 4
    return np.frombuffer(proc.stdout[:usable], dtype=np.float32).copy()


def stretch_by_resampling(samples: np.ndarray, rate: float) -> np.ndarray:
    """Stretch to len / rate samples by linear interpolation."""
    target_len = max(1, int(round(len(samples) / rate)))
    positions = np.linspace(0, len(samples) - 1, num=target_len)
    return np.interp(positions, np.arange(len(samples)), samples).astype(np.float32)


def change_tempo(samples: np.ndarray, sample_rate: int, rate: float) -> np.ndarray:
    """
    Play-speed change that leaves the sample rate alone.

    Args:
        samples: Mono float32 audio
        sample_rate: Sample rate of the audio
        rate: Speed multiplier (0.5 = half speed)

    Returns:
        Audio to be played at the original sample rate
    """
    global _warned_missing

    if abs(rate - 1.0) < 1e-6 or len(samples) == 0:
        return samples

    samples = np.asarray(samples, dtype=np.float32).reshape(-1)

    ffmpeg = find_ffmpeg()
    if ffmpeg:
        try:
            return stretch_with_ffmpeg(samples, sample_rate, rate, ffmpeg)
        except (OSError, RuntimeError) as e:
            logger.warning(f"{e}, slowing down by resampling")
    elif not _warned_missing:
        logger.warning("ffmpeg not found, slowed speech will sound lower")
        _warned_missing = True

    return stretch_by_resampling(samples, rate)
