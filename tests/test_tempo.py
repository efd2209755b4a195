import subprocess
import unittest
from unittest.mock import patch
from pathlib import Path
import sys

import numpy as np

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from speakthai.playback import tempo


def completed(stdout: bytes = b"", returncode: int = 0, stderr: bytes = b"") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestAtempoFilter(unittest.TestCase):
    def test_half_speed_is_single_filter(self) -> None:
        self.assertEqual(tempo.atempo_filter(0.5), "atempo=0.5000")

    def test_rates_outside_filter_range_are_chained(self) -> None:
        self.assertEqual(tempo.atempo_filter(0.25), "atempo=0.5,atempo=0.5000")
        self.assertEqual(tempo.atempo_filter(3.0), "atempo=2.0,atempo=1.5000")


class TestChangeTempo(unittest.TestCase):
    def setUp(self) -> None:
        self.samples = np.linspace(-1, 1, 2400, dtype=np.float32)

    def test_ffmpeg_stretch_keeps_sample_rate(self) -> None:
        stretched = np.zeros(4800, dtype=np.float32)

        with patch("speakthai.playback.tempo.find_ffmpeg", return_value="ffmpeg"), \
                patch("speakthai.playback.tempo.subprocess.run", return_value=completed(stretched.tobytes())) as run:
            result = tempo.change_tempo(self.samples, 24000, 0.5)

        self.assertEqual(len(result), 4800)
        cmd = run.call_args.args[0]
        self.assertIn("atempo=0.5000", cmd)
        self.assertEqual(cmd.count("24000"), 2)
        self.assertEqual(run.call_args.kwargs["input"], self.samples.tobytes())

    def test_ffmpeg_failure_resamples_instead(self) -> None:
        with patch("speakthai.playback.tempo.find_ffmpeg", return_value="ffmpeg"), \
                patch("speakthai.playback.tempo.subprocess.run", return_value=completed(returncode=1, stderr=b"boom")):
            result = tempo.change_tempo(self.samples, 24000, 0.5)

        self.assertEqual(len(result), 4800)
        self.assertEqual(result.dtype, np.float32)

    def test_missing_ffmpeg_resamples(self) -> None:
        with patch("speakthai.playback.tempo.find_ffmpeg", return_value=None):
            result = tempo.change_tempo(self.samples, 24000, 0.5)

        self.assertEqual(len(result), 4800)
        self.assertAlmostEqual(float(result[0]), -1.0)
        self.assertAlmostEqual(float(result[-1]), 1.0)

    def test_normal_speed_is_untouched(self) -> None:
        with patch("speakthai.playback.tempo.find_ffmpeg") as find_ffmpeg:
            result = tempo.change_tempo(self.samples, 24000, 1.0)

        find_ffmpeg.assert_not_called()
        self.assertIs(result, self.samples)


if __name__ == "__main__":
    unittest.main()
