import unittest
from unittest.mock import patch
from pathlib import Path
import sys

from click.testing import CliRunner

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from speakthai.learner import LearnerState
from speakthai.main import _interactive, cli
from speakthai.utils.config import config


class TestCli(unittest.TestCase):
    def test_chunks_command_prints_plan(self) -> None:
        result = CliRunner().invoke(cli, ["chunks", "aa bb cc dd e", "--max-length", "5"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("3 chunk(s)", result.output)
        self.assertIn("2 word(s) from 0 (5 chars): aa bb", result.output)
        self.assertIn("2 word(s) from 2 (5 chars): cc dd", result.output)
        self.assertIn("1 word(s) from 4 (1 chars): e", result.output)

    def test_chunks_command_flags_overlong_words(self) -> None:
        result = CliRunner().invoke(cli, ["chunks", "a verylongword b", "-n", "5"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("longer than the limit", result.output)


class FakeRecorder:
    def __init__(self):
        self.stopped = 0

    def stop(self) -> None:
        self.stopped += 1


class FakeView:
    def ready(self) -> None:
        pass


class FakeLearner:
    def __init__(self):
        self.state = LearnerState.IDLE
        self.recorder = FakeRecorder()
        self.view = FakeView()
        self.resets = 0

    def start_recording(self) -> bool:
        self.state = LearnerState.RECORDING
        return True

    async def stop_recording(self) -> bool:
        self.state = LearnerState.IDLE
        return True

    async def replay(self) -> bool:
        return False

    def reset(self) -> None:
        self.resets += 1


class TestInteractiveLoop(unittest.IsolatedAsyncioTestCase):
    async def test_end_of_input_while_recording_cleans_up(self) -> None:
        learner = FakeLearner()

        with patch("speakthai.main.click.getchar", side_effect=[" ", EOFError()]):
            await _interactive(learner)  # type: ignore[arg-type]

        self.assertEqual(learner.recorder.stopped, 1)
        self.assertEqual(learner.resets, 1)

    async def test_quit_key_resets_without_stopping_idle_recorder(self) -> None:
        learner = FakeLearner()

        with patch("speakthai.main.click.getchar", side_effect=["q"]):
            await _interactive(learner)  # type: ignore[arg-type]

        self.assertEqual(learner.recorder.stopped, 0)
        self.assertEqual(learner.resets, 1)


class TestConfig(unittest.TestCase):
    def test_defaults_for_playback(self) -> None:
        self.assertEqual(config.max_chunk_length, 200)
        self.assertEqual(config.playback_delay_ms, 500)
        self.assertEqual(config.playback_rate, 0.5)
        self.assertEqual(config.tts_language, "th")

    def test_missing_keys_use_default(self) -> None:
        self.assertEqual(config.get("nope", "missing", default=7), 7)
        self.assertEqual(config.get("playback", "rate", "deeper", default="x"), "x")


if __name__ == "__main__":
    unittest.main()
