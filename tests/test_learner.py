import unittest
from pathlib import Path
import sys

import numpy as np

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from speakthai.learner import LanguageLearner, LearnerState
from speakthai.playback.audio_step import AudioClip
from speakthai.translate import TranslationError


class FakeRecorder:
    def __init__(self):
        self.started = 0

    def start(self) -> None:
        self.started += 1

    def stop(self) -> AudioClip:
        return AudioClip(samples=np.zeros(16000, dtype=np.float32), sample_rate=16000)


class FakeTranscriber:
    def __init__(self, text: str = "Hello there"):
        self.text = text

    def transcribe(self, clip) -> str:
        return self.text


class FakeTranslator:
    def __init__(self, thai: str = "สวัสดี ครับ", fail: bool = False):
        self.thai = thai
        self.fail = fail

    def translate(self, text: str) -> str:
        if self.fail:
            raise TranslationError("Ollama request failed: 500")
        return self.thai


class FakeOrchestrator:
    def __init__(self, learner_ref: list):
        self.cycles: list[tuple] = []
        self.states: list = []
        self.learner_ref = learner_ref

    async def run_cycle(self, utterance, words) -> None:
        self.cycles.append((utterance, list(words)))
        if self.learner_ref:
            self.states.append(self.learner_ref[0].state)


class FakeSpeaker:
    def __init__(self):
        self.cancelled = 0

    def cancel(self) -> None:
        self.cancelled += 1


class FakeView:
    def __init__(self):
        self.statuses: list[tuple] = []
        self.english: list[str] = []
        self.thai: list[list] = []
        self.cleared = 0

    def status(self, message: str, kind: str = "ready") -> None:
        self.statuses.append((kind, message))

    def ready(self) -> None:
        self.status("ready", "ready")

    def show_english(self, text: str) -> None:
        self.english.append(text)

    def show_thai(self, words) -> None:
        self.thai.append([w.text for w in words])

    def on_highlight(self, words) -> None:
        pass

    def clear(self) -> None:
        self.cleared += 1


class TestLanguageLearner(unittest.IsolatedAsyncioTestCase):
    def _make(self, transcriber=None, translator=None) -> LanguageLearner:
        ref: list = []
        self.orchestrator = FakeOrchestrator(ref)
        self.speaker = FakeSpeaker()
        self.view = FakeView()
        learner = LanguageLearner(
            recorder=FakeRecorder(),  # type: ignore[arg-type]
            transcriber=transcriber or FakeTranscriber(),  # type: ignore[arg-type]
            translator=translator or FakeTranslator(),  # type: ignore[arg-type]
            orchestrator=self.orchestrator,  # type: ignore[arg-type]
            speaker=self.speaker,  # type: ignore[arg-type]
            view=self.view,  # type: ignore[arg-type]
        )
        ref.append(learner)
        return learner

    async def test_full_turn(self) -> None:
        learner = self._make()

        self.assertTrue(learner.start_recording())
        self.assertIs(learner.state, LearnerState.RECORDING)
        self.assertFalse(learner.start_recording())

        self.assertTrue(await learner.stop_recording())

        self.assertIs(learner.state, LearnerState.IDLE)
        self.assertEqual(self.view.english, ["Hello there"])
        self.assertEqual(self.view.thai, [["สวัสดี", "ครับ"]])
        utterance, words = self.orchestrator.cycles[0]
        self.assertEqual(utterance.thai_text, "สวัสดี ครับ")
        self.assertEqual([w.index for w in words], [0, 1])
        self.assertEqual(self.orchestrator.states, [LearnerState.PROCESSING])

    async def test_stop_without_recording_is_ignored(self) -> None:
        learner = self._make()
        self.assertFalse(await learner.stop_recording())
        self.assertEqual(self.orchestrator.cycles, [])

    async def test_no_speech_reports_error(self) -> None:
        learner = self._make(transcriber=FakeTranscriber(""))

        learner.start_recording()
        await learner.stop_recording()

        self.assertIs(learner.state, LearnerState.IDLE)
        self.assertIn("error", [kind for kind, _ in self.view.statuses])
        self.assertEqual(self.orchestrator.cycles, [])
        self.assertIsNone(learner.utterance)

    async def test_failed_translation_plays_recording_and_can_replay(self) -> None:
        learner = self._make(translator=FakeTranslator(fail=True))

        learner.start_recording()
        await learner.stop_recording()

        utterance, words = self.orchestrator.cycles[0]
        self.assertEqual(utterance.thai_text, "")
        self.assertEqual(words, [])
        self.assertEqual(self.view.thai, [[]])

        self.assertTrue(await learner.replay())
        self.assertEqual(len(self.orchestrator.cycles), 2)
        replayed, _ = self.orchestrator.cycles[1]
        self.assertEqual(replayed.english_text, "Hello there")
        self.assertEqual(replayed.thai_text, "")

    async def test_replay_runs_cycle_again(self) -> None:
        learner = self._make()
        self.assertFalse(await learner.replay())

        learner.start_recording()
        await learner.stop_recording()
        self.assertTrue(await learner.replay())

        self.assertEqual(len(self.orchestrator.cycles), 2)
        self.assertIs(learner.state, LearnerState.IDLE)

    async def test_new_recording_resets_previous_turn(self) -> None:
        learner = self._make()
        learner.start_recording()
        await learner.stop_recording()
        cancelled = self.speaker.cancelled

        learner.start_recording()

        self.assertIsNone(learner.utterance)
        self.assertEqual(learner.words, [])
        self.assertEqual(self.speaker.cancelled, cancelled + 1)


if __name__ == "__main__":
    unittest.main()
