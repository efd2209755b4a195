"""
Language Learner

Owns one lesson turn at a time: record English, transcribe, translate
to Thai, then replay the recording and speak the translation.
"""

import asyncio
from enum import Enum
from typing import List, Optional

from speakthai.display import TranscriptView
from speakthai.playback.audio_step import AudioClip, AudioPlaybackStep
from speakthai.playback.cycle import PlaybackCycleOrchestrator, Utterance
from speakthai.playback.fallback_speaker import FallbackSpeaker
from speakthai.playback.highlight import HighlightSequencer
from speakthai.playback.word_spans import WordSpan, build_word_spans
from speakthai.recorder import Recorder
from speakthai.transcribe import NoSpeechDetected, Transcriber
from speakthai.translate import TranslationError, Translator
from speakthai.utils import logger


class LearnerState(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    PROCESSING = "processing"


class LanguageLearner:
    """Controller tying recording, translation and playback together."""

    def __init__(
        self,
        recorder: Optional[Recorder] = None,
        transcriber: Optional[Transcriber] = None,
        translator: Optional[Translator] = None,
        orchestrator: Optional[PlaybackCycleOrchestrator] = None,
        speaker: Optional[FallbackSpeaker] = None,
        view: Optional[TranscriptView] = None,
    ):
        self.view = view or TranscriptView()
        self.recorder = recorder or Recorder()
        self.transcriber = transcriber or Transcriber()
        self.translator = translator or Translator()
        self.speaker = speaker or FallbackSpeaker()

        if orchestrator is None:
            player = AudioPlaybackStep()
            sequencer = HighlightSequencer(
                player=player,
                fallback=self.speaker,
                on_highlight=self.view.on_highlight,
            )
            orchestrator = PlaybackCycleOrchestrator(player=player, sequencer=sequencer)
        self.orchestrator = orchestrator

        self.state = LearnerState.IDLE
        self.utterance: Optional[Utterance] = None
        self.words: List[WordSpan] = []

    def start_recording(self) -> bool:
        """Begin a new turn. Ignored unless idle."""
        if self.state is not LearnerState.IDLE:
            return False

        self.reset()
        try:
            self.recorder.start()
        except Exception as e:
            self.view.status(f"Could not open microphone: {e}", "error")
            return False
        self.state = LearnerState.RECORDING
        self.view.status("Recording... (press SPACE to stop)", "recording")
        return True

    async def stop_recording(self) -> bool:
        """Finish recording and process the turn. Ignored unless recording."""
        if self.state is not LearnerState.RECORDING:
            return False

        clip = self.recorder.stop()
        self.state = LearnerState.PROCESSING
        self.view.status("Processing...", "processing")

        try:
            await self.process(clip)
        except Exception as e:
            logger.warning(f"Processing error: {e}")
            self.view.status("Failed to process audio. Please try again.", "error")
        finally:
            self.state = LearnerState.IDLE
            self.view.ready()
        return True

    async def process(self, clip: AudioClip) -> None:
        """Transcribe, translate, display and play back a recording."""
        english = await asyncio.to_thread(self.transcriber.transcribe, clip)
        if not english:
            raise NoSpeechDetected("No speech detected")
        self.view.show_english(english)

        thai = await asyncio.to_thread(self._translate, english)
        self.words = build_word_spans(thai)
        self.view.show_thai(self.words)

        self.utterance = Utterance(english_text=english, thai_text=thai, audio=clip)
        await self.orchestrator.run_cycle(self.utterance, self.words)

    def _translate(self, english: str) -> str:
        try:
            return self.translator.translate(english)
        except TranslationError as e:
            logger.warning(f"Translation error: {e}")
            return ""

    async def replay(self) -> bool:
        """Play the last turn again. Ignored while busy or before the first turn."""
        if self.state is not LearnerState.IDLE:
            return False
        if self.utterance is None or not self.utterance.is_replayable:
            return False

        self.state = LearnerState.PROCESSING
        try:
            await self.orchestrator.run_cycle(self.utterance, self.words)
        finally:
            self.state = LearnerState.IDLE
        return True

    def reset(self) -> None:
        """Forget the last turn and silence any on-device speech."""
        self.utterance = None
        self.words = []
        self.view.clear()
        self.speaker.cancel()
