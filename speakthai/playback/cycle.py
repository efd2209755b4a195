"""
Playback Cycle

Replays the learner's recording, pauses, then speaks the Thai
translation with highlighting.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Optional, Sequence

from speakthai.playback.audio_step import AudioClip, AudioPlaybackStep
from speakthai.playback.highlight import HighlightSequencer
from speakthai.playback.text_chunker import plan_chunks
from speakthai.playback.word_spans import WordSpan
from speakthai.utils.config import config
from speakthai.utils import logger


@dataclass(frozen=True)
class Utterance:
    """One recorded and translated learner turn."""

    english_text: str
    thai_text: str
    audio: AudioClip = field(default_factory=AudioClip)

    @property
    def is_replayable(self) -> bool:
        """A transcript and its recording; the Thai text may be empty."""
        return bool(self.english_text) and not self.audio.is_empty


class PlaybackCycleOrchestrator:
    """Run the recording, pause and translation steps in order."""

    def __init__(
        self,
        player: Optional[AudioPlaybackStep] = None,
        sequencer: Optional[HighlightSequencer] = None,
        delay_ms: Optional[int] = None,
        max_chunk_length: Optional[int] = None,
    ):
        self.player = player or AudioPlaybackStep()
        self.sequencer = sequencer or HighlightSequencer(player=self.player)
        self.delay_ms = config.playback_delay_ms if delay_ms is None else delay_ms
        self.max_chunk_length = max_chunk_length or config.max_chunk_length

    async def run_cycle(self, utterance: Utterance, words: Sequence[WordSpan]) -> None:
        """
        Play one full cycle for an utterance.

        Errors are logged and end the cycle; they never reach the caller.
        """
        try:
            await self.player.play(utterance.audio)
            await asyncio.sleep(self.delay_ms / 1000.0)

            chunks = plan_chunks(utterance.thai_text, self.max_chunk_length)
            await self.sequencer.run(chunks, words, utterance.thai_text)
        except Exception as e:
            logger.error(f"Playback error: {e}")
