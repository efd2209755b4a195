"""
Highlight Sequencer

Speaks the translation chunk by chunk and highlights the words of the
chunk currently playing.
"""

from typing import Callable, List, Optional, Sequence

from speakthai.playback.audio_step import AudioPlaybackStep
from speakthai.playback.errors import PlaybackRejected, SynthesisUnavailable
from speakthai.playback.fallback_speaker import FallbackSpeaker
from speakthai.playback.synthesis import RemoteSynthesizer
from speakthai.playback.text_chunker import TextChunk
from speakthai.playback.word_spans import (
    WordSpan,
    apply_highlight,
    clear_highlight,
    highlighted_indices,
    word_ranges,
)
from speakthai.utils.config import config
from speakthai.utils import logger

HighlightListener = Callable[[List[WordSpan]], None]


class HighlightSequencer:
    """
    Play synthesized chunks in order with word highlighting.

    Chunks never overlap: the next chunk is only requested after the
    previous one has finished playing. If any chunk fails, the whole
    text is handed to the fallback speaker instead.
    """

    def __init__(
        self,
        synthesizer: Optional[RemoteSynthesizer] = None,
        player: Optional[AudioPlaybackStep] = None,
        fallback: Optional[FallbackSpeaker] = None,
        rate: Optional[float] = None,
        on_highlight: Optional[HighlightListener] = None,
    ):
        """
        Initialize the sequencer.

        Args:
            synthesizer: Source of chunk audio
            player: Plays each chunk
            fallback: On-device speaker used when a chunk fails
            rate: Playback speed for chunks (0.5 = half speed)
            on_highlight: Called with the word list after every change
        """
        self.synthesizer = synthesizer or RemoteSynthesizer()
        self.player = player or AudioPlaybackStep()
        self.fallback = fallback or FallbackSpeaker()
        self.rate = rate or config.playback_rate
        self.on_highlight = on_highlight

    def _notify(self, words: Sequence[WordSpan]) -> None:
        if self.on_highlight:
            self.on_highlight(list(words))

    def _activate(self, chunk_index: int, ranges, words: Sequence[WordSpan]) -> None:
        apply_highlight(words, highlighted_indices(chunk_index, ranges))
        self._notify(words)

    async def run(
        self,
        chunks: Sequence[TextChunk],
        words: Sequence[WordSpan],
        text: Optional[str] = None,
    ) -> None:
        """
        Speak every chunk with highlighting.

        Args:
            chunks: Planned chunks of the translation
            words: Displayed words of the translation
            text: Complete translation, spoken by the fallback on failure
                (defaults to the chunks joined with spaces)
        """
        if not chunks or not any(c.text.strip() for c in chunks):
            return

        full_text = text if text is not None else " ".join(c.text for c in chunks)
        ranges = word_ranges(chunks)

        try:
            for i, chunk in enumerate(chunks):
                try:
                    clip = await self.synthesizer.synthesize(chunk.text)
                    await self.player.play_strict(
                        clip,
                        rate=self.rate,
                        on_start=lambda i=i: self._activate(i, ranges, words),
                    )
                except (SynthesisUnavailable, PlaybackRejected) as e:
                    logger.warning(f"Chunk {i + 1}/{len(chunks)} failed: {e}")
                except Exception as e:
                    logger.warning(f"Chunk {i + 1}/{len(chunks)} failed unexpectedly: {e!r}")
                else:
                    continue

                await self.fallback.speak(full_text)
                break
        finally:
            clear_highlight(words)
            self._notify(words)
