"""
Playback Module

Replays a recorded utterance and speaks its translation chunk by chunk
with word-level highlighting, falling back to on-device speech.
"""

from speakthai.playback.audio_step import AudioClip, AudioPlaybackStep
from speakthai.playback.cycle import PlaybackCycleOrchestrator, Utterance
from speakthai.playback.errors import NoFallbackVoice, PlaybackRejected, SynthesisUnavailable
from speakthai.playback.fallback_speaker import FallbackSpeaker
from speakthai.playback.highlight import HighlightSequencer
from speakthai.playback.synthesis import RemoteSynthesizer
from speakthai.playback.text_chunker import TextChunk, chunk, plan_chunks
from speakthai.playback.word_spans import WordSpan, build_word_spans, highlighted_indices

__all__ = [
    "AudioClip",
    "AudioPlaybackStep",
    "PlaybackCycleOrchestrator",
    "Utterance",
    "NoFallbackVoice",
    "PlaybackRejected",
    "SynthesisUnavailable",
    "FallbackSpeaker",
    "HighlightSequencer",
    "RemoteSynthesizer",
    "TextChunk",
    "chunk",
    "plan_chunks",
    "WordSpan",
    "build_word_spans",
    "highlighted_indices",
]
