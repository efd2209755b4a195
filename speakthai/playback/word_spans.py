"""
Word Spans Module

Displayed words of the translation and the highlight state derived
from which chunk is currently playing.
"""

from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple

from speakthai.playback.text_chunker import TextChunk


@dataclass
class WordSpan:
    """One displayed word of the translated text."""

    index: int  # Position in the tokenized text
    text: str
    highlighted: bool = False


def build_word_spans(text: str) -> List[WordSpan]:
    """Create one WordSpan per whitespace-delimited token."""
    return [WordSpan(index=i, text=word) for i, word in enumerate(text.split())]


def word_ranges(chunks: Sequence[TextChunk]) -> List[Tuple[int, int]]:
    """Return the (start, end) word range of every chunk."""
    return [(c.start, c.end) for c in chunks]


def highlighted_indices(chunk_index: int, ranges: Sequence[Tuple[int, int]]) -> Set[int]:
    """
    Word indices to highlight while a chunk is playing.

    Args:
        chunk_index: Index of the playing chunk
        ranges: Word range of every chunk

    Returns:
        Set of word indices belonging to that chunk
    """
    if chunk_index < 0 or chunk_index >= len(ranges):
        return set()
    start, end = ranges[chunk_index]
    return set(range(start, end))


def apply_highlight(words: Sequence[WordSpan], indices: Set[int]) -> None:
    """Highlight exactly the given indices, clearing every other word."""
    for word in words:
        word.highlighted = word.index in indices


def clear_highlight(words: Sequence[WordSpan]) -> None:
    apply_highlight(words, set())
