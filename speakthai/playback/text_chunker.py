"""
Text Chunker Module

Splits translated text into chunks short enough for the remote
speech synthesis endpoint, without breaking words.
"""

from dataclasses import dataclass
from typing import List


@dataclass
class TextChunk:
    """A chunk of text and the word indices it covers."""

    text: str
    start: int  # First word index (inclusive)
    end: int  # Last word index (exclusive)

    @property
    def word_count(self) -> int:
        return self.end - self.start

    def covers(self, index: int) -> bool:
        """Check whether a word index belongs to this chunk."""
        return self.start <= index < self.end


def chunk(text: str, max_length: int) -> List[str]:
    """
    Split text into chunks of at most max_length characters.

    Words are accumulated greedily and never split, so a single word
    longer than max_length ends up alone in an oversized chunk.

    Args:
        text: Text to split
        max_length: Maximum chunk length in characters

    Returns:
        List of chunk strings (empty for empty input)
    """
    if not text:
        return []

    if len(text) <= max_length:
        return [text]

    chunks = []
    current_chunk = ""

    for word in text.split():
        if current_chunk and len(current_chunk + " " + word) > max_length:
            chunks.append(current_chunk.strip())
            current_chunk = word
        elif current_chunk:
            current_chunk = current_chunk + " " + word
        else:
            current_chunk = word

    if current_chunk:
        chunks.append(current_chunk.strip())

    return chunks


def count_words(text: str) -> int:
    """Count whitespace-delimited words."""
    return len(text.split())


def plan_chunks(text: str, max_length: int) -> List[TextChunk]:
    """
    Split text into chunks and attach each chunk's word range.

    A chunk's range starts where the previous one ended, so the ranges
    are contiguous and together cover every word of the text.

    Args:
        text: Text to split
        max_length: Maximum chunk length in characters

    Returns:
        List of TextChunk objects (empty for blank input)
    """
    if not text or not text.strip():
        return []

    planned = []
    start = 0
    for part in chunk(text, max_length):
        end = start + count_words(part)
        planned.append(TextChunk(text=part, start=start, end=end))
        start = end

    return planned
