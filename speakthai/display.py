"""
Terminal rendering of the lesson: status line, English transcript and
the Thai translation with the currently spoken words highlighted.
"""

from typing import Sequence

from rich.text import Text

from speakthai.playback.word_spans import WordSpan
from speakthai.utils import logger

READY_MESSAGE = "Press SPACE to start recording"
TRANSLATION_FAILED = "Translation failed"


def render_words(words: Sequence[WordSpan]) -> Text:
    """Build the Thai line, styling highlighted words."""
    line = Text()
    for i, word in enumerate(words):
        if i:
            line.append(" ")
        line.append(word.text, style="highlight" if word.highlighted else "thai")
    return line


class TranscriptView:
    """Print lesson state to the shared rich console."""

    def __init__(self, console=None):
        self.console = console or logger.console
        self._last_line = None

    def status(self, message: str, kind: str = "ready") -> None:
        """Show a status message; kind is ready, recording, processing or error."""
        if kind == "error":
            logger.error(message)
        elif kind in ("recording", "processing"):
            logger.step(message)
        else:
            logger.info(message)

    def ready(self) -> None:
        self.status(READY_MESSAGE, "ready")

    def show_english(self, text: str) -> None:
        self.console.print(Text.assemble(("EN  ", "bold"), (text, "english")))

    def show_thai(self, words: Sequence[WordSpan]) -> None:
        if not words:
            self.console.print(Text.assemble(("TH  ", "bold"), (TRANSLATION_FAILED, "warning")))
            return
        self.console.print(Text.assemble(("TH  ", "bold"), render_words(words)))

    def on_highlight(self, words: Sequence[WordSpan]) -> None:
        """Redraw the Thai line whenever the highlighted words change."""
        line = render_words(words)
        if line.plain == "" or self._same_as_last(words):
            return
        self._last_line = [w.highlighted for w in words]
        self.console.print(Text.assemble(("    ", ""), line))

    def _same_as_last(self, words: Sequence[WordSpan]) -> bool:
        return self._last_line == [w.highlighted for w in words]

    def clear(self) -> None:
        self._last_line = None
        self.console.rule(style="dim")
