#!/usr/bin/env python3
"""
speakthai - Main CLI

Speak English, hear it back in Thai.

Features:
- Local English transcription with Whisper
- Thai translation through a local Ollama model
- Replay of your own recording followed by slowed-down Thai speech
- Word-level highlighting of the Thai text while it is spoken
- On-device speech fallback when the online voice is unavailable
"""

import asyncio
import importlib.util
import sys
from typing import Optional

import click

from speakthai.display import TranscriptView
from speakthai.learner import LanguageLearner, LearnerState
from speakthai.playback.fallback_speaker import FallbackSpeaker
from speakthai.playback.highlight import HighlightSequencer
from speakthai.playback.text_chunker import plan_chunks
from speakthai.playback.word_spans import build_word_spans
from speakthai.utils import logger
from speakthai.utils.config import config

RECORD_KEYS = (" ",)
REPLAY_KEYS = ("\r", "\n", "r", "R")
QUIT_KEYS = ("q", "Q", "\x1b")


@click.group()
@click.version_option(version="1.0.0")
def cli():
    """
    speakthai

    Record spoken English, translate it to Thai and practise listening
    with highlighted, slowed-down Thai speech.
    """
    pass


async def _interactive(learner: LanguageLearner) -> None:
    learner.view.ready()
    logger.console.print("[dim]SPACE: start/stop recording   ENTER or r: replay   q: quit[/dim]")

    try:
        while True:
            # Ctrl-C and Ctrl-D arrive as KeyboardInterrupt / EOFError
            key = await asyncio.to_thread(click.getchar)

            if key in QUIT_KEYS:
                break

            if key in RECORD_KEYS:
                if learner.state is LearnerState.IDLE:
                    learner.start_recording()
                elif learner.state is LearnerState.RECORDING:
                    await learner.stop_recording()
            elif key in REPLAY_KEYS:
                await learner.replay()
    except (KeyboardInterrupt, EOFError):
        pass
    finally:
        if learner.state is LearnerState.RECORDING:
            learner.recorder.stop()
        learner.reset()


@cli.command()
@click.option(
    "-m", "--model",
    default=None,
    help=f"Whisper model (default: {config.whisper_model})",
)
@click.option(
    "--ollama-model",
    default=None,
    help=f"Ollama model used for translation (default: {config.ollama_model})",
)
def run(model: Optional[str], ollama_model: Optional[str]):
    """
    Start an interactive lesson.

    Press SPACE to start recording and SPACE again to stop. The
    recording is transcribed, translated to Thai, played back and
    followed by the Thai speech. Press ENTER to hear it again.
    """
    from speakthai.transcribe import Transcriber
    from speakthai.translate import Translator

    logger.header("speakthai")

    transcriber = Transcriber(model_name=model)
    try:
        transcriber.load()
    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        sys.exit(1)

    learner = LanguageLearner(
        transcriber=transcriber,
        translator=Translator(model=ollama_model),
    )

    try:
        asyncio.run(_interactive(learner))
    except KeyboardInterrupt:
        pass

    logger.success("Goodbye!")


@cli.command()
@click.argument("text")
@click.option(
    "-r", "--rate",
    type=float,
    default=None,
    help=f"Playback speed (default: {config.playback_rate})",
)
@click.option(
    "-n", "--max-length",
    type=int,
    default=None,
    help=f"Longest chunk sent to the voice service (default: {config.max_chunk_length})",
)
def say(text: str, rate: Optional[float], max_length: Optional[int]):
    """
    Speak Thai TEXT with word highlighting.
    """
    view = TranscriptView()
    words = build_word_spans(text)
    view.show_thai(words)

    sequencer = HighlightSequencer(rate=rate, on_highlight=view.on_highlight)
    chunks = plan_chunks(text, max_length or config.max_chunk_length)

    asyncio.run(sequencer.run(chunks, words, text))
    logger.success(f"Spoke {len(words)} words in {len(chunks)} chunk(s)")


@cli.command()
@click.argument("text")
@click.option(
    "-n", "--max-length",
    type=int,
    default=None,
    help=f"Longest chunk in characters (default: {config.max_chunk_length})",
)
def chunks(text: str, max_length: Optional[int]):
    """
    Show how TEXT is split for the voice service.
    """
    max_length = max_length or config.max_chunk_length
    planned = plan_chunks(text, max_length)

    logger.header(f"{len(planned)} chunk(s), max {max_length} characters")
    for i, c in enumerate(planned):
        marker = "!" if len(c.text) > max_length else " "
        logger.console.print(
            f" {marker} [{i + 1}] {c.word_count} word(s) from {c.start} ({len(c.text)} chars): {c.text}",
            markup=False,
            highlight=False,
        )

    if any(len(c.text) > max_length for c in planned):
        logger.console.print("\n! A single word is longer than the limit")


@cli.command()
@click.option(
    "-l", "--language",
    default=None,
    help=f"Language code to match (default: {config.fallback_language})",
)
def voices(language: Optional[str]):
    """
    List on-device voices used for the fallback speech.
    """
    speaker = FallbackSpeaker(language=language)
    logger.header("On-device Voices")

    try:
        available = speaker.list_voices()
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    for voice in available:
        marker = "*" if voice.matches else " "
        langs = ", ".join(voice.languages) or "-"
        logger.console.print(f"  {marker} {voice.name:<30} [{langs}]", markup=False)

    if not any(v.matches for v in available):
        logger.warning(f"No voice for '{speaker.language}', the default voice will be used")
    else:
        logger.console.print(f"\n* Matches '{speaker.language}'")


@cli.command()
def info():
    """
    Show configuration and dependency status.
    """
    logger.header("speakthai")

    logger.console.print("[bold]Recording:[/bold]")
    logger.console.print(f"  Sample rate:   {config.sample_rate} Hz")
    logger.console.print(f"  Whisper model: {config.whisper_model} ({config.whisper_device})")

    logger.console.print("\n[bold]Translation:[/bold]")
    logger.console.print(f"  Ollama URL:    {config.ollama_url}")
    logger.console.print(f"  Model:         {config.ollama_model}")

    logger.console.print("\n[bold]Speech:[/bold]")
    logger.console.print(f"  Voice service: {config.tts_url}")
    logger.console.print(f"  Language:      {config.tts_language}")
    logger.console.print(f"  Chunk length:  {config.max_chunk_length}")
    logger.console.print(f"  Rate:          {config.playback_rate}")
    logger.console.print(f"  Delay:         {config.playback_delay_ms} ms")

    logger.console.print("\n[bold]Dependencies:[/bold]")
    for module in ("faster_whisper", "sounddevice", "soundfile", "pyttsx3", "requests"):
        status = "[green]OK[/green]" if importlib.util.find_spec(module) else "[red]NOT FOUND[/red]"
        logger.console.print(f"  {module:<15} {status}")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
