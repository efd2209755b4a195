"""
Failure tiers of the playback path.

None of these escape the playback cycle: each is caught one level up and
degrades to the next fallback.
"""


class SynthesisUnavailable(Exception):
    """Remote synthesis endpoint unreachable or returned no usable audio."""


class PlaybackRejected(Exception):
    """The audio device refused to play a clip."""


class NoFallbackVoice(Exception):
    """No on-device voice matches the target language."""
