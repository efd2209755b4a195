"""
Configuration loader for the speakthai language trainer.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class Config:
    """Configuration manager for recording, translation and playback."""

    _instance: Optional["Config"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls) -> "Config":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not self._config:
            self._load_config()

    def _get_project_root(self) -> Path:
        """Get the project root directory."""
        # Navigate up from speakthai/utils to project root
        current = Path(__file__).resolve()
        return current.parent.parent.parent

    def _load_config(self) -> None:
        """Load configuration from YAML file."""
        config_path = self._get_project_root() / "config" / "settings.yaml"

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                self._config = yaml.safe_load(f) or {}
        else:
            # Use defaults if config doesn't exist
            self._config = self._get_defaults()

    def _get_defaults(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "recording": {
                "sample_rate": 16000,
                "channels": 1,
            },
            "transcription": {
                "model": "tiny",
                "language": "en",
                "device": "auto",
                "compute_type": "default",
            },
            "translation": {
                "url": "http://localhost:11434/api/generate",
                "model": "gemma3",
                "timeout": 60,
            },
            "synthesis": {
                "url": "https://translate.google.com/translate_tts",
                "language": "th",
                "client": "tw-ob",
                "max_chunk_length": 200,
                "timeout": 10,
            },
            "playback": {
                "rate": 0.5,
                "delay_ms": 500,
            },
            "fallback": {
                "language": "th",
                "rate": 0.5,
                "base_rate": 200,
            },
        }

    def get(self, *keys: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            config.get("synthesis", "language") -> "th"
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return default
            if value is None:
                return default
        return value

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return self._get_project_root()

    @property
    def sample_rate(self) -> int:
        """Get the recording sample rate."""
        return self.get("recording", "sample_rate", default=16000)

    @property
    def channels(self) -> int:
        """Get the recording channel count."""
        return self.get("recording", "channels", default=1)

    @property
    def whisper_model(self) -> str:
        """Get the faster-whisper model name."""
        return self.get("transcription", "model", default="tiny")

    @property
    def whisper_language(self) -> str:
        """Get the spoken language passed to Whisper."""
        return self.get("transcription", "language", default="en")

    @property
    def whisper_device(self) -> str:
        return self.get("transcription", "device", default="auto")

    @property
    def whisper_compute_type(self) -> str:
        return self.get("transcription", "compute_type", default="default")

    @property
    def ollama_url(self) -> str:
        """Get the Ollama generate endpoint."""
        return self.get("translation", "url", default="http://localhost:11434/api/generate")

    @property
    def ollama_model(self) -> str:
        """Get the Ollama model used for translation."""
        return self.get("translation", "model", default="gemma3")

    @property
    def translation_timeout(self) -> float:
        return self.get("translation", "timeout", default=60)

    @property
    def tts_url(self) -> str:
        """Get the remote speech synthesis endpoint."""
        return self.get("synthesis", "url", default="https://translate.google.com/translate_tts")

    @property
    def tts_language(self) -> str:
        """Get the target language for synthesized speech."""
        return self.get("synthesis", "language", default="th")

    @property
    def tts_client(self) -> str:
        return self.get("synthesis", "client", default="tw-ob")

    @property
    def tts_timeout(self) -> float:
        return self.get("synthesis", "timeout", default=10)

    @property
    def max_chunk_length(self) -> int:
        """Get the longest text chunk the synthesis endpoint accepts."""
        return self.get("synthesis", "max_chunk_length", default=200)

    @property
    def playback_rate(self) -> float:
        """Get the playback speed for synthesized chunks."""
        return self.get("playback", "rate", default=0.5)

    @property
    def playback_delay_ms(self) -> int:
        """Get the pause between the recording and the Thai speech."""
        return self.get("playback", "delay_ms", default=500)

    @property
    def fallback_language(self) -> str:
        return self.get("fallback", "language", default="th")

    @property
    def fallback_rate(self) -> float:
        """Get the on-device speech rate multiplier."""
        return self.get("fallback", "rate", default=0.5)

    @property
    def fallback_base_rate(self) -> int:
        """Get the on-device engine's normal words per minute."""
        return self.get("fallback", "base_rate", default=200)


# Singleton instance
config = Config()
