"""
English to Thai translation through a local Ollama server.
"""

from typing import Optional

import requests

from speakthai.utils.config import config

PROMPT_TEMPLATE = (
    "Translate this English text to Thai. "
    'Respond with ONLY the Thai translation, no explanation: "{text}"'
)


class TranslationError(Exception):
    """The translation service failed or returned an unusable answer."""


class Translator:
    """Translate text with an Ollama generate request."""

    def __init__(
        self,
        url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url or config.ollama_url
        self.model = model or config.ollama_model
        self.timeout = timeout or config.translation_timeout
        self.session = session or requests.Session()

    def build_payload(self, text: str) -> dict:
        return {
            "model": self.model,
            "prompt": PROMPT_TEMPLATE.format(text=text),
            "stream": False,
        }

    def translate(self, text: str) -> str:
        """
        Translate English text to Thai.

        Raises:
            TranslationError: On connection errors, bad status or a
                response without text
        """
        try:
            res = self.session.post(self.url, json=self.build_payload(text), timeout=self.timeout)
        except requests.RequestException as e:
            raise TranslationError(f"Ollama request failed: {e}") from e

        if not 200 <= res.status_code < 300:
            raise TranslationError(f"Ollama request failed: {res.status_code}")

        try:
            answer = res.json()["response"]
        except (ValueError, KeyError, TypeError) as e:
            raise TranslationError(f"Malformed Ollama response: {e}") from e

        if not isinstance(answer, str):
            raise TranslationError("Malformed Ollama response: response is not text")

        return answer.strip()
