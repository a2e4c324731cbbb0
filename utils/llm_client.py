"""
Gemini LLM client used to write news summaries, plus a scripted stand-in.
"""
from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import google.generativeai as genai

from config.settings import settings
from utils.errors import GenerationError
from utils.logger import get_logger

logger = get_logger(__name__)


class LLMClient:
    """Wrapper that handles Gemini text generation."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        generation_config: Dict[str, Any] | None = None,
    ):
        self.api_key = api_key or settings.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is not set; cannot initialize LLM client.")

        genai.configure(api_key=self.api_key)

        self.model_name = model or settings.GEMINI_MODEL
        self.generation_config = generation_config or {
            "temperature": 0.3,
            "top_p": 0.9,
            "top_k": 40,
        }
        self.model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config=genai.types.GenerationConfig(**self.generation_config),
        )
        logger.info(f"Gemini client initialized with model: {self.model_name}")

    def generate_content(self, prompt: str) -> str:
        """
        Send a prompt to Gemini and return the response text

        Raises:
            GenerationError: the API call failed or the response had no text
        """
        start = time.monotonic()
        logger.debug(f"Sending prompt to Gemini ({len(prompt)} characters)")
        try:
            response = self.model.generate_content(prompt)
            text = getattr(response, "text", "") or ""
        except Exception as exc:
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.error(f"Gemini request failed after {elapsed_ms:.0f}ms: {exc}")
            raise GenerationError(f"Gemini API error: {exc}") from exc

        if not text.strip():
            raise GenerationError("Gemini API error: empty response")

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.debug(f"Gemini answered in {elapsed_ms:.0f}ms ({len(text)} characters)")
        return text

    def test_connection(self) -> bool:
        """Check that Gemini answers a trivial prompt."""
        try:
            response = self.generate_content("Reply only with 'OK' if you can hear me.")
        except GenerationError as exc:
            logger.error(f"Gemini connection test failed: {exc}")
            return False

        if "ok" in response.lower():
            logger.info("Gemini connection is working")
            return True
        logger.warning(f"Gemini connection may have problems, unexpected answer: {response!r}")
        return False


Response = Union[str, Exception]


class StubLLMClient:
    """
    Deterministic stand-in for LLMClient

    Answers either from a fixed script (one entry per call, exceptions are
    raised instead of returned) or from a responder callable that receives
    the prompt. When the script runs out the last entry is repeated.
    Prompts are recorded so callers can assert on them.
    """

    def __init__(
        self,
        responses: Optional[Sequence[Response]] = None,
        responder: Optional[Callable[[str], Response]] = None,
    ):
        if not responses and responder is None:
            raise ValueError("StubLLMClient needs either responses or a responder")
        self.responses: List[Response] = list(responses or [])
        self.responder = responder
        self.prompts: List[str] = []
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        return len(self.prompts)

    def generate_content(self, prompt: str) -> str:
        with self._lock:
            index = len(self.prompts)
            self.prompts.append(prompt)

        if self.responder is not None:
            answer = self.responder(prompt)
        else:
            answer = self.responses[min(index, len(self.responses) - 1)]

        if isinstance(answer, Exception):
            raise answer
        return answer

    def test_connection(self) -> bool:
        return True
