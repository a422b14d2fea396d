from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List

from google import genai
from google.genai import types
from openai import OpenAI

from review_cards.config import Settings
from review_cards.core.models import ApiConfiguration
from .exceptions import LLMError

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """One provider/model pair that turns a prompt into plain text."""
    provider: str
    model: str

    @abstractmethod
    def generate(self, prompt: str) -> str: ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.provider}:{self.model}>"


class GeminiTextGenerator(TextGenerator):
    provider = "gemini"

    def __init__(self, api_key: str, model: str, temperature: float = 0.9):
        try:
            self._client = genai.Client(api_key=api_key)
        except Exception as e:
            raise LLMError("Could not initialize Gemini client") from e
        self.model = model
        self._temperature = temperature

    def generate(self, prompt: str) -> str:
        try:
            resp = self._client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(temperature=self._temperature),
            )
            text = (resp.text or "").strip()
        except Exception as e:
            raise LLMError(f"Gemini generate failed: {e}") from e
        if not text:
            raise LLMError(f"Gemini {self.model} returned an empty response")
        return text


class OpenAITextGenerator(TextGenerator):
    provider = "openai"

    def __init__(self, api_key: str, model: str, temperature: float = 0.9):
        try:
            self._client = OpenAI(api_key=api_key)
        except Exception as e:
            raise LLMError("Could not initialize OpenAI client") from e
        self.model = model
        self._temperature = temperature

    def generate(self, prompt: str) -> str:
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": "You write short, human-sounding Google Maps reviews and taglines."},
                          {"role": "user", "content": prompt}],
                temperature=self._temperature,
            )
            text = (resp.choices[0].message.content or "").strip()
        except Exception as e:
            raise LLMError(f"OpenAI generate failed: {e}") from e
        if not text:
            raise LLMError(f"OpenAI {self.model} returned an empty response")
        return text


_GENERATORS = {
    "gemini": GeminiTextGenerator,
    "openai": OpenAITextGenerator,
}


def build_generator(provider: str, api_key: str, model: str, temperature: float) -> TextGenerator:
    try:
        cls = _GENERATORS[provider]
    except KeyError:
        raise LLMError(f"Unknown provider: {provider}")
    return cls(api_key, model, temperature)


def build_generators(configs: Iterable[ApiConfiguration], settings: Settings) -> List[TextGenerator]:
    """
    Generators in the order they should be tried.

    Active stored configurations win, lowest priority number first. Without any,
    the env keys are used: Gemini first, then OpenAI.
    """
    active = sorted((c for c in configs if c.is_active), key=lambda c: (c.priority, c.created_at))
    out: List[TextGenerator] = []
    for c in active:
        try:
            out.append(build_generator(c.provider, c.api_key, c.model, settings.review_temperature))
        except LLMError as e:
            logger.warning("Skipping API configuration %r (%s): %s", c.name, c.provider, e)
    if out:
        return out

    if settings.gemini_api_key:
        try:
            out.append(GeminiTextGenerator(settings.gemini_api_key, settings.gemini_model, settings.review_temperature))
        except LLMError as e:
            logger.warning("Gemini disabled: %s", e)
    if settings.openai_api_key:
        try:
            out.append(OpenAITextGenerator(settings.openai_api_key, settings.openai_model, settings.review_temperature))
        except LLMError as e:
            logger.warning("OpenAI disabled: %s", e)
    return out
