from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

import google.generativeai as genai
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_MAX_TOKENS = 1000
API_KEY_ENV = "GOOGLE_API_KEY"


class ConfigurationError(RuntimeError):
    """The completion service credential is missing."""


@dataclass(frozen=True)
class ReviewerConfig:
    api_key: str = ""
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS

    @classmethod
    def from_env(cls) -> "ReviewerConfig":
        load_dotenv()
        return cls(
            api_key=os.getenv(API_KEY_ENV, ""),
            model=os.getenv("DOCREVIEW_MODEL") or DEFAULT_MODEL,
            max_tokens=int(os.getenv("DOCREVIEW_MAX_TOKENS") or DEFAULT_MAX_TOKENS),
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key)


class LLMReviewer:
    """Very small wrapper around Gemini that turns a prompt into reply text."""

    def __init__(self, config: ReviewerConfig):
        if not config.has_credentials:
            raise ConfigurationError(
                f"API key not configured. Please set the {API_KEY_ENV} environment variable."
            )
        genai.configure(api_key=config.api_key)
        self.config = config

    def review(self, prompt: str) -> str:
        """Send a single user message and return the first text part of the reply."""
        model = genai.GenerativeModel(self.config.model)
        response = model.generate_content(
            [{"role": "user", "parts": [{"text": prompt}]}],
            generation_config=genai.types.GenerationConfig(
                max_output_tokens=self.config.max_tokens,
            ),
        )
        return first_text(response)


def first_text(response) -> str:
    """Return the first text segment of a generate_content response, or ''."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            text: Optional[str] = getattr(part, "text", None)
            if text:
                return text
        break
    logger.debug("Completion response carried no text part")
    return ""
