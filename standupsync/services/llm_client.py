"""
Gemini model client and startup-time model resolution.

The gateway depends only on the `ModelClient` protocol, so tests (and any
other provider) can stand in for Gemini.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol, Sequence

import google.generativeai as genai

logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    model_name: str

    def generate(self, prompt: str, generation_config: dict[str, Any]) -> str:
        """Send a single user message and return the response text."""
        ...


class GeminiModelClient:
    """Thin wrapper around `google.generativeai.GenerativeModel`."""

    def __init__(self, model_name: str, api_key: str, timeout: float = 30.0) -> None:
        self.model_name = model_name
        self.timeout = timeout
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model_name=model_name)

    def generate(self, prompt: str, generation_config: dict[str, Any]) -> str:
        response = self._model.generate_content(
            [{"role": "user", "parts": [{"text": prompt}]}],
            generation_config=generation_config,
            request_options={"timeout": self.timeout},
        )
        return response.text


ModelFactory = Callable[[str, str, float], ModelClient]


def resolve_model(
    candidate_models: Sequence[str],
    api_key: Optional[str],
    timeout: float,
    factory: ModelFactory = GeminiModelClient,
) -> Optional[ModelClient]:
    """
    Try each candidate model name in order and keep the first that constructs.
    Returns None when no key is configured or every candidate fails.
    """
    if not api_key:
        logger.warning("GEMINI_API_KEY is not set, AI analysis will use fallbacks")
        return None

    for name in candidate_models:
        try:
            client = factory(name, api_key, timeout)
        except Exception as e:
            logger.warning("Error initializing model %s: %s", name, e)
            continue
        logger.info("Using Gemini model %s", name)
        return client

    logger.error("All models failed to initialize: %s", ", ".join(candidate_models))
    return None
