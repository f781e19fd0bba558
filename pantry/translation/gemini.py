"""Gemini-backed translation provider.

Exposes a single free-text `generate(prompt)` call. The Gemini SDK client is
synchronous, so calls run in a worker thread.
"""

import asyncio
from typing import Optional

from google import genai
from google.genai import types

from pantry.utils.config import config
from pantry.utils.errors import TranslationProviderError
from pantry.utils.logger import logger


class GeminiTranslationProvider:
    """Instruction-following text generation used for translation."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Gemini API key.
            model: Model name. Defaults to GEMINI_MODEL.
            temperature: Sampling temperature. Defaults to TEMPERATURE.

        Raises:
            ValueError: If api_key is None or empty string.
        """
        if not api_key:
            raise ValueError("GEMINI_API_KEY is required")

        self.model = model or config.GEMINI_MODEL
        self.temperature = config.TEMPERATURE if temperature is None else temperature
        self.client = genai.Client(api_key=api_key)

    async def generate(self, prompt: str) -> str:
        """Send `prompt` to Gemini and return the generated text.

        Args:
            prompt: Instruction for the model.

        Returns:
            The model's text output.

        Raises:
            TranslationProviderError: If the response carries no text.
            Exception: Errors raised by the Gemini SDK (network, quota, auth).
        """
        logger.debug(f"Gemini request ({self.model}, {len(prompt)} chars)")
        response = await asyncio.to_thread(
            self.client.models.generate_content,
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=self.temperature),
        )

        text = response.text
        if not text or not text.strip():
            raise TranslationProviderError("Gemini returned an empty response")
        return text
