"""Translation orchestration with cache-or-compute and batch framing.

Single texts are translated through the provider and cached under a key made of
the language pair and the exact text. Batches are joined with a separator,
translated as one text (and therefore cached as one entry), then split back.

Batch guarantee: for any N items the result has exactly N strings, aligned by
position with the input. Items the provider did not return, returned empty, or
could not translate at all keep their original text.
"""

import asyncio
from typing import Optional, Protocol, Sequence

from pantry.cache.store import CacheStore, translation_cache_key
from pantry.models.models import TranslationRequest
from pantry.prompts.prompts import get_batch_translation_prompt, get_translation_prompt
from pantry.utils.config import config
from pantry.utils.errors import TranslationProviderError, safe_execute_async
from pantry.utils.logger import logger


class TranslationProvider(Protocol):
    """Free-text generation call used for translation."""

    async def generate(self, prompt: str) -> str:
        ...


def _clean_translation(translated: str, source: str) -> str:
    """Trim whitespace and the quotes the prompt wraps around the text."""
    cleaned = translated.strip()
    if (
        len(cleaned) >= 2
        and cleaned.startswith('"')
        and cleaned.endswith('"')
        and not (source.startswith('"') and source.endswith('"'))
    ):
        cleaned = cleaned[1:-1].strip()
    return cleaned


class Translator:
    """Translate texts and ordered batches between two languages."""

    def __init__(
        self,
        provider: TranslationProvider,
        cache: CacheStore,
        separator: Optional[str] = None,
    ) -> None:
        """Initialize the translator.

        Args:
            provider: Translation provider exposing `generate(prompt)`.
            cache: Cache store for translated texts.
            separator: Batch separator. Defaults to BATCH_SEPARATOR.

        Raises:
            ValueError: If the separator is empty.
        """
        self.provider = provider
        self.cache = cache
        self.separator = separator if separator is not None else config.BATCH_SEPARATOR
        if not self.separator:
            raise ValueError("Batch separator must not be empty")

    async def _cached_translation(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        prompt: str,
        batch: bool = False,
    ) -> Optional[str]:
        """Cache-or-compute core shared by single and batch translation.

        Joined batches are only whitespace-trimmed here; quotes are removed
        per piece after splitting.

        Returns:
            Translated text, or None when the translation is unavailable.
        """
        cache_key = translation_cache_key(source_lang, target_lang, text)

        cached = await safe_execute_async(self.cache.get(cache_key), "Translation cache read")
        if cached is not None:
            logger.info(f"[CACHE HIT] Translation {source_lang}->{target_lang}: {text[:60]!r}")
            return cached

        logger.info(f"[CACHE MISS] Translating {source_lang}->{target_lang}: {text[:60]!r}")

        async def _call_provider() -> str:
            raw = await self.provider.generate(prompt)
            translated = (raw or "").strip() if batch else _clean_translation(raw or "", text)
            if not translated:
                raise TranslationProviderError("empty translation")
            return translated

        translated = await safe_execute_async(
            _call_provider(),
            f"Translation {source_lang}->{target_lang} failed",
            log_level="error",
        )
        if translated is None:
            return None

        await safe_execute_async(self.cache.put(cache_key, translated), "Translation cache write")
        logger.debug(f"Translated ({source_lang}->{target_lang}): {text[:60]!r} -> {translated[:60]!r}")
        return translated

    async def translate(self, text: str, source_lang: str, target_lang: str) -> Optional[str]:
        """Translate one text.

        Args:
            text: Text to translate. Blank text is returned unchanged.
            source_lang: Language code of the text.
            target_lang: Language code to translate into.

        Returns:
            Translated text, or None when the translation is unavailable.
            Callers decide whether to fall back to the original.
        """
        if not text or not text.strip():
            return text
        prompt = get_translation_prompt(text, source_lang, target_lang)
        return await self._cached_translation(text, source_lang, target_lang, prompt)

    async def translate_batch(
        self,
        items: Sequence[str],
        source_lang: str,
        target_lang: str,
        context: str = "items",
    ) -> list[str]:
        """Translate an ordered list of texts with a single provider call.

        Args:
            items: Texts to translate, in order.
            source_lang: Language code of the items.
            target_lang: Language code to translate into.
            context: What the items are, used to word the prompt.

        Returns:
            Exactly len(items) strings, aligned with the input. Untranslated
            positions hold the original text.
        """
        request = TranslationRequest(source_lang=source_lang, target_lang=target_lang, items=list(items))
        originals = request.items
        if not originals:
            return []

        joined = self.separator.join(originals)
        # Items containing the separator, or ending/starting with part of it,
        # would not split back into the same items
        if joined.split(self.separator) != originals:
            logger.warning(
                f"Batch items collide with separator {self.separator!r}, translating {len(originals)} items one by one"
            )
            return await self._translate_each(request)

        prompt = get_batch_translation_prompt(joined, source_lang, target_lang, self.separator, context)
        translated_joined = await self._cached_translation(joined, source_lang, target_lang, prompt, batch=True)

        if translated_joined is None:
            logger.warning(
                f"Batch translation {source_lang}->{target_lang} unavailable, keeping {len(originals)} originals"
            )
            return list(originals)

        return self._split_aligned(translated_joined, originals)

    def _split_aligned(self, translated_joined: str, originals: list[str]) -> list[str]:
        """Split a translated batch and map pieces back by index."""
        pieces = translated_joined.split(self.separator)
        if len(pieces) != len(originals):
            logger.warning(
                f"Batch translation returned {len(pieces)} items for {len(originals)} inputs, "
                f"falling back to originals for unmatched positions"
            )
        aligned = []
        for index, original in enumerate(originals):
            piece = _clean_translation(pieces[index], original) if index < len(pieces) else ""
            aligned.append(piece or original)
        return aligned

    async def _translate_each(self, request: TranslationRequest) -> list[str]:
        """Translate items individually and concurrently, falling back per item."""
        results = await asyncio.gather(
            *(self.translate(item, request.source_lang, request.target_lang) for item in request.items)
        )
        return [
            translated if translated else original
            for translated, original in zip(results, request.items)
        ]
