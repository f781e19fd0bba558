"""Unit tests for the translation orchestrator.

Tests cover:
- Single-text cache-or-compute semantics
- Batch join/split alignment, including malformed provider responses
- Degraded fallback on provider and cache failures
- Separator collisions
"""

from unittest.mock import AsyncMock

import pytest

from pantry.cache.store import translation_cache_key
from pantry.translation.translator import Translator
from pantry.utils.errors import TranslationProviderError


def make_provider(response=None, side_effect=None) -> AsyncMock:
    provider = AsyncMock()
    provider.generate.return_value = response
    if side_effect is not None:
        provider.generate.side_effect = side_effect
    return provider


class TestTranslate:
    """Tests for single-text translation."""

    @pytest.mark.asyncio
    async def test_cache_miss_calls_provider_and_stores(self, cache) -> None:
        """A miss calls the provider and stores the trimmed result."""
        provider = make_provider("  bread \n")
        translator = Translator(provider, cache)

        result = await translator.translate("pan", "es", "en")

        assert result == "bread"
        assert cache.data[translation_cache_key("es", "en", "pan")] == "bread"
        provider.generate.assert_awaited_once()
        assert '"pan"' in provider.generate.await_args.args[0]

    @pytest.mark.asyncio
    async def test_second_call_is_cache_hit(self, cache) -> None:
        """Identical requests issue at most one provider call."""
        provider = make_provider("bread")
        translator = Translator(provider, cache)

        first = await translator.translate("pan", "es", "en")
        second = await translator.translate("pan", "es", "en")

        assert first == second == "bread"
        assert provider.generate.await_count == 1

    @pytest.mark.asyncio
    async def test_cache_key_uses_exact_text(self, cache) -> None:
        """Case and whitespace variants are cached separately."""
        provider = make_provider("bread")
        translator = Translator(provider, cache)

        await translator.translate("pan", "es", "en")
        await translator.translate("Pan", "es", "en")
        await translator.translate("pan", "es", "fr")

        assert provider.generate.await_count == 3

    @pytest.mark.asyncio
    async def test_provider_error_returns_none(self, cache) -> None:
        """Provider failures yield None instead of raising."""
        provider = make_provider(side_effect=ConnectionError("network down"))
        translator = Translator(provider, cache)

        assert await translator.translate("pan", "es", "en") is None
        assert cache.data == {}

    @pytest.mark.asyncio
    async def test_empty_response_returns_none(self, cache) -> None:
        """Whitespace-only responses count as failures and are not cached."""
        translator = Translator(make_provider("   "), cache)

        assert await translator.translate("pan", "es", "en") is None
        assert cache.data == {}

    @pytest.mark.asyncio
    async def test_provider_error_type_is_absorbed(self, cache) -> None:
        translator = Translator(make_provider(side_effect=TranslationProviderError("empty")), cache)
        assert await translator.translate("leche", "es", "en") is None

    @pytest.mark.asyncio
    async def test_blank_text_skips_provider(self, cache) -> None:
        provider = make_provider("x")
        translator = Translator(provider, cache)

        assert await translator.translate("", "es", "en") == ""
        assert await translator.translate("   ", "es", "en") == "   "
        provider.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrapping_quotes_are_removed(self, cache) -> None:
        translator = Translator(make_provider('"bread"'), cache)
        assert await translator.translate("pan", "es", "en") == "bread"

    @pytest.mark.asyncio
    async def test_cache_read_failure_is_a_miss(self) -> None:
        """An unavailable cache does not stop translation."""
        broken_cache = AsyncMock()
        broken_cache.get.side_effect = OSError("disk I/O error")
        broken_cache.put.side_effect = OSError("disk I/O error")
        translator = Translator(make_provider("milk"), broken_cache)

        assert await translator.translate("leche", "es", "en") == "milk"
        broken_cache.put.assert_awaited_once()

    def test_empty_separator_rejected(self, cache) -> None:
        with pytest.raises(ValueError):
            Translator(make_provider(), cache, separator="")


class TestTranslateBatch:
    """Tests for the separator batch protocol."""

    @pytest.mark.asyncio
    async def test_full_batch(self, cache) -> None:
        """Every item is translated in order with a single provider call."""
        provider = make_provider("bread|||milk|||egg")
        translator = Translator(provider, cache)

        result = await translator.translate_batch(["pan", "leche", "huevo"], "es", "en")

        assert result == ["bread", "milk", "egg"]
        assert provider.generate.await_count == 1
        prompt = provider.generate.await_args.args[0]
        assert '"pan|||leche|||huevo"' in prompt
        assert '("|||")' in prompt

    @pytest.mark.asyncio
    async def test_dropped_item_falls_back_to_original(self, cache) -> None:
        """Positions the provider did not return keep the original text."""
        translator = Translator(make_provider("bread|||milk"), cache)

        result = await translator.translate_batch(["pan", "leche", "huevo"], "es", "en")

        assert result == ["bread", "milk", "huevo"]

    @pytest.mark.asyncio
    async def test_extra_pieces_are_discarded(self, cache) -> None:
        translator = Translator(make_provider("bread|||milk|||egg|||extra"), cache)

        result = await translator.translate_batch(["pan", "leche", "huevo"], "es", "en")

        assert result == ["bread", "milk", "egg"]

    @pytest.mark.asyncio
    async def test_empty_piece_falls_back_to_original(self, cache) -> None:
        translator = Translator(make_provider("bread||| |||egg"), cache)

        result = await translator.translate_batch(["pan", "leche", "huevo"], "es", "en")

        assert result == ["bread", "leche", "egg"]

    @pytest.mark.asyncio
    async def test_pieces_are_trimmed(self, cache) -> None:
        translator = Translator(make_provider(" bread ||| milk\n"), cache)

        assert await translator.translate_batch(["pan", "leche"], "es", "en") == ["bread", "milk"]

    @pytest.mark.asyncio
    async def test_total_failure_returns_originals(self, cache) -> None:
        translator = Translator(make_provider(side_effect=TimeoutError()), cache)

        result = await translator.translate_batch(["pan", "leche", "huevo"], "es", "en")

        assert result == ["pan", "leche", "huevo"]

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_call(self, cache) -> None:
        provider = make_provider("anything")
        translator = Translator(provider, cache)

        assert await translator.translate_batch([], "es", "en") == []
        provider.generate.assert_not_awaited()
        assert cache.gets == 0

    @pytest.mark.asyncio
    async def test_batch_cached_under_joined_text(self, cache) -> None:
        """Identical batches hit the cache; changing one item invalidates it."""
        provider = make_provider("bread|||milk")
        translator = Translator(provider, cache)

        await translator.translate_batch(["pan", "leche"], "es", "en")
        await translator.translate_batch(["pan", "leche"], "es", "en")
        assert provider.generate.await_count == 1
        assert cache.data[translation_cache_key("es", "en", "pan|||leche")] == "bread|||milk"

        await translator.translate_batch(["pan", "huevo"], "es", "en")
        assert provider.generate.await_count == 2

    @pytest.mark.asyncio
    async def test_custom_separator(self, cache) -> None:
        provider = make_provider("bread ## milk")
        translator = Translator(provider, cache, separator="##")

        assert await translator.translate_batch(["pan", "leche"], "es", "en") == ["bread", "milk"]
        assert '"pan##leche"' in provider.generate.await_args.args[0]

    @pytest.mark.asyncio
    async def test_context_shapes_prompt(self, cache) -> None:
        provider = make_provider("French Toast")
        translator = Translator(provider, cache)

        await translator.translate_batch(["Tostadas"], "es", "en", context="recipe titles")

        assert "list of recipe titles" in provider.generate.await_args.args[0]

    @pytest.mark.asyncio
    async def test_separator_collision_translates_items_individually(self, cache, provider) -> None:
        """Items containing the separator are translated one by one, keeping alignment."""
        translator = Translator(provider, cache)

        result = await translator.translate_batch(["pan", "a|||b", "huevo"], "es", "en")

        assert len(result) == 3
        assert result[0] == "bread"
        assert result[2] == "egg"
        # One call per item, none of them joined
        assert len(provider.prompts) == 3
        assert all("list of" not in prompt for prompt in provider.prompts)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "items",
        [["sal|", "pimienta"], ["sal", "|pimienta"], ["a||", "|b", "c"]],
    )
    async def test_separator_formed_at_join_boundary(self, cache, provider, items) -> None:
        """Pipes at item edges that would merge into a separator keep each item intact."""
        translator = Translator(provider, cache)

        result = await translator.translate_batch(items, "es", "en")

        assert result == items
        assert len(provider.prompts) == len(items)
        assert all("list of" not in prompt for prompt in provider.prompts)

    @pytest.mark.asyncio
    async def test_quotes_around_each_piece_are_removed(self, cache) -> None:
        """Per-item quoting by the provider does not leak into the first or last item."""
        translator = Translator(make_provider('"bread"|||"milk"|||"egg"'), cache)

        result = await translator.translate_batch(["pan", "leche", "huevo"], "es", "en")

        assert result == ["bread", "milk", "egg"]

    @pytest.mark.asyncio
    async def test_quoted_batch_cached_pieces_cleaned_on_hit(self, cache) -> None:
        cache.data[translation_cache_key("es", "en", "pan|||leche")] = '"bread" ||| "milk"'
        provider = make_provider()
        translator = Translator(provider, cache)

        assert await translator.translate_batch(["pan", "leche"], "es", "en") == ["bread", "milk"]
        provider.generate.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [0, 1, 2, 5, 13])
    @pytest.mark.parametrize(
        "response",
        ["", "solo", "a|||b", "|||", "x|||y|||z|||w|||v|||u|||t|||s|||r|||q|||p|||o|||n|||m|||l"],
    )
    async def test_output_length_always_matches_input(self, cache, size, response) -> None:
        """Output has exactly N aligned elements whatever the provider returns."""
        translator = Translator(make_provider(response), cache)
        items = [f"item {i}" for i in range(size)]

        result = await translator.translate_batch(items, "es", "en")

        assert len(result) == size
        for original, translated in zip(items, result):
            assert translated
            if translated.startswith("item"):
                assert translated == original
