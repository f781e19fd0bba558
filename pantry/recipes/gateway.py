"""Recipe gateway: inventory-driven search and recipe details in the display language.

Search flow:
1. Read the owner's inventory names (display language)
2. Batch translate them to the provider language (originals on failure)
3. Deduplicate and sort, so the same ingredient set always yields the same key
4. Cache-or-call the provider, keyed by ingredients plus filters
5. Batch translate titles and missing ingredients back, concurrently
6. Merge translations into the results, field by field

Translation failures only ever degrade text to the original language.
Provider failures and malformed payloads surface to the caller.
"""

import asyncio
from typing import Any, Iterable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from pantry.cache.store import CacheStore, details_cache_key, search_cache_key
from pantry.inventory.inventory import InventoryAccessor
from pantry.models.models import RecipeDetail, RecipeIngredient, RecipeSearchResult, SearchFilters
from pantry.recipes.spoonacular import SpoonacularClient
from pantry.translation.translator import Translator
from pantry.utils.config import config
from pantry.utils.errors import RecipeStructureError, safe_execute_async
from pantry.utils.logger import logger


ModelT = TypeVar("ModelT", bound=BaseModel)

# Fields that translation may rewrite, per response shape
SEARCH_RESULT_TRANSLATABLE = frozenset({"title", "missed_ingredients"})
DETAIL_TRANSLATABLE = frozenset({"title", "summary", "instructions", "extended_ingredients"})
INGREDIENT_TRANSLATABLE = frozenset({"original"})


def merge_translated_fields(model: ModelT, translations: dict[str, Any], allowed: Iterable[str]) -> ModelT:
    """Return a copy of `model` with allow-listed fields replaced by their translations.

    None translations and unchanged values are skipped, leaving the original
    value (and whether the provider sent the field at all) in place.

    Raises:
        ValueError: If a translation targets a field outside the allow-list.
    """
    allowed = frozenset(allowed)
    unexpected = set(translations) - allowed
    if unexpected:
        raise ValueError(f"Fields not translatable for {type(model).__name__}: {sorted(unexpected)}")

    update = {
        name: value
        for name, value in translations.items()
        if value is not None and value != getattr(model, name)
    }
    return model.model_copy(update=update)


def normalize_ingredients(names: Iterable[str]) -> list[str]:
    """Strip, lower-case, drop blanks, deduplicate and sort ingredient names."""
    return sorted({name.strip().lower() for name in names if name and name.strip()})


def _translated_ingredients(
    ingredients: list[RecipeIngredient],
    translated: list[str],
) -> list[RecipeIngredient]:
    return [
        merge_translated_fields(ingredient, {"original": text}, INGREDIENT_TRANSLATABLE)
        for ingredient, text in zip(ingredients, translated)
    ]


class RecipeGateway:
    """Serve recipe searches and details translated into the display language."""

    def __init__(
        self,
        inventory: InventoryAccessor,
        translator: Translator,
        client: SpoonacularClient,
        cache: CacheStore,
        display_language: Optional[str] = None,
        provider_language: Optional[str] = None,
    ) -> None:
        self.inventory = inventory
        self.translator = translator
        self.client = client
        self.cache = cache
        self.display_language = display_language or config.DISPLAY_LANGUAGE
        self.provider_language = provider_language or config.PROVIDER_LANGUAGE

    async def _cached_provider_call(self, cache_key: str) -> Optional[Any]:
        cached = await safe_execute_async(self.cache.get(cache_key), "Recipe cache read")
        if cached is not None:
            logger.info(f"[CACHE HIT] {cache_key}", extra={"cache_key": cache_key})
        else:
            logger.info(f"[CACHE MISS] {cache_key}", extra={"cache_key": cache_key})
        return cached

    async def _fetch_search_results(self, ingredients: list[str], filters: SearchFilters) -> list[dict]:
        cache_key = search_cache_key(ingredients, filters)
        cached = await self._cached_provider_call(cache_key)
        if cached is not None:
            return cached

        data = await self.client.search(",".join(ingredients), filters.to_params())
        results = data.get("results") if isinstance(data, dict) else None
        if not isinstance(results, list):
            raise RecipeStructureError("Spoonacular search response has no 'results' list")

        # Reject malformed payloads before they reach the cache
        self._validate_results(results)
        await safe_execute_async(self.cache.put(cache_key, results), "Recipe cache write")
        return results

    @staticmethod
    def _validate_results(results: list) -> list[RecipeSearchResult]:
        try:
            return [RecipeSearchResult.model_validate(result) for result in results]
        except ValidationError as e:
            raise RecipeStructureError(f"Malformed Spoonacular search result: {e}") from e

    @staticmethod
    def _validate_detail(data: Any) -> RecipeDetail:
        try:
            return RecipeDetail.model_validate(data)
        except ValidationError as e:
            raise RecipeStructureError(f"Malformed Spoonacular recipe details: {e}") from e

    async def search_recipes(
        self,
        owner_id: str,
        filters: Optional[SearchFilters] = None,
    ) -> list[RecipeSearchResult]:
        """Search recipes for the owner's inventory, translated to the display language.

        Args:
            owner_id: Inventory owner.
            filters: Optional dietary/nutritional filters.

        Returns:
            Search results with titles and missing ingredients translated where
            possible. Empty list if the inventory is empty or nothing matches.

        Raises:
            RecipeProviderError: If the recipe provider fails.
            RecipeStructureError: If the provider returns a malformed payload.
        """
        filters = filters or SearchFilters()

        items = await self.inventory.list_items(owner_id)
        names = [item.name for item in items]
        if not names:
            logger.info(f"Inventory of {owner_id} is empty, no recipes to search", extra={"owner_id": owner_id})
            return []

        translated_names = await self.translator.translate_batch(
            names, self.display_language, self.provider_language, context="kitchen ingredients"
        )
        ingredients = normalize_ingredients(translated_names)
        if not ingredients:
            return []

        results = self._validate_results(await self._fetch_search_results(ingredients, filters))
        if not results:
            return []

        return await self._translate_results(results)

    async def _translate_results(self, results: list[RecipeSearchResult]) -> list[RecipeSearchResult]:
        titles = [result.title for result in results]
        missing = [ingredient.original for result in results for ingredient in result.missed_ingredients]

        async def _no_missing() -> list[str]:
            return []

        translated_titles, translated_missing = await asyncio.gather(
            self.translator.translate_batch(
                titles, self.provider_language, self.display_language, context="recipe titles"
            ),
            self.translator.translate_batch(
                missing, self.provider_language, self.display_language, context="kitchen ingredients"
            )
            if missing
            else _no_missing(),
        )

        translated_results = []
        missing_index = 0
        for result, title in zip(results, translated_titles):
            count = len(result.missed_ingredients)
            missed = _translated_ingredients(
                result.missed_ingredients,
                translated_missing[missing_index:missing_index + count],
            )
            missing_index += count
            translated_results.append(
                merge_translated_fields(
                    result,
                    {"title": title, "missed_ingredients": missed},
                    SEARCH_RESULT_TRANSLATABLE,
                )
            )
        return translated_results

    async def get_recipe_details(self, recipe_id: int | str) -> RecipeDetail:
        """Fetch one recipe's details, translated to the display language.

        Raises:
            RecipeProviderError: If the recipe provider fails.
            RecipeStructureError: If the provider returns a malformed payload.
        """
        cache_key = details_cache_key(recipe_id)
        data = await self._cached_provider_call(cache_key)
        if data is None:
            data = await self.client.details(recipe_id)
            detail = self._validate_detail(data)
            await safe_execute_async(self.cache.put(cache_key, data), "Recipe cache write")
        else:
            detail = self._validate_detail(data)

        return await self._translate_detail(detail)

    async def _translate_optional(self, text: Optional[str]) -> Optional[str]:
        if text is None:
            return None
        return await self.translator.translate(text, self.provider_language, self.display_language)

    async def _translate_detail(self, detail: RecipeDetail) -> RecipeDetail:
        originals = [ingredient.original for ingredient in detail.extended_ingredients]

        title, summary, instructions, ingredients = await asyncio.gather(
            self._translate_optional(detail.title),
            self._translate_optional(detail.summary),
            self._translate_optional(detail.instructions),
            self.translator.translate_batch(
                originals, self.provider_language, self.display_language, context="ingredients"
            ),
        )

        return merge_translated_fields(
            detail,
            {
                "title": title,
                "summary": summary,
                "instructions": instructions,
                "extended_ingredients": _translated_ingredients(detail.extended_ingredients, ingredients),
            },
            DETAIL_TRANSLATABLE,
        )
