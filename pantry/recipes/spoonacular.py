"""Spoonacular recipe provider client with retry logic.

Thin async wrapper around the complexSearch and recipe information endpoints.
Transient failures (rate limiting, server errors, network errors, timeouts) are
retried with exponential backoff; anything else surfaces as RecipeProviderError.
"""

import asyncio
from typing import Any, Optional

import aiohttp

from pantry.utils.config import config
from pantry.utils.errors import RecipeProviderError
from pantry.utils.logger import logger


RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


class SpoonacularClient:
    """Call the Spoonacular search and details endpoints."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        number: Optional[int] = None,
        max_retries: Optional[int] = None,
        retry_delays: Optional[list[int]] = None,
        timeout_seconds: Optional[int] = None,
    ) -> None:
        """Initialize SpoonacularClient with configuration.

        Args:
            api_key: Spoonacular API key for authentication.
            base_url: API root. Defaults to SPOONACULAR_BASE_URL.
            number: Recipes requested per search. Defaults to MAX_RECIPES.
            max_retries: Maximum attempts per call. Defaults to MAX_RETRIES.
            retry_delays: Delays in seconds before each retry. If None, doubles
                DELAY_BETWEEN_RETRIES each attempt.
            timeout_seconds: Total timeout per request. Defaults to REQUEST_TIMEOUT_SECONDS.

        Raises:
            ValueError: If api_key is None or empty string.
        """
        if not api_key:
            raise ValueError("SPOONACULAR_API_KEY is required")

        self.api_key = api_key
        self.base_url = (base_url or config.SPOONACULAR_BASE_URL).rstrip("/")
        self.number = number or config.MAX_RECIPES
        self.max_retries = max_retries or config.MAX_RETRIES
        self.retry_delays = retry_delays or [
            config.DELAY_BETWEEN_RETRIES * (2 ** attempt) for attempt in range(self.max_retries)
        ]
        self.timeout_seconds = timeout_seconds or config.REQUEST_TIMEOUT_SECONDS

    async def _request(self, path: str, params: dict[str, str]) -> tuple[int, Any]:
        """Perform one GET request.

        Returns:
            Tuple of (HTTP status, decoded JSON body or None if not JSON).

        Raises:
            aiohttp.ClientError: On connection failures.
            asyncio.TimeoutError: When the request exceeds the timeout.
        """
        url = f"{self.base_url}{path}"
        query = {"apiKey": self.api_key, **params}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, params=query) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                return response.status, body

    async def _get_json(self, path: str, params: dict[str, str], operation: str) -> Any:
        """GET with retries on transient failures.

        Raises:
            RecipeProviderError: On non-2xx responses or after all retries fail.
        """
        last_error: Optional[RecipeProviderError] = None
        for attempt in range(self.max_retries):
            try:
                status, body = await self._request(path, params)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = RecipeProviderError(f"Spoonacular {operation} unreachable: {e}")
                logger.debug(f"Spoonacular {operation} attempt {attempt + 1} failed: {e}")
            else:
                if 200 <= status < 300:
                    return body

                message = body.get("message") if isinstance(body, dict) else None
                last_error = RecipeProviderError(
                    message or f"Spoonacular {operation} failed",
                    status=status,
                )
                logger.error(f"Spoonacular {operation} error: status={status} body={body}")
                if status not in RETRYABLE_STATUSES:
                    raise last_error

            if attempt < self.max_retries - 1:
                delay = self.retry_delays[attempt] if attempt < len(self.retry_delays) else self.retry_delays[-1]
                logger.warning(
                    f"Spoonacular {operation} failed, retrying in {delay}s... (attempt {attempt + 1}/{self.max_retries})"
                )
                await asyncio.sleep(delay)

        logger.error(f"Spoonacular {operation} failed after {self.max_retries} attempts: {last_error}")
        raise last_error

    async def search(self, ingredients: str, filters: Optional[dict[str, str]] = None) -> Any:
        """Search recipes that use the given ingredients.

        Args:
            ingredients: Comma-joined provider-language ingredient names.
            filters: Extra query parameters (diet, maxCalories, ...).

        Returns:
            Provider envelope, normally {"results": [...], "totalResults": ...}.

        Raises:
            RecipeProviderError: If the provider fails.
        """
        params = {
            "includeIngredients": ingredients,
            "number": str(self.number),
            "fillIngredients": "true",
            "ignorePantry": "true",
            "sort": "min-missing-ingredients",
            **(filters or {}),
        }
        return await self._get_json("/recipes/complexSearch", params, "search")

    async def details(self, recipe_id: int | str) -> Any:
        """Fetch the full information payload of one recipe.

        Raises:
            RecipeProviderError: If the provider fails.
        """
        return await self._get_json(f"/recipes/{recipe_id}/information", {}, "details")
