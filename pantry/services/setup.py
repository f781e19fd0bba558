"""Recipe gateway initialization factory.

Wires the cache store, translation provider, recipe provider client and
inventory accessor into a RecipeGateway.
"""

from typing import Optional

from pantry.cache.store import CacheStore, SQLiteCacheStore
from pantry.inventory.inventory import InventoryAccessor
from pantry.recipes.gateway import RecipeGateway
from pantry.recipes.spoonacular import SpoonacularClient
from pantry.translation.gemini import GeminiTranslationProvider
from pantry.translation.translator import Translator
from pantry.utils.config import Config, config as default_config
from pantry.utils.logger import logger


def initialize_recipe_gateway(
    inventory: InventoryAccessor,
    cache: Optional[CacheStore] = None,
    app_config: Optional[Config] = None,
) -> RecipeGateway:
    """Validate configuration and build a RecipeGateway.

    Args:
        inventory: Inventory accessor to read pantry items from.
        cache: Cache store. Defaults to a SQLiteCacheStore at CACHE_DB_FILE.
        app_config: Configuration. Defaults to the module-level config.

    Returns:
        RecipeGateway: Ready-to-use gateway.

    Raises:
        ValueError: If the configuration is invalid.
    """
    app_config = app_config or default_config
    app_config.validate()

    if cache is None:
        logger.info(f"Using SQLite cache: {app_config.CACHE_DB_FILE} (TTL {app_config.CACHE_TTL_HOURS}h)")
        cache = SQLiteCacheStore(app_config.CACHE_DB_FILE, ttl_seconds=app_config.cache_ttl_seconds)

    provider = GeminiTranslationProvider(
        api_key=app_config.GEMINI_API_KEY,
        model=app_config.GEMINI_MODEL,
        temperature=app_config.TEMPERATURE,
    )
    translator = Translator(provider, cache, separator=app_config.BATCH_SEPARATOR)
    client = SpoonacularClient(
        api_key=app_config.SPOONACULAR_API_KEY,
        base_url=app_config.SPOONACULAR_BASE_URL,
        number=app_config.MAX_RECIPES,
        max_retries=app_config.MAX_RETRIES,
        retry_delays=[
            app_config.DELAY_BETWEEN_RETRIES * (2 ** attempt) for attempt in range(app_config.MAX_RETRIES)
        ],
        timeout_seconds=app_config.REQUEST_TIMEOUT_SECONDS,
    )

    logger.info(
        f"Recipe gateway ready ({app_config.DISPLAY_LANGUAGE} <-> {app_config.PROVIDER_LANGUAGE}, "
        f"model {app_config.GEMINI_MODEL})"
    )
    return RecipeGateway(
        inventory=inventory,
        translator=translator,
        client=client,
        cache=cache,
        display_language=app_config.DISPLAY_LANGUAGE,
        provider_language=app_config.PROVIDER_LANGUAGE,
    )
