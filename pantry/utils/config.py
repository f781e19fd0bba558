"""Configuration management for the Pantry Recipes service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Translation provider (Gemini)
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # Temperature: 0.0 keeps translations deterministic so cached values stay stable
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.0"))

        # Recipe provider (Spoonacular)
        self.SPOONACULAR_API_KEY: str = os.getenv("SPOONACULAR_API_KEY", "")
        self.SPOONACULAR_BASE_URL: str = os.getenv("SPOONACULAR_BASE_URL", "https://api.spoonacular.com")
        # Number of recipes requested per search. Default: 5
        self.MAX_RECIPES: int = int(os.getenv("MAX_RECIPES", "5"))
        # Total timeout for a single provider request, in seconds
        self.REQUEST_TIMEOUT_SECONDS: int = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

        # Retry Configuration - transient provider failures (429, 5xx, network)
        # MAX_RETRIES: Number of attempts for a provider call
        self.MAX_RETRIES: int = int(os.getenv("MAX_RETRIES", "3"))
        # DELAY_BETWEEN_RETRIES: Initial delay in seconds (doubled each retry)
        self.DELAY_BETWEEN_RETRIES: int = int(os.getenv("DELAY_BETWEEN_RETRIES", "1"))

        # Cache Store
        # CACHE_DB_FILE: SQLite database file holding translations and provider responses
        self.CACHE_DB_FILE: str = os.getenv("CACHE_DB_FILE", "pantry_cache.db")
        # CACHE_TTL_HOURS: Entries older than this are treated as absent. Default: 23
        self.CACHE_TTL_HOURS: float = float(os.getenv("CACHE_TTL_HOURS", "23"))

        # Batch translation separator placed between items of a joined batch
        self.BATCH_SEPARATOR: str = os.getenv("BATCH_SEPARATOR", "|||")

        # Languages: the UI speaks DISPLAY_LANGUAGE, the recipe provider PROVIDER_LANGUAGE
        self.DISPLAY_LANGUAGE: str = os.getenv("DISPLAY_LANGUAGE", "es")
        self.PROVIDER_LANGUAGE: str = os.getenv("PROVIDER_LANGUAGE", "en")

    @property
    def cache_ttl_seconds(self) -> float:
        """Cache time-to-live expressed in seconds."""
        return self.CACHE_TTL_HOURS * 3600

    def validate(self) -> None:
        """Validate required configuration.

        Raises:
            ValueError: If required API keys are missing or invalid values provided.
        """
        if not self.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY environment variable is required")
        if not self.SPOONACULAR_API_KEY:
            raise ValueError("SPOONACULAR_API_KEY environment variable is required")
        if not (0.0 <= self.TEMPERATURE <= 1.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 1.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_RECIPES < 1:
            raise ValueError(
                f"MAX_RECIPES must be at least 1, got: {self.MAX_RECIPES}"
            )
        if self.MAX_RETRIES < 1:
            raise ValueError(
                f"MAX_RETRIES must be at least 1, got: {self.MAX_RETRIES}"
            )
        if self.DELAY_BETWEEN_RETRIES < 1:
            raise ValueError(
                f"DELAY_BETWEEN_RETRIES must be at least 1 second, got: {self.DELAY_BETWEEN_RETRIES}"
            )
        if self.CACHE_TTL_HOURS <= 0:
            raise ValueError(
                f"CACHE_TTL_HOURS must be positive, got: {self.CACHE_TTL_HOURS}"
            )
        if not self.BATCH_SEPARATOR:
            raise ValueError("BATCH_SEPARATOR must not be empty")
        for name in ("DISPLAY_LANGUAGE", "PROVIDER_LANGUAGE"):
            code = getattr(self, name)
            if not (2 <= len(code) <= 10) or not code.replace("-", "").isalpha():
                raise ValueError(
                    f"{name} must be a 2-10 character language code like 'es' or 'pt-BR', got: {code!r}"
                )
        if self.DISPLAY_LANGUAGE == self.PROVIDER_LANGUAGE:
            raise ValueError(
                f"DISPLAY_LANGUAGE and PROVIDER_LANGUAGE must differ, both are: {self.DISPLAY_LANGUAGE}"
            )


# Module-level config instance. Validation runs at startup (see pantry.services.setup)
config = Config()
