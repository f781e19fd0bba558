"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the suite unless both provider API keys are set.
These tests call the real Gemini and Spoonacular APIs and use quota.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

from pantry.inventory.inventory import InMemoryInventory
from pantry.services.setup import initialize_recipe_gateway
from pantry.utils.config import Config


def pytest_configure(config):
    """Load .env before test collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests require valid GEMINI_API_KEY and SPOONACULAR_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip the session if required API keys are not configured."""
    missing = [name for name in ("GEMINI_API_KEY", "SPOONACULAR_API_KEY") if not os.getenv(name)]
    if missing:
        pytest.skip(
            f"Integration tests skipped. Missing API keys: {', '.join(missing)}. Please set these in your .env file."
        )


@pytest.fixture
def inventory() -> InMemoryInventory:
    inventory = InMemoryInventory()
    inventory.add_item("integration", "huevo", 6, "unidades")
    inventory.add_item("integration", "leche", 1, "litros")
    inventory.add_item("integration", "pan", 4, "unidades")
    return inventory


@pytest.fixture
def gateway(inventory, tmp_path, monkeypatch):
    """RecipeGateway wired to the real providers with a throwaway SQLite cache."""
    monkeypatch.setenv("CACHE_DB_FILE", str(tmp_path / "integration_cache.db"))
    gateway = initialize_recipe_gateway(inventory, app_config=Config())
    yield gateway
    gateway.cache.close()
