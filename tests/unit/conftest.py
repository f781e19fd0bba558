"""Shared fakes and fixtures for unit tests."""

from typing import Any, Optional

import pytest

from pantry.inventory.inventory import InMemoryInventory


class DictCache:
    """Cache store double backed by a dict, counting reads and writes."""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.gets = 0
        self.puts = 0

    async def get(self, key: str) -> Optional[Any]:
        self.gets += 1
        return self.data.get(key)

    async def put(self, key: str, value: Any) -> None:
        self.puts += 1
        self.data[key] = value


class DictionaryProvider:
    """Translation provider double that translates word by word from a dictionary.

    Understands both single and separator-joined prompts: the text to translate
    is the quoted string at the end of the prompt.
    """

    def __init__(self, translations: Optional[dict[str, str]] = None, separator: str = "|||") -> None:
        self.translations = translations or {}
        self.separator = separator
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        text = prompt.rsplit('is: "', 1)[1][:-1]
        pieces = text.split(self.separator)
        return self.separator.join(self.translations.get(piece, piece) for piece in pieces)


ES_EN = {
    "pan": "bread",
    "leche": "milk",
    "huevo": "egg",
    "tomate": "tomato",
}

EN_ES = {
    "French Toast": "Tostadas francesas",
    "Scrambled Eggs": "Huevos revueltos",
    "Pancakes": "Tortitas",
    "1 tsp cinnamon": "1 cucharadita de canela",
    "2 tbsp butter": "2 cucharadas de mantequilla",
    "1 cup flour": "1 taza de harina",
    "salt": "sal",
    "French toast with cinnamon.": "Tostadas francesas con canela.",
    "Soak the bread and fry it.": "Remoja el pan y fríelo.",
}


@pytest.fixture
def cache() -> DictCache:
    return DictCache()


@pytest.fixture
def provider() -> DictionaryProvider:
    return DictionaryProvider({**ES_EN, **EN_ES})


@pytest.fixture
def inventory() -> InMemoryInventory:
    inventory = InMemoryInventory()
    inventory.add_item("user-1", "Pan", 1, "unidades")
    inventory.add_item("user-1", "leche", 1, "litros")
    inventory.add_item("user-1", "huevo", 6, "unidades")
    return inventory


@pytest.fixture
def search_payload() -> dict:
    """Spoonacular complexSearch response with two results."""
    return {
        "results": [
            {
                "id": 101,
                "title": "French Toast",
                "image": "https://img.spoonacular.com/recipes/101-312x231.jpg",
                "imageType": "jpg",
                "missedIngredientCount": 2,
                "missedIngredients": [
                    {"id": 2010, "amount": 1.0, "unit": "tsp", "name": "cinnamon", "original": "1 tsp cinnamon"},
                    {"id": 1001, "amount": 2.0, "unit": "tbsp", "name": "butter", "original": "2 tbsp butter"},
                ],
                "usedIngredients": [
                    {"id": 18064, "amount": 4.0, "unit": "slices", "name": "bread", "original": "4 slices bread"},
                ],
            },
            {
                "id": 202,
                "title": "Pancakes",
                "image": "https://img.spoonacular.com/recipes/202-312x231.jpg",
                "missedIngredients": [
                    {"id": 20081, "amount": 1.0, "unit": "cup", "name": "flour", "original": "1 cup flour"},
                ],
                "usedIngredients": [],
            },
        ],
        "offset": 0,
        "number": 5,
        "totalResults": 2,
    }


@pytest.fixture
def details_payload() -> dict:
    """Spoonacular recipe information response."""
    return {
        "id": 101,
        "title": "French Toast",
        "image": "https://img.spoonacular.com/recipes/101-556x370.jpg",
        "servings": 2,
        "readyInMinutes": 15,
        "pricePerServing": 87.43,
        "summary": "French toast with cinnamon.",
        "instructions": "Soak the bread and fry it.",
        "extendedIngredients": [
            {
                "id": 2010,
                "aisle": "Spices and Seasonings",
                "amount": 1.0,
                "unit": "tsp",
                "name": "cinnamon",
                "original": "1 tsp cinnamon",
                "measures": {"metric": {"amount": 1.0, "unitShort": "tsp"}},
            },
            {
                "id": 2047,
                "aisle": "Spices and Seasonings",
                "amount": 0.25,
                "unit": "",
                "name": "salt",
                "original": "salt",
                "measures": {"metric": {"amount": 0.25, "unitShort": ""}},
            },
        ],
    }
