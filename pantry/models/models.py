"""Data models and schemas for the Pantry Recipes service.

Defines Pydantic models for inventory items, cache entries and the recipe
provider's response shapes. Provider models keep every field they do not
declare (extra="allow") so that translating a response rewrites only the
declared text fields and leaves ids, images and amounts untouched.
"""

from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Units accepted by the inventory store
Unit = Literal["gramos", "kg", "unidades", "litros", "ml"]


class InventoryItem(BaseModel):
    """A food item in a user's pantry.

    Names are stored lower-cased; only the name is read by the recipe gateway.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Annotated[str, Field(min_length=1, max_length=200, description="Item name in the display language")]
    quantity: Annotated[float, Field(ge=0, description="Amount on hand")]
    unit: Annotated[Unit, Field(description="Unit of the quantity")]

    @field_validator("name")
    @classmethod
    def lowercase_name(cls, name: str) -> str:
        return name.lower()


class CacheEntry(BaseModel):
    """A persisted cache record. At most one live entry exists per key."""

    key: Annotated[str, Field(min_length=1, description="Namespace tag plus request parameters")]
    value: Annotated[Any, Field(description="JSON-serialisable cached data")]
    created_at: Annotated[float, Field(description="Creation time as a POSIX timestamp")]

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        """Return True once the entry's age reaches the time-to-live."""
        return now - self.created_at >= ttl_seconds

    @property
    def created_at_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.created_at)


class TranslationRequest(BaseModel):
    """A batch of strings to translate together, in order."""

    source_lang: Annotated[str, Field(min_length=2, max_length=10)]
    target_lang: Annotated[str, Field(min_length=2, max_length=10)]
    items: Annotated[List[str], Field(default_factory=list)]


class SearchFilters(BaseModel):
    """Dietary and nutritional filters for a recipe search.

    Filters change the provider's result set, so their serialised form is part
    of the search cache key. Field order is fixed to keep keys deterministic.
    """

    diet: Annotated[Optional[str], Field(None, max_length=50, description="Diet type, e.g. 'vegetarian'")]
    max_calories: Annotated[Optional[int], Field(None, gt=0)]
    max_carbs: Annotated[Optional[int], Field(None, gt=0)]
    max_protein: Annotated[Optional[int], Field(None, gt=0)]
    max_sugar: Annotated[Optional[int], Field(None, gt=0)]

    @field_validator("diet", mode="before")
    @classmethod
    def normalize_diet(cls, diet: Optional[str]) -> Optional[str]:
        """Treat empty and 'none' diets as no filter."""
        if diet is None:
            return None
        diet = str(diet).strip().lower()
        if not diet or diet == "none":
            return None
        return diet

    def to_params(self) -> dict[str, str]:
        """Provider query parameters for the active filters, in fixed order."""
        params: dict[str, str] = {}
        if self.diet:
            params["diet"] = self.diet
        if self.max_calories is not None:
            params["maxCalories"] = str(self.max_calories)
        if self.max_carbs is not None:
            params["maxCarbs"] = str(self.max_carbs)
        if self.max_protein is not None:
            params["maxProtein"] = str(self.max_protein)
        if self.max_sugar is not None:
            params["maxSugar"] = str(self.max_sugar)
        return params

    def to_query_string(self) -> str:
        """Serialised filters, e.g. '&diet=vegan&maxCalories=500'."""
        return "".join(f"&{name}={value}" for name, value in self.to_params().items())


class RecipeIngredient(BaseModel):
    """An ingredient entry of a provider recipe.

    Only `original` (the display string) is translatable; amount, unit, id,
    image and every other provider field are carried through unchanged.
    """

    model_config = ConfigDict(extra="allow")

    original: Annotated[str, Field(description="Human-readable ingredient line")]


class RecipeSearchResult(BaseModel):
    """One entry of the provider's search `results` list."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Annotated[int, Field(description="Recipe ID from Spoonacular API")]
    title: Annotated[str, Field(min_length=1)]
    image: Optional[str] = None
    missed_ingredients: Annotated[
        List[RecipeIngredient], Field(default_factory=list, alias="missedIngredients")
    ]
    used_ingredients: Annotated[
        List[RecipeIngredient], Field(default_factory=list, alias="usedIngredients")
    ]


class RecipeDetail(BaseModel):
    """The provider's recipe information payload."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Annotated[int, Field(description="Recipe ID from Spoonacular API")]
    title: Annotated[str, Field(min_length=1)]
    summary: Optional[str] = None
    instructions: Optional[str] = None
    image: Optional[str] = None
    extended_ingredients: Annotated[
        List[RecipeIngredient], Field(default_factory=list, alias="extendedIngredients")
    ]
