"""Inventory accessor boundary.

The recipe gateway only needs a read-only, ordered list of a user's items.
`InMemoryInventory` backs the command-line runner and the tests; production
deployments plug in their own store behind the same protocol.
"""

from typing import Protocol

from pantry.models.models import InventoryItem


class InventoryAccessor(Protocol):
    """Read-only view of users' pantries."""

    async def list_items(self, owner_id: str) -> list[InventoryItem]:
        """Return the owner's items in insertion order."""
        ...


class InMemoryInventory:
    """Inventory kept in a dict keyed by owner."""

    def __init__(self) -> None:
        self._items: dict[str, list[InventoryItem]] = {}

    def add_item(self, owner_id: str, name: str, quantity: float, unit: str) -> InventoryItem:
        """Add an item, or add to the quantity of an existing item with the same name.

        Quantities are only summed in the same unit; units are never converted.

        Raises:
            pydantic.ValidationError: If the item is invalid (empty name, negative quantity, unknown unit).
            ValueError: If the item exists with a different unit.
        """
        item = InventoryItem(name=name, quantity=quantity, unit=unit)
        items = self._items.setdefault(owner_id, [])
        for index, existing in enumerate(items):
            if existing.name == item.name:
                if existing.unit != item.unit:
                    raise ValueError(
                        f"{item.name!r} is stored in {existing.unit}, cannot add {item.quantity} {item.unit}"
                    )
                merged = existing.model_copy(update={"quantity": existing.quantity + item.quantity})
                items[index] = merged
                return merged
        items.append(item)
        return item

    async def list_items(self, owner_id: str) -> list[InventoryItem]:
        return list(self._items.get(owner_id, []))
