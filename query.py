#!/usr/bin/env python3
"""Ad hoc query runner for the Pantry Recipes gateway.

Run searches and detail lookups directly without an HTTP server.

Usage:
    python query.py "pan, leche, huevo"
    python query.py --diet vegetarian --max-calories 600 "arroz, tomate"
    python query.py --debug "pan, leche"  # Show full JSON response
    python query.py --details 716429      # Recipe details by ID

Features:
- Ingredients given in the display language build a throwaway inventory
- Search results and details are printed translated to the display language
- Debug mode to display the full JSON with all provider fields
"""

import asyncio
import sys

from rich.console import Console
from rich.table import Table

from pantry.inventory.inventory import InMemoryInventory
from pantry.models.models import SearchFilters
from pantry.services.setup import initialize_recipe_gateway
from pantry.utils.errors import PantryError
from pantry.utils.logger import logger

console = Console()

CLI_OWNER = "cli"

FILTER_FLAGS = {
    "--diet": "diet",
    "--max-calories": "max_calories",
    "--max-carbs": "max_carbs",
    "--max-protein": "max_protein",
    "--max-sugar": "max_sugar",
}


def build_inventory(ingredients: str) -> InMemoryInventory:
    """Create an inventory holding one unit of each comma-separated ingredient."""
    inventory = InMemoryInventory()
    for name in ingredients.split(","):
        if name.strip():
            inventory.add_item(CLI_OWNER, name, 1, "unidades")
    return inventory


async def run_search(ingredients: str, filters: SearchFilters, debug: bool = False) -> None:
    gateway = initialize_recipe_gateway(build_inventory(ingredients))
    try:
        results = await gateway.search_recipes(CLI_OWNER, filters)
    finally:
        gateway.cache.close()

    if debug:
        console.print_json(data=[r.model_dump(by_alias=True, exclude_unset=True) for r in results])
        return

    if not results:
        console.print("[yellow]No recipes found[/yellow]")
        return

    table = Table(title="Recetas")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Missing ingredients")
    for result in results:
        missing = ", ".join(ingredient.original for ingredient in result.missed_ingredients)
        table.add_row(str(result.id), result.title, missing or "-")
    console.print(table)


async def run_details(recipe_id: str, debug: bool = False) -> None:
    gateway = initialize_recipe_gateway(InMemoryInventory())
    try:
        detail = await gateway.get_recipe_details(recipe_id)
    finally:
        gateway.cache.close()

    if debug:
        console.print_json(data=detail.model_dump(by_alias=True, exclude_unset=True))
        return

    console.print(f"[bold cyan]{detail.title}[/bold cyan]")
    if detail.summary:
        console.print(detail.summary)
    console.print()
    for ingredient in detail.extended_ingredients:
        console.print(f"  • {ingredient.original}")
    if detail.instructions:
        console.print()
        console.print(detail.instructions)


def main(argv: list[str]) -> int:
    debug_mode = False
    recipe_id = None
    filter_values: dict[str, str] = {}
    index = 1

    while index < len(argv) and argv[index].startswith("--"):
        flag = argv[index]
        if flag == "--debug":
            debug_mode = True
            index += 1
        elif flag == "--details" or flag in FILTER_FLAGS:
            if index + 1 >= len(argv):
                print(f"Error: {flag} flag requires a value")
                return 1
            if flag == "--details":
                recipe_id = argv[index + 1]
            else:
                filter_values[FILTER_FLAGS[flag]] = argv[index + 1]
            index += 2
        else:
            print(f"Unknown flag: {flag}")
            return 1

    try:
        if recipe_id is not None:
            asyncio.run(run_details(recipe_id, debug=debug_mode))
            return 0

        if index >= len(argv):
            print("Error: No ingredients provided")
            print('Usage: python query.py [--debug] [--diet D] [--max-calories N] "<ingredient, ingredient>"')
            return 1

        filters = SearchFilters(**filter_values)
        asyncio.run(run_search(" ".join(argv[index:]), filters, debug=debug_mode))
        return 0

    except KeyboardInterrupt:
        logger.info("Query interrupted by user.")
        return 0
    except PantryError as e:
        console.print(f"[red]✗ {e}[/red]")
        return 1
    except Exception as e:
        logger.error(f"Query execution failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
