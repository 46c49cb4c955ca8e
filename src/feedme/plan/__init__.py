"""Grocery list aggregation and shopping list generation."""

from feedme.plan.aggregate import (
    AggregatedLine,
    Ingredient,
    RecipeIngredientEntry,
    aggregate,
)
from feedme.plan.shopping_list import (
    ShoppingItem,
    ShoppingList,
    ShoppingListGenerator,
    to_entries,
)

__all__ = [
    "AggregatedLine",
    "Ingredient",
    "RecipeIngredientEntry",
    "ShoppingItem",
    "ShoppingList",
    "ShoppingListGenerator",
    "aggregate",
    "to_entries",
]
