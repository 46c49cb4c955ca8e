#!/usr/bin/env python
"""
Print a shopping list for a set of recipes.

The input file is a JSON list of recipe selections as produced by the
storage layer:

    [
        {
            "recipe_id": 1,
            "multiplier": 2,
            "rows": [
                {"ingredient_id": 7, "ingredient_name": "flour", "quantity_unit": "2 cups"},
                {"ingredient_id": 9, "ingredient_name": "salt", "quantity_unit": "a pinch"}
            ]
        }
    ]

Run with: python scripts/shopping_list.py recipes.json
"""

import argparse
import json
import os
import sys

from pydantic import TypeAdapter, ValidationError

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from feedme.config import settings
from feedme.logging_config import configure_logging, get_logger
from feedme.plan.shopping_list import ShoppingListGenerator
from feedme.schemas import RecipeSelection

logger = get_logger(__name__)

_selections_adapter = TypeAdapter(list[RecipeSelection])


def load_selections(path: str) -> list[RecipeSelection]:
    """Read and validate recipe selections from a JSON file."""
    with open(path, encoding="utf-8") as f:
        return _selections_adapter.validate_python(json.load(f))


def main() -> int:
    parser = argparse.ArgumentParser(description="Print a shopping list for recipes")
    parser.add_argument("input", help="JSON file with recipe selections")
    parser.add_argument("--log-level", "-l", default=settings.log_level, help="Log level")
    parser.add_argument("--notes", "-n", action="store_true", help="Show ingredient notes")

    args = parser.parse_args()
    configure_logging(log_level=args.log_level)

    try:
        selections = load_selections(args.input)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not read {args.input}: {e}")
        return 1

    shopping_list = ShoppingListGenerator().generate_from_selections(selections)

    for item in shopping_list.items:
        line = str(item)
        if args.notes and item.all_notes:
            line += f" ({'; '.join(item.all_notes)})"
        print(line)

    return 0


if __name__ == "__main__":
    sys.exit(main())
