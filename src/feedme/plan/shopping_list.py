"""Shopping list generation from selected recipes."""

import uuid
from collections.abc import Hashable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from feedme.logging_config import LoggingContext, get_logger
from feedme.normalize.conversion import convert, scale
from feedme.normalize.quantity import OpaqueQuantity, Quantity, ResolvedQuantity, parse_quantity
from feedme.normalize.units import CATALOG, QuantityError, Unit, UnitCatalog
from feedme.plan.aggregate import (
    AggregatedLine,
    Ingredient,
    RecipeIngredientEntry,
    aggregate,
)
from feedme.schemas import RecipeIngredientRow, RecipeSelection

logger = get_logger(__name__)


def to_entries(
    rows: Iterable[RecipeIngredientRow],
    catalog: UnitCatalog = CATALOG,
) -> list[RecipeIngredientEntry]:
    """Parse stored rows into aggregation entries."""
    return [
        RecipeIngredientEntry(
            ingredient=Ingredient(id=row.ingredient_id, name=row.ingredient_name),
            quantity=parse_quantity(row.quantity_unit, catalog),
            notes=row.notes,
        )
        for row in rows
    ]


@dataclass
class ShoppingItem:
    """A single item in the shopping list."""

    ingredient_id: Hashable
    ingredient_name: str
    quantities: list[str] = field(default_factory=list)
    notes: str | None = None
    all_notes: list[str] = field(default_factory=list)
    recipe_sources: list[Hashable] = field(default_factory=list)
    has_unparsed: bool = False

    @property
    def combined_quantity(self) -> str:
        """All quantities of this item joined for display."""
        return " + ".join(self.quantities)

    def __str__(self) -> str:
        return f"{self.ingredient_name}: {self.combined_quantity}"


@dataclass
class ShoppingList:
    """Complete shopping list for a set of recipes."""

    shopping_list_id: str
    items: list[ShoppingItem] = field(default_factory=list)
    unparsed_items_count: int = 0

    def add_item(self, item: ShoppingItem) -> None:
        """Add an item and update computed fields."""
        self.items.append(item)
        if item.has_unparsed:
            self.unparsed_items_count += 1

    def __str__(self) -> str:
        return "\n".join(str(item) for item in self.items)


class ShoppingListGenerator:
    """
    Generates shopping lists from recipe ingredient rows with:
    - Quantity parsing of stored ``quantity_unit`` text
    - Aggregation across recipes by ingredient id
    - Optional per-recipe scaling (e.g. doubling a recipe)
    - Display in the units the recipes were written in
    """

    def __init__(self, catalog: UnitCatalog = CATALOG):
        self.catalog = catalog

    def generate(
        self,
        recipes_ingredients: Iterable[tuple[Hashable, Sequence[RecipeIngredientRow]]],
        multipliers: Mapping[Hashable, float] | None = None,
        shopping_list_id: str | None = None,
    ) -> ShoppingList:
        """
        Generate a shopping list from selected recipes.

        Args:
            recipes_ingredients: List of (recipe_id, rows) tuples in selection order.
            multipliers: Optional scale factor per recipe id (default 1).
            shopping_list_id: Identifier for logging; generated when missing.

        Returns:
            ShoppingList with one item per ingredient.
        """
        shopping_list = ShoppingList(shopping_list_id=shopping_list_id or uuid.uuid4().hex[:12])
        multipliers = multipliers or {}

        with LoggingContext(shopping_list_id=shopping_list.shopping_list_id):
            entries: list[RecipeIngredientEntry] = []
            recipe_sources: dict[Hashable, list[Hashable]] = {}

            for recipe_id, rows in recipes_ingredients:
                factor = multipliers.get(recipe_id, 1.0)
                for entry in to_entries(rows, self.catalog):
                    if factor != 1.0:
                        entry = replace(entry, quantity=self._scaled(entry.quantity, factor))
                    entries.append(entry)

                    sources = recipe_sources.setdefault(entry.ingredient.id, [])
                    if recipe_id not in sources:
                        sources.append(recipe_id)

            logger.info(f"Generating shopping list from {len(recipe_sources)} ingredients")

            for line in aggregate(entries, self.catalog):
                shopping_list.add_item(
                    self._create_shopping_item(line, recipe_sources.get(line.ingredient.id, []))
                )

            logger.info(
                f"Generated shopping list: {len(shopping_list.items)} items, "
                f"{shopping_list.unparsed_items_count} with unparsed quantities"
            )

        return shopping_list

    def generate_from_selections(
        self,
        selections: Iterable[RecipeSelection],
        shopping_list_id: str | None = None,
    ) -> ShoppingList:
        """Generate a shopping list from validated recipe selections."""
        selections = list(selections)
        return self.generate(
            [(selection.recipe_id, selection.rows) for selection in selections],
            multipliers={selection.recipe_id: selection.multiplier for selection in selections},
            shopping_list_id=shopping_list_id,
        )

    @staticmethod
    def _scaled(quantity: Quantity, factor: float) -> Quantity:
        """Scale a quantity, keeping it as unscaled text when the result is unusable."""
        try:
            return scale(quantity, factor)
        except (OverflowError, ValueError) as e:
            logger.warning(f"Could not scale {quantity.render()!r} by {factor}: {e}")
            return OpaqueQuantity(raw=quantity.render(), amount=quantity.amount)

    def _create_shopping_item(
        self,
        line: AggregatedLine,
        recipe_sources: list[Hashable],
    ) -> ShoppingItem:
        """Create a shopping item with display quantities."""
        return ShoppingItem(
            ingredient_id=line.ingredient.id,
            ingredient_name=line.ingredient.name,
            quantities=[self._display_quantity(q, line.sources) for q in line.quantities],
            notes=line.notes,
            all_notes=list(line.all_notes),
            recipe_sources=list(recipe_sources),
            has_unparsed=line.has_opaque,
        )

    def _display_quantity(self, quantity: Quantity, sources: list[Quantity]) -> str:
        """
        Render a merged quantity for display.

        Family totals are shown in the first unit the recipes used for that
        family, so 1 cup + 1/2 cup reads "1.5 cups" rather than millilitres.
        """
        if isinstance(quantity, OpaqueQuantity) or quantity.unit.is_custom:
            return quantity.display()

        preferred = self._preferred_unit(quantity, sources)
        if preferred is None:
            return quantity.display()

        try:
            return convert(quantity, preferred).display()
        except QuantityError as e:
            logger.warning(f"Falling back to {quantity.unit.symbol} for display: {e}")
            return quantity.display()

    @staticmethod
    def _preferred_unit(quantity: ResolvedQuantity, sources: list[Quantity]) -> Unit | None:
        for source in sources:
            if isinstance(source, ResolvedQuantity) and source.unit.family is quantity.unit.family:
                return source.unit
        return None
