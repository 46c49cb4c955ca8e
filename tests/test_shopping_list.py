"""Unit tests for shopping list generation."""

import logging

import pytest
from pydantic import ValidationError

from feedme.normalize.quantity import OpaqueQuantity, ResolvedQuantity
from feedme.plan.shopping_list import (
    ShoppingItem,
    ShoppingList,
    ShoppingListGenerator,
    to_entries,
)
from feedme.schemas import RecipeIngredientRow, RecipeSelection

# =============================================================================
# Schema Tests
# =============================================================================


class TestRecipeIngredientRow:
    """Tests for the stored row schema."""

    def test_quantity_unit_kept_verbatim(self):
        """Test that quantity text is not altered."""
        row = RecipeIngredientRow(
            ingredient_id=1, ingredient_name="salt", quantity_unit=" a pinch "
        )
        assert row.quantity_unit == " a pinch "

    def test_null_quantity_unit(self):
        """Test that a missing quantity becomes empty text."""
        row = RecipeIngredientRow(ingredient_id=1, ingredient_name="salt", quantity_unit=None)
        assert row.quantity_unit == ""

    def test_blank_notes(self):
        """Test that blank notes are treated as missing."""
        row = RecipeIngredientRow(ingredient_id=1, ingredient_name="salt", notes="   ")
        assert row.notes is None

    def test_name_trimmed(self):
        """Test that names are trimmed."""
        row = RecipeIngredientRow(ingredient_id=1, ingredient_name="  flour ")
        assert row.ingredient_name == "flour"

    def test_negative_multiplier_rejected(self):
        """Test that recipe multipliers cannot be negative."""
        with pytest.raises(ValidationError):
            RecipeSelection(recipe_id=1, multiplier=-1)


class TestToEntries:
    """Tests for converting rows to entries."""

    def test_rows_parsed(self, pancake_rows):
        """Test that each row becomes a parsed entry."""
        entries = to_entries(pancake_rows)

        assert [entry.ingredient.id for entry in entries] == [1, 4, 2, 3]
        assert isinstance(entries[0].quantity, ResolvedQuantity)
        assert isinstance(entries[3].quantity, OpaqueQuantity)
        assert entries[3].quantity.raw == "a pinch"


# =============================================================================
# Shopping List Model Tests
# =============================================================================


class TestShoppingItem:
    """Tests for ShoppingItem."""

    def test_str(self):
        """Test the 'name: quantity' form."""
        item = ShoppingItem(ingredient_id=1, ingredient_name="flour", quantities=["1.5 cups"])
        assert str(item) == "flour: 1.5 cups"

    def test_combined_quantity(self):
        """Test joining several quantities."""
        item = ShoppingItem(
            ingredient_id=1,
            ingredient_name="flour",
            quantities=["1 cup", "200 g", "2x a handful"],
        )
        assert item.combined_quantity == "1 cup + 200 g + 2x a handful"


class TestShoppingList:
    """Tests for ShoppingList."""

    def test_add_item(self):
        """Test adding items updates the unparsed count."""
        shopping_list = ShoppingList(shopping_list_id="test")
        shopping_list.add_item(ShoppingItem(ingredient_id=1, ingredient_name="flour"))
        shopping_list.add_item(
            ShoppingItem(ingredient_id=3, ingredient_name="salt", has_unparsed=True)
        )

        assert len(shopping_list.items) == 2
        assert shopping_list.unparsed_items_count == 1

    def test_str(self):
        """Test rendering one item per line."""
        shopping_list = ShoppingList(shopping_list_id="test")
        shopping_list.add_item(
            ShoppingItem(ingredient_id=1, ingredient_name="flour", quantities=["1 cup"])
        )
        shopping_list.add_item(
            ShoppingItem(ingredient_id=2, ingredient_name="eggs", quantities=["2 items"])
        )
        assert str(shopping_list) == "flour: 1 cup\neggs: 2 items"


# =============================================================================
# Generator Tests
# =============================================================================


class TestShoppingListGenerator:
    """Tests for ShoppingListGenerator."""

    @pytest.fixture
    def generator(self):
        return ShoppingListGenerator()

    def test_generate_across_recipes(self, generator, pancake_rows, bread_rows):
        """Test aggregating two recipes into one list."""
        shopping_list = generator.generate([("pancakes", pancake_rows), ("bread", bread_rows)])

        lines = [str(item) for item in shopping_list.items]
        assert lines == [
            "flour: 1.5 cups",
            "milk: 486.59 ml",
            "eggs: 2 items",
            "salt: 2x a pinch",
            "yeast: 7 g",
        ]

    def test_recipe_sources(self, generator, pancake_rows, bread_rows):
        """Test tracking which recipes use an ingredient."""
        shopping_list = generator.generate([("pancakes", pancake_rows), ("bread", bread_rows)])
        by_name = {item.ingredient_name: item for item in shopping_list.items}

        assert by_name["flour"].recipe_sources == ["pancakes", "bread"]
        assert by_name["eggs"].recipe_sources == ["pancakes"]
        assert by_name["yeast"].recipe_sources == ["bread"]

    def test_notes_and_unparsed(self, generator, pancake_rows, bread_rows):
        """Test notes and unparsed flags on items."""
        shopping_list = generator.generate([("pancakes", pancake_rows), ("bread", bread_rows)])
        by_name = {item.ingredient_name: item for item in shopping_list.items}

        # pancakes list flour first, without a note
        assert by_name["flour"].notes is None
        assert by_name["flour"].all_notes == ["sifted"]
        assert by_name["salt"].has_unparsed
        assert shopping_list.unparsed_items_count == 1

    def test_scaling_overflow_kept_as_text(self, generator, caplog):
        """Test that a quantity too large to scale is kept as unscaled text."""
        rows = [
            RecipeIngredientRow(ingredient_id=1, ingredient_name="flour", quantity_unit="2 cups"),
            RecipeIngredientRow(ingredient_id=2, ingredient_name="eggs", quantity_unit="0.5"),
        ]
        with caplog.at_level(logging.WARNING):
            shopping_list = generator.generate([("cake", rows)], multipliers={"cake": 1e308})

        by_name = {item.ingredient_name: item for item in shopping_list.items}
        assert by_name["flour"].quantities == ["2 cup"]
        assert by_name["flour"].has_unparsed
        assert not by_name["eggs"].has_unparsed
        assert shopping_list.unparsed_items_count == 1
        assert "Could not scale" in caplog.text

    def test_multiplier(self, generator, pancake_rows):
        """Test scaling a recipe."""
        shopping_list = generator.generate(
            [("pancakes", pancake_rows)], multipliers={"pancakes": 2}
        )
        by_name = {item.ingredient_name: item for item in shopping_list.items}

        assert by_name["flour"].quantities == ["2 cups"]
        assert by_name["eggs"].quantities == ["4 items"]
        assert by_name["salt"].quantities == ["a pinch"]

    def test_zero_multiplier_drops_resolved(self, generator, pancake_rows):
        """Test that a recipe scaled to zero adds nothing measurable."""
        shopping_list = generator.generate(
            [("pancakes", pancake_rows)], multipliers={"pancakes": 0}
        )
        assert [item.ingredient_name for item in shopping_list.items] == ["salt"]

    def test_display_uses_first_recipe_unit(self, generator):
        """Test that merged totals are shown in the first unit used."""
        rows = [
            RecipeIngredientRow(ingredient_id=1, ingredient_name="butter", quantity_unit="1 lb"),
            RecipeIngredientRow(ingredient_id=1, ingredient_name="butter", quantity_unit="227 g"),
        ]
        shopping_list = generator.generate([("cake", rows)])
        assert shopping_list.items[0].quantities == ["1.5 lb"]

    def test_generate_from_selections(self, generator, pancake_rows):
        """Test generating from validated selections."""
        selections = [RecipeSelection(recipe_id=1, rows=pancake_rows, multiplier=0.5)]
        shopping_list = generator.generate_from_selections(selections, shopping_list_id="week-42")

        assert shopping_list.shopping_list_id == "week-42"
        assert shopping_list.items[0].quantities == ["0.5 cups"]

    def test_generated_id(self, generator, pancake_rows):
        """Test that a list id is generated when none is given."""
        shopping_list = generator.generate([("pancakes", pancake_rows)])
        assert shopping_list.shopping_list_id

    def test_empty(self, generator):
        """Test generating from no recipes."""
        shopping_list = generator.generate([])
        assert shopping_list.items == []
        assert str(shopping_list) == ""
