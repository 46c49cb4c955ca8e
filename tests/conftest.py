"""Pytest configuration and shared fixtures."""

import pytest

from feedme.normalize.quantity import parse_quantity
from feedme.plan.aggregate import Ingredient, RecipeIngredientEntry
from feedme.schemas import RecipeIngredientRow

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Ingredient Fixtures
# =============================================================================


@pytest.fixture
def flour():
    return Ingredient(id=1, name="flour")


@pytest.fixture
def eggs():
    return Ingredient(id=2, name="eggs")


@pytest.fixture
def salt():
    return Ingredient(id=3, name="salt")


@pytest.fixture
def milk():
    return Ingredient(id=4, name="milk")


@pytest.fixture
def make_entry():
    """Build an entry by parsing a quantity string."""

    def _make(ingredient, quantity_unit, notes=None):
        return RecipeIngredientEntry(
            ingredient=ingredient,
            quantity=parse_quantity(quantity_unit),
            notes=notes,
        )

    return _make


# =============================================================================
# Stored Row Fixtures
# =============================================================================


@pytest.fixture
def pancake_rows():
    """Rows as stored for a pancake recipe."""
    return [
        RecipeIngredientRow(ingredient_id=1, ingredient_name="flour", quantity_unit="1 cup"),
        RecipeIngredientRow(ingredient_id=4, ingredient_name="milk", quantity_unit="250 ml"),
        RecipeIngredientRow(ingredient_id=2, ingredient_name="eggs", quantity_unit="2"),
        RecipeIngredientRow(ingredient_id=3, ingredient_name="salt", quantity_unit="a pinch"),
    ]


@pytest.fixture
def bread_rows():
    """Rows as stored for a bread recipe."""
    return [
        RecipeIngredientRow(
            ingredient_id=1,
            ingredient_name="Flour",
            quantity_unit="1/2 cup",
            notes="sifted",
        ),
        RecipeIngredientRow(ingredient_id=4, ingredient_name="milk", quantity_unit="1 cup"),
        RecipeIngredientRow(ingredient_id=3, ingredient_name="salt", quantity_unit="a pinch"),
        RecipeIngredientRow(ingredient_id=5, ingredient_name="yeast", quantity_unit="7 g"),
    ]
