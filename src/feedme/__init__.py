"""Ingredient quantity normalization and grocery list aggregation."""

from feedme.normalize import (
    IncompatibleFamily,
    OpaqueQuantity,
    Quantity,
    QuantityError,
    ResolvedQuantity,
    UnitFamily,
    UnknownUnit,
    UnresolvedUnit,
    convert,
    parse_quantity,
)
from feedme.plan import AggregatedLine, Ingredient, RecipeIngredientEntry, aggregate

__version__ = "0.1.0"

__all__ = [
    "AggregatedLine",
    "IncompatibleFamily",
    "Ingredient",
    "OpaqueQuantity",
    "Quantity",
    "QuantityError",
    "RecipeIngredientEntry",
    "ResolvedQuantity",
    "UnitFamily",
    "UnknownUnit",
    "UnresolvedUnit",
    "aggregate",
    "convert",
    "parse_quantity",
]
