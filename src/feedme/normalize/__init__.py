"""Parse, classify and convert recipe ingredient quantities."""

from feedme.normalize.conversion import (
    IncompatibleFamily,
    UnresolvedUnit,
    amounts_close,
    convert,
    is_zero,
    scale,
    to_base,
)
from feedme.normalize.quantity import (
    OpaqueQuantity,
    Quantity,
    ResolvedQuantity,
    format_amount,
    parse,
    parse_quantity,
)
from feedme.normalize.units import (
    CATALOG,
    QuantityError,
    Unit,
    UnitCatalog,
    UnitFamily,
    UnknownUnit,
    family_base,
    lookup,
)

__all__ = [
    "CATALOG",
    "IncompatibleFamily",
    "OpaqueQuantity",
    "Quantity",
    "QuantityError",
    "ResolvedQuantity",
    "Unit",
    "UnitCatalog",
    "UnitFamily",
    "UnknownUnit",
    "UnresolvedUnit",
    "amounts_close",
    "convert",
    "family_base",
    "format_amount",
    "is_zero",
    "lookup",
    "parse",
    "parse_quantity",
    "scale",
    "to_base",
]
