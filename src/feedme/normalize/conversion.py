"""Conversion between units of the same family."""

import math
from dataclasses import replace

from feedme.config import get_settings
from feedme.normalize.quantity import OpaqueQuantity, Quantity, ResolvedQuantity
from feedme.normalize.units import CATALOG, QuantityError, Unit, UnitCatalog


class IncompatibleFamily(QuantityError):
    """Raised when converting between units of different families."""

    def __init__(self, source: Unit, target: Unit):
        super().__init__(
            f"Cannot convert {source.symbol} ({source.family.value}) "
            f"to {target.symbol} ({target.family.value})"
        )
        self.source = source
        self.target = target


class UnresolvedUnit(QuantityError):
    """Raised when converting a quantity whose unit was never resolved."""

    def __init__(self, raw: str):
        super().__init__(f"Quantity {raw!r} has no known unit")
        self.raw = raw


def convert(quantity: Quantity, target: Unit) -> ResolvedQuantity:
    """
    Convert ``quantity`` into ``target`` units.

    Custom units only convert to themselves.

    Raises:
        UnresolvedUnit: If ``quantity`` is opaque.
        IncompatibleFamily: If the units belong to different families.
    """
    if isinstance(quantity, OpaqueQuantity):
        raise UnresolvedUnit(quantity.raw)

    source = quantity.unit
    if source.family is not target.family:
        raise IncompatibleFamily(source, target)

    if source == target:
        return quantity

    if source.factor_to_base is None or target.factor_to_base is None:
        raise IncompatibleFamily(source, target)

    amount = quantity.amount * source.factor_to_base / target.factor_to_base
    return ResolvedQuantity(amount=amount, unit=target)


def to_base(quantity: Quantity, catalog: UnitCatalog = CATALOG) -> ResolvedQuantity:
    """Convert to the base unit of the quantity's family (custom units stay as they are)."""
    if isinstance(quantity, OpaqueQuantity):
        raise UnresolvedUnit(quantity.raw)
    if quantity.unit.is_custom:
        return quantity
    return convert(quantity, catalog.family_base(quantity.unit.family))


def scale(quantity: Quantity, factor: float) -> Quantity:
    """Multiply a resolved amount by ``factor``. Opaque text is returned unchanged."""
    if not math.isfinite(factor) or factor < 0:
        raise ValueError(f"Scale factor must be a finite non-negative number, got {factor}")
    if isinstance(quantity, OpaqueQuantity):
        return quantity
    return replace(quantity, amount=quantity.amount * factor)


def amounts_close(a: float, b: float) -> bool:
    """Tolerance-aware equality for summed or converted amounts."""
    settings = get_settings()
    return math.isclose(
        a,
        b,
        rel_tol=settings.quantity_rel_tolerance,
        abs_tol=settings.quantity_abs_tolerance,
    )


def is_zero(amount: float) -> bool:
    """Check whether ``amount`` is zero within tolerance."""
    return amounts_close(amount, 0.0)
