"""Unit catalog: recognized units, their families and conversion factors."""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class QuantityError(Exception):
    """Base exception for quantity and unit errors."""


class UnknownUnit(QuantityError):
    """Raised when a unit symbol is not registered in the catalog."""

    def __init__(self, symbol: str):
        super().__init__(f"Unknown unit: {symbol!r}")
        self.symbol = symbol


class UnitFamily(str, Enum):
    """Unit families. Only units of the same family can be merged."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Unit:
    """A recognized unit.

    ``factor_to_base`` scales an amount in this unit to the family's base unit.
    Custom units have no factor and only ever merge with themselves.
    """

    symbol: str
    family: UnitFamily
    factor_to_base: float | None
    plural: str = ""
    aliases: tuple[str, ...] = ()

    @property
    def is_custom(self) -> bool:
        return self.family is UnitFamily.CUSTOM

    def label(self, amount: float) -> str:
        """Symbol to display next to ``amount``."""
        if self.plural and amount != 1:
            return self.plural
        return self.symbol


# =============================================================================
# Default Unit Table
# =============================================================================

# Volume (base unit: ml)
VOLUME_UNITS: tuple[Unit, ...] = (
    Unit("ml", UnitFamily.VOLUME, 1.0, aliases=("milliliter", "millilitre", "mls")),
    Unit("cl", UnitFamily.VOLUME, 10.0, aliases=("centiliter", "centilitre")),
    Unit("dl", UnitFamily.VOLUME, 100.0, aliases=("deciliter", "decilitre")),
    Unit("l", UnitFamily.VOLUME, 1000.0, aliases=("liter", "litre", "lt")),
    Unit("tsp", UnitFamily.VOLUME, 4.92892, aliases=("teaspoon", "tsps")),
    Unit("tbsp", UnitFamily.VOLUME, 14.7868, aliases=("tablespoon", "tbs", "tbl", "tbsps")),
    Unit("fl oz", UnitFamily.VOLUME, 29.5735, aliases=("fluid ounce", "fl. oz", "floz")),
    Unit("cup", UnitFamily.VOLUME, 236.588, plural="cups"),
    Unit("pint", UnitFamily.VOLUME, 473.176, plural="pints", aliases=("pt",)),
    Unit("quart", UnitFamily.VOLUME, 946.353, plural="quarts", aliases=("qt",)),
    Unit("gallon", UnitFamily.VOLUME, 3785.41, plural="gallons", aliases=("gal",)),
)

# Weight (base unit: g)
WEIGHT_UNITS: tuple[Unit, ...] = (
    Unit("mg", UnitFamily.WEIGHT, 0.001, aliases=("milligram",)),
    Unit("g", UnitFamily.WEIGHT, 1.0, aliases=("gram", "gr")),
    Unit("kg", UnitFamily.WEIGHT, 1000.0, aliases=("kilogram", "kilo")),
    Unit("oz", UnitFamily.WEIGHT, 28.3495, aliases=("ounce",)),
    Unit("lb", UnitFamily.WEIGHT, 453.592, aliases=("pound", "lbs")),
)

# Count (base unit: item)
COUNT_UNITS: tuple[Unit, ...] = (
    Unit("item", UnitFamily.COUNT, 1.0, plural="items"),
    Unit("whole", UnitFamily.COUNT, 1.0),
    Unit("piece", UnitFamily.COUNT, 1.0, plural="pieces", aliases=("pc", "pcs")),
    Unit("each", UnitFamily.COUNT, 1.0, aliases=("ea",)),
    Unit("dozen", UnitFamily.COUNT, 12.0, aliases=("doz",)),
)

# Custom: no conversion, merged only with the identical symbol
CUSTOM_UNITS: tuple[Unit, ...] = tuple(
    Unit(symbol, UnitFamily.CUSTOM, None, plural=plural, aliases=aliases)
    for symbol, plural, aliases in (
        ("pinch", "pinches", ()),
        ("dash", "dashes", ()),
        ("splash", "splashes", ()),
        ("drop", "drops", ()),
        ("handful", "handfuls", ()),
        ("sprig", "sprigs", ()),
        ("clove", "cloves", ()),
        ("head", "heads", ()),
        ("bunch", "bunches", ()),
        ("stalk", "stalks", ()),
        ("leaf", "leaves", ()),
        ("slice", "slices", ()),
        ("stick", "sticks", ()),
        ("can", "cans", ("tin",)),
        ("jar", "jars", ()),
        ("bottle", "bottles", ()),
        ("bag", "bags", ()),
        ("box", "boxes", ()),
        ("package", "packages", ("pkg", "pack")),
        ("fillet", "fillets", ()),
    )
)

DEFAULT_UNITS: tuple[Unit, ...] = VOLUME_UNITS + WEIGHT_UNITS + COUNT_UNITS + CUSTOM_UNITS

FAMILY_BASES: Mapping[UnitFamily, str] = {
    UnitFamily.VOLUME: "ml",
    UnitFamily.WEIGHT: "g",
    UnitFamily.COUNT: "item",
}


def normalize_symbol(symbol: str) -> str:
    """Lowercase, collapse whitespace and drop a trailing period ("Tbsp." -> "tbsp")."""
    return " ".join(symbol.lower().split()).rstrip(".")


class UnitCatalog:
    """Read-only registry of units, keyed by symbol and aliases."""

    def __init__(
        self,
        units: Iterable[Unit] = DEFAULT_UNITS,
        bases: Mapping[UnitFamily, str] = FAMILY_BASES,
    ):
        by_symbol: dict[str, Unit] = {}
        by_alias: dict[str, Unit] = {}

        for unit in units:
            if unit.symbol in by_symbol:
                raise ValueError(f"Duplicate unit symbol: {unit.symbol!r}")
            by_symbol[unit.symbol] = unit

            for alias in (unit.symbol, unit.plural, *unit.aliases):
                if not alias:
                    continue
                key = normalize_symbol(alias)
                existing = by_alias.get(key)
                if existing is not None and existing is not unit:
                    raise ValueError(
                        f"Alias {alias!r} maps to both {existing.symbol!r} and {unit.symbol!r}"
                    )
                by_alias[key] = unit

        base_units: dict[UnitFamily, Unit] = {}
        for family, symbol in bases.items():
            base = by_symbol[symbol]
            if base.family is not family or base.factor_to_base != 1.0:
                raise ValueError(f"{symbol!r} cannot be the base unit of {family.value}")
            base_units[family] = base

        self._units = MappingProxyType(by_symbol)
        self._aliases = MappingProxyType(by_alias)
        self._bases = MappingProxyType(base_units)

    @property
    def units(self) -> Mapping[str, Unit]:
        return self._units

    def lookup(self, symbol: str) -> Unit:
        """
        Find a unit by symbol or alias.

        Matching is case-insensitive and accepts regular plurals
        ("cups", "pinches") even when they are not registered aliases.

        Raises:
            UnknownUnit: If nothing matches.
        """
        key = normalize_symbol(symbol)
        if not key:
            raise UnknownUnit(symbol)

        unit = self._aliases.get(key)
        if unit is not None:
            return unit

        for suffix in ("s", "es"):
            if key.endswith(suffix) and len(key) > len(suffix):
                unit = self._aliases.get(key[: -len(suffix)])
                if unit is not None:
                    return unit

        raise UnknownUnit(symbol)

    def family_base(self, family: UnitFamily) -> Unit:
        """Get the unit every quantity of ``family`` is merged into."""
        try:
            return self._bases[family]
        except KeyError:
            raise ValueError(f"Unit family {family.value!r} has no base unit") from None

    def __contains__(self, symbol: object) -> bool:
        if not isinstance(symbol, str):
            return False
        try:
            self.lookup(symbol)
        except UnknownUnit:
            return False
        return True

    def __iter__(self) -> Iterator[Unit]:
        return iter(self._units.values())

    def __len__(self) -> int:
        return len(self._units)


CATALOG = UnitCatalog()


def lookup(symbol: str) -> Unit:
    """Look up ``symbol`` in the default catalog."""
    return CATALOG.lookup(symbol)


def family_base(family: UnitFamily) -> Unit:
    """Base unit of ``family`` in the default catalog."""
    return CATALOG.family_base(family)
