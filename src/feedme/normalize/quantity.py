"""Quantity types and the free-form ``quantity_unit`` parser."""

import math
import re
from dataclasses import dataclass, replace
from decimal import Decimal

from feedme.config import get_settings
from feedme.logging_config import get_logger
from feedme.normalize.units import CATALOG, Unit, UnitCatalog, UnitFamily, UnknownUnit

logger = get_logger(__name__)


# =============================================================================
# Quantity Types
# =============================================================================


def format_amount(amount: float) -> str:
    """Exact text form of ``amount`` that parses back to the same float."""
    amount = float(amount)
    if amount.is_integer():
        return str(int(amount))
    text = repr(amount)
    if "e" in text:
        # Expand the shortest repr so no digits are lost
        text = format(Decimal(text), "f")
    return text


def _format_rounded(amount: float, precision: int) -> str:
    text = f"{amount:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


@dataclass(frozen=True)
class ResolvedQuantity:
    """An amount of a known unit."""

    amount: float
    unit: Unit

    resolved = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", float(self.amount))
        if not math.isfinite(self.amount) or self.amount < 0:
            raise ValueError(f"Quantity amount must be finite and non-negative, got {self.amount}")

    def render(self) -> str:
        """Canonical "amount unit" text; ``parse_quantity`` maps it back to this quantity."""
        return f"{format_amount(self.amount)} {self.unit.symbol}"

    def display(self, precision: int | None = None) -> str:
        """Rounded, pluralised text for people, e.g. "1.5 cups"."""
        if precision is None:
            precision = get_settings().display_precision
        text = _format_rounded(self.amount, precision)
        return f"{text} {self.unit.label(float(text))}"

    def __str__(self) -> str:
        return self.display()


@dataclass(frozen=True)
class OpaqueQuantity:
    """
    Text that could not be resolved to a known unit.

    ``raw`` is kept verbatim for display. ``amount`` is the leading number when
    one was found ("2 glugs" -> 2.0) and 0 otherwise. ``count`` tracks how many
    identical entries were merged together.
    """

    raw: str
    amount: float = 0.0
    count: int = 1

    resolved = False

    @property
    def unit(self) -> None:
        return None

    def merged(self, other: "OpaqueQuantity") -> "OpaqueQuantity":
        """Combine with an entry carrying the same raw text."""
        if other.raw != self.raw:
            raise ValueError(f"Cannot merge opaque quantities {self.raw!r} and {other.raw!r}")
        return replace(self, count=self.count + other.count)

    def render(self) -> str:
        return self.raw

    def display(self, precision: int | None = None) -> str:
        if self.count > 1:
            return f"{self.count}x {self.raw}"
        return self.raw

    def __str__(self) -> str:
        return self.display()


Quantity = ResolvedQuantity | OpaqueQuantity


# =============================================================================
# Parsing
# =============================================================================

VULGAR_FRACTIONS: dict[str, str] = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_NUMBER = r"(?:\d+(?:\.\d+)?|\.\d+)"

_LEADING_AMOUNT = re.compile(
    rf"""
    ^(?:
        (?P<whole>\d+)(?:\s*-\s*|\s+)(?P<mixed_num>\d+)\s*/\s*(?P<mixed_den>\d+)  # 1 1/2, 1-1/2
      | (?P<low>{_NUMBER})\s*(?:-|–|to\b)\s*(?P<high>{_NUMBER})              # 2-3, 2 to 3
      | (?P<num>\d+)\s*/\s*(?P<den>\d+)                                      # 1/2
      | (?P<plain>{_NUMBER})                                                 # 2, 2.5, .5
    )
    """,
    re.VERBOSE,
)


def _prepare(raw: str) -> str:
    """Lowercase, expand unicode fractions and collapse whitespace."""
    working = raw.lower().replace("⁄", "/")
    for char, fraction in VULGAR_FRACTIONS.items():
        working = working.replace(char, f" {fraction} ")
    return " ".join(working.split())


def _amount_from_match(match: re.Match[str]) -> float:
    """Numeric value of a ``_LEADING_AMOUNT`` match. Ranges use their midpoint."""
    if match.group("low") is not None:
        return (float(match.group("low")) + float(match.group("high"))) / 2
    if match.group("whole") is not None:
        fraction = int(match.group("mixed_num")) / int(match.group("mixed_den"))
        return int(match.group("whole")) + fraction
    if match.group("num") is not None:
        return int(match.group("num")) / int(match.group("den"))
    return float(match.group("plain"))


def parse_quantity(raw: str, catalog: UnitCatalog = CATALOG) -> Quantity:
    """
    Parse a free-form quantity string such as "2 cups", "1 1/2 tbsp" or "500g".

    Never raises: text without a leading number, or with a unit the catalog
    does not know, comes back as an ``OpaqueQuantity`` holding the original
    string. A bare number ("3") is counted in the Count family's base unit.

    Args:
        raw: The stored ``quantity_unit`` text.
        catalog: Unit catalog to resolve units against.

    Returns:
        ResolvedQuantity or OpaqueQuantity.
    """
    if not isinstance(raw, str):
        raw = "" if raw is None else str(raw)

    working = _prepare(raw)
    match = _LEADING_AMOUNT.match(working)
    if match is None:
        logger.debug(f"No leading amount in {raw!r}, keeping as text")
        return OpaqueQuantity(raw=raw)

    try:
        amount = _amount_from_match(match)
    except (ZeroDivisionError, OverflowError, ValueError):
        logger.debug(f"Unusable amount in {raw!r}, keeping as text")
        return OpaqueQuantity(raw=raw)

    if not math.isfinite(amount):
        return OpaqueQuantity(raw=raw)

    unit_token = working[match.end() :].strip()
    if not unit_token:
        return ResolvedQuantity(amount=amount, unit=catalog.family_base(UnitFamily.COUNT))

    try:
        unit = catalog.lookup(unit_token)
    except UnknownUnit:
        logger.debug(f"Unknown unit {unit_token!r} in {raw!r}, keeping as text")
        return OpaqueQuantity(raw=raw, amount=amount)

    return ResolvedQuantity(amount=amount, unit=unit)


parse = parse_quantity
