"""Grocery list aggregation across recipes."""

import math
from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field

from feedme.logging_config import get_logger
from feedme.normalize.conversion import convert, is_zero
from feedme.normalize.quantity import OpaqueQuantity, Quantity, ResolvedQuantity
from feedme.normalize.units import CATALOG, QuantityError, UnitCatalog

logger = get_logger(__name__)


@dataclass(frozen=True)
class Ingredient:
    """Reference to a stored ingredient. Only ``id`` is used for identity."""

    id: Hashable
    name: str


@dataclass(frozen=True)
class RecipeIngredientEntry:
    """One ingredient line of one recipe."""

    ingredient: Ingredient
    quantity: Quantity
    notes: str | None = None


@dataclass
class AggregatedLine:
    """
    All quantities of one ingredient, merged where units allow.

    ``notes`` is the first entry's note, unchanged (possibly None).
    ``all_notes`` lists every distinct note in first-seen order.
    """

    ingredient: Ingredient
    quantities: list[Quantity] = field(default_factory=list)
    notes: str | None = None
    all_notes: list[str] = field(default_factory=list)
    sources: list[Quantity] = field(default_factory=list)

    @property
    def has_opaque(self) -> bool:
        return any(isinstance(q, OpaqueQuantity) for q in self.quantities)


# Bucket keys: ("family", <family>), ("custom", <symbol>) or ("opaque", <raw text>)
BucketKey = tuple[str, str]


def bucket_key(quantity: Quantity) -> BucketKey:
    """Key of the bucket ``quantity`` is merged into."""
    if isinstance(quantity, OpaqueQuantity):
        return ("opaque", quantity.raw)
    if quantity.unit.is_custom:
        return ("custom", quantity.unit.symbol)
    return ("family", quantity.unit.family.value)


@dataclass
class _IngredientGroup:
    ingredient: Ingredient
    buckets: dict[BucketKey, list[Quantity]] = field(default_factory=dict)
    notes: str | None = None
    all_notes: list[str] = field(default_factory=list)
    sources: list[Quantity] = field(default_factory=list)

    def add(self, entry: RecipeIngredientEntry) -> None:
        self.buckets.setdefault(bucket_key(entry.quantity), []).append(entry.quantity)
        if not self.sources:
            self.notes = entry.notes
        self.sources.append(entry.quantity)
        if entry.notes and entry.notes not in self.all_notes:
            self.all_notes.append(entry.notes)


def _demote(quantity: ResolvedQuantity) -> OpaqueQuantity:
    return OpaqueQuantity(raw=quantity.render(), amount=quantity.amount)


def _merge_opaque(quantities: list[Quantity]) -> OpaqueQuantity:
    merged = quantities[0]
    for quantity in quantities[1:]:
        merged = merged.merged(quantity)
    return merged


def _sum_bucket(
    quantities: list[Quantity],
    catalog: UnitCatalog,
) -> tuple[ResolvedQuantity | None, list[OpaqueQuantity]]:
    """
    Sum a resolved bucket in its target unit.

    Quantities that fail to convert are demoted to opaque text instead of
    aborting the bucket.

    Returns:
        Tuple of (summed quantity or None when the sum is zero, demoted quantities)
    """
    first_unit = quantities[0].unit
    try:
        target = first_unit if first_unit.is_custom else catalog.family_base(first_unit.family)
    except ValueError as e:
        logger.warning(f"No unit to merge {first_unit.family.value} quantities into: {e}")
        return None, [_demote(q) for q in quantities]

    amounts: list[float] = []
    demoted: list[OpaqueQuantity] = []
    for quantity in quantities:
        try:
            amounts.append(convert(quantity, target).amount)
        except (QuantityError, ValueError) as e:
            logger.warning(f"Could not merge {quantity.render()!r} into {target.symbol}: {e}")
            demoted.append(_demote(quantity))

    if not amounts:
        return None, demoted

    try:
        total = ResolvedQuantity(amount=math.fsum(amounts), unit=target)
    except (OverflowError, ValueError) as e:
        logger.warning(f"Could not sum {len(amounts)} quantities in {target.symbol}: {e}")
        return None, [_demote(q) for q in quantities]

    if is_zero(total.amount):
        return None, demoted
    return total, demoted


def _merge_group(group: _IngredientGroup, catalog: UnitCatalog) -> AggregatedLine:
    line = AggregatedLine(
        ingredient=group.ingredient,
        notes=group.notes,
        all_notes=list(group.all_notes),
        sources=list(group.sources),
    )
    demoted: dict[str, OpaqueQuantity] = {}

    for (kind, _), quantities in group.buckets.items():
        if kind == "opaque":
            line.quantities.append(_merge_opaque(quantities))
            continue

        total, failed = _sum_bucket(quantities, catalog)
        if total is not None:
            line.quantities.append(total)
        for quantity in failed:
            existing = demoted.get(quantity.raw)
            demoted[quantity.raw] = existing.merged(quantity) if existing else quantity

    line.quantities.extend(demoted.values())
    return line


def aggregate(
    entries: Iterable[RecipeIngredientEntry],
    catalog: UnitCatalog = CATALOG,
) -> list[AggregatedLine]:
    """
    Merge recipe ingredient entries into one line per ingredient.

    Lines keep the order in which ingredients were first seen. Within a line,
    resolved quantities of the same family are converted to the family's base
    unit and summed, custom units are summed per symbol, and opaque text is
    merged only with identical text (tracked by ``count``). Zero totals and
    lines left with nothing to buy are dropped.

    Args:
        entries: Entries from the selected recipes, in selection order.
        catalog: Unit catalog providing family base units.

    Returns:
        Aggregated lines in first-seen ingredient order.
    """
    groups: dict[Hashable, _IngredientGroup] = {}
    entry_count = 0

    for entry in entries:
        entry_count += 1
        group = groups.get(entry.ingredient.id)
        if group is None:
            group = groups[entry.ingredient.id] = _IngredientGroup(ingredient=entry.ingredient)
        group.add(entry)

    lines: list[AggregatedLine] = []
    for group in groups.values():
        line = _merge_group(group, catalog)
        if line.quantities:
            lines.append(line)
        else:
            logger.debug(f"Nothing to buy for {group.ingredient.name!r}, dropping line")

    logger.debug(f"Aggregated {entry_count} entries into {len(lines)} lines")
    return lines
