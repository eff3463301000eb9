"""Unit conversion and inventory deduction engine.

Only direct conversions are used: a quantity converts from one unit to another
when the source unit carries an edge to the target. Edges are not assumed to
be symmetric or transitive, so no path search is attempted.
"""

import math
from collections.abc import Sequence
from dataclasses import replace

from pantry_tracker.domain.inventory import (
    Availability,
    DeductedLine,
    DeductionResult,
    InventoryRecord,
)
from pantry_tracker.domain.units import MeasurementUnit

DEDUCTION_EPSILON = 1e-3


def convert_quantity(
    source_unit_id: str,
    target_unit_id: str,
    quantity: float,
    units: Sequence[MeasurementUnit],
) -> float | None:
    """Convert a quantity between units, or return None if not convertible.

    None covers both an unknown source unit and a missing direct edge.
    """
    if source_unit_id == target_unit_id:
        return quantity

    source = _find_unit(source_unit_id, units)
    if source is None:
        return None

    conversion = source.find_conversion(target_unit_id)
    if conversion is None:
        return None
    return quantity * conversion.factor


def sum_inventory_in_unit(
    ingredient_id: str,
    target_unit_id: str,
    inventory: Sequence[InventoryRecord],
    units: Sequence[MeasurementUnit],
) -> float:
    """Total stock of an ingredient expressed in the target unit.

    Records held in units that do not convert to the target are skipped.
    """
    total = 0.0
    for record in inventory:
        if record.ingredient_id != ingredient_id:
            continue
        converted = convert_quantity(
            record.unit_id, target_unit_id, record.quantity, units
        )
        if converted is not None:
            total += converted
    return total


def check_availability(
    ingredient_id: str,
    required_unit_id: str,
    required_quantity: float,
    inventory: Sequence[InventoryRecord],
    units: Sequence[MeasurementUnit],
) -> Availability:
    """Check whether the inventory covers the required quantity."""
    available = sum_inventory_in_unit(
        ingredient_id, required_unit_id, inventory, units
    )
    return Availability(sufficient=available >= required_quantity, available=available)


def deduct_inventory(  # noqa: PLR0913
    ingredient_id: str,
    required_unit_id: str,
    required_quantity: float,
    inventory: Sequence[InventoryRecord],
    units: Sequence[MeasurementUnit],
    owner_id: str,
    *,
    epsilon: float = DEDUCTION_EPSILON,
) -> DeductionResult:
    """Consume an owner's stock of an ingredient in a single greedy pass.

    Records already in the required unit are drawn from first. A record whose
    unit cannot be reached from the required unit is left untouched. When the
    amount taken cannot be converted back into the required unit, the
    outstanding amount is not reduced and later records are drawn from too.
    Records left at or below ``epsilon`` are dropped from the result.
    A request that is not a positive number changes nothing.
    """
    if math.isnan(required_quantity) or required_quantity <= 0:
        return DeductionResult(updated_inventory=list(inventory), remaining=0.0)

    candidates = [
        index
        for index, record in enumerate(inventory)
        if record.owner_id == owner_id and record.ingredient_id == ingredient_id
    ]
    # sort is stable: exact-unit records first, input order within each group
    candidates.sort(key=lambda index: inventory[index].unit_id != required_unit_id)

    # index -> quantity left on the record, or None when it is used up
    leftovers: dict[int, float | None] = {}
    deducted: list[DeductedLine] = []
    remaining = required_quantity

    for index in candidates:
        if remaining <= 0:
            break
        record = inventory[index]
        needed = convert_quantity(required_unit_id, record.unit_id, remaining, units)
        if needed is None:
            continue

        take = min(record.quantity, needed)
        left = record.quantity - take
        leftovers[index] = left if left > epsilon else None
        deducted.append(DeductedLine(unit_id=record.unit_id, quantity=take))

        taken = convert_quantity(record.unit_id, required_unit_id, take, units)
        if taken is not None:
            remaining -= taken

    updated: list[InventoryRecord] = []
    for index, record in enumerate(inventory):
        if index not in leftovers:
            updated.append(record)
            continue
        left = leftovers[index]
        if left is not None:
            updated.append(replace(record, quantity=left))

    return DeductionResult(
        updated_inventory=updated,
        deducted=deducted,
        remaining=max(remaining, 0.0),
    )


def _find_unit(
    unit_id: str, units: Sequence[MeasurementUnit]
) -> MeasurementUnit | None:
    """Return the first unit with the given id."""
    for unit in units:
        if unit.id == unit_id:
            return unit
    return None
