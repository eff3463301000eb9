"""Services for an owner's on-hand inventory."""

import logging
import math
from dataclasses import dataclass, replace
from typing import Protocol

from pantry_tracker.domain.inventory import (
    Availability,
    DeductionRequest,
    DeductionResult,
    InventoryRecord,
)
from pantry_tracker.domain.units import MeasurementUnit
from pantry_tracker.services.conversions import (
    DEDUCTION_EPSILON,
    check_availability,
    deduct_inventory,
)

_logger = logging.getLogger(__name__)


class InventoryRepository(Protocol):
    """Persistence interface for inventory records."""

    def list_inventory(self, owner_id: str) -> list[InventoryRecord]:
        """Return all inventory records for an owner."""

    def replace_inventory(self, owner_id: str, records: list[InventoryRecord]) -> None:
        """Replace the owner's inventory with the given records."""


@dataclass
class InventoryService:
    """Application service for stock maintenance and deductions."""

    repository: InventoryRepository
    epsilon: float = DEDUCTION_EPSILON

    def list_inventory(self, owner_id: str) -> list[InventoryRecord]:
        """Return the owner's inventory."""
        return self.repository.list_inventory(owner_id)

    def save_inventory(self, owner_id: str, records: list[InventoryRecord]) -> None:
        """Persist a full inventory snapshot for the owner."""
        self.repository.replace_inventory(owner_id, records)

    def add_stock(
        self, owner_id: str, ingredient_id: str, unit_id: str, quantity: float
    ) -> list[InventoryRecord]:
        """Add stock, merging into an existing record in the same unit."""
        _require_positive(quantity)
        records = self.repository.list_inventory(owner_id)
        updated = _merge(records, owner_id, ingredient_id, unit_id, quantity)
        self.repository.replace_inventory(owner_id, updated)
        return updated

    def set_stock(  # noqa: PLR0913
        self,
        owner_id: str,
        ingredient_id: str,
        old_unit_id: str,
        new_unit_id: str,
        quantity: float,
    ) -> list[InventoryRecord]:
        """Overwrite a record's quantity, optionally moving it to another unit."""
        _require_positive(quantity)
        records = self.repository.list_inventory(owner_id)
        position = _find(records, owner_id, ingredient_id, old_unit_id)
        if position is None:
            raise LookupError(f"No stock of {ingredient_id} in unit {old_unit_id}")

        if old_unit_id == new_unit_id:
            updated = list(records)
            updated[position] = replace(records[position], quantity=quantity)
        else:
            without_old = records[:position] + records[position + 1 :]
            updated = _merge(
                without_old, owner_id, ingredient_id, new_unit_id, quantity
            )
        self.repository.replace_inventory(owner_id, updated)
        return updated

    def remove_stock(
        self, owner_id: str, ingredient_id: str, unit_id: str
    ) -> list[InventoryRecord]:
        """Remove the record for an ingredient in a unit, if present."""
        records = self.repository.list_inventory(owner_id)
        position = _find(records, owner_id, ingredient_id, unit_id)
        if position is None:
            return records
        updated = records[:position] + records[position + 1 :]
        self.repository.replace_inventory(owner_id, updated)
        return updated

    def check(  # noqa: PLR0913
        self,
        owner_id: str,
        ingredient_id: str,
        unit_id: str,
        quantity: float,
        units: list[MeasurementUnit],
    ) -> Availability:
        """Check the owner's stock of an ingredient against a requirement."""
        _require_finite(quantity)
        return check_availability(
            ingredient_id,
            unit_id,
            quantity,
            self.repository.list_inventory(owner_id),
            units,
        )

    def deduct(
        self, request: DeductionRequest, units: list[MeasurementUnit]
    ) -> DeductionResult:
        """Deduct from the owner's stock and persist the updated inventory."""
        records = self.repository.list_inventory(request.owner_id)
        result = self.deduct_from(request, records, units)
        if result.deducted:
            self.repository.replace_inventory(
                request.owner_id, result.updated_inventory
            )
        return result

    def deduct_from(
        self,
        request: DeductionRequest,
        records: list[InventoryRecord],
        units: list[MeasurementUnit],
    ) -> DeductionResult:
        """Deduct from an in-memory inventory snapshot without persisting."""
        _require_finite(request.required_quantity)
        result = deduct_inventory(
            request.ingredient_id,
            request.required_unit_id,
            request.required_quantity,
            records,
            units,
            request.owner_id,
            epsilon=self.epsilon,
        )
        _logger.info(
            "Inventory deduction: owner=%s ingredient=%s required=%s %s lines=%s "
            "remaining=%s",
            request.owner_id,
            request.ingredient_id,
            request.required_quantity,
            request.required_unit_id,
            len(result.deducted),
            result.remaining,
        )
        return result


def _find(
    records: list[InventoryRecord], owner_id: str, ingredient_id: str, unit_id: str
) -> int | None:
    """Return the position of the matching record, if any."""
    for position, record in enumerate(records):
        if (
            record.owner_id == owner_id
            and record.ingredient_id == ingredient_id
            and record.unit_id == unit_id
        ):
            return position
    return None


def _merge(
    records: list[InventoryRecord],
    owner_id: str,
    ingredient_id: str,
    unit_id: str,
    quantity: float,
) -> list[InventoryRecord]:
    """Add quantity to the matching record or append a new one."""
    updated = list(records)
    position = _find(updated, owner_id, ingredient_id, unit_id)
    if position is None:
        updated.append(
            InventoryRecord(
                owner_id=owner_id,
                ingredient_id=ingredient_id,
                unit_id=unit_id,
                quantity=quantity,
            )
        )
    else:
        current = updated[position]
        updated[position] = replace(current, quantity=current.quantity + quantity)
    return updated


def _require_positive(quantity: float) -> None:
    if not math.isfinite(quantity) or quantity <= 0:
        raise ValueError("Quantity must be a positive number")


def _require_finite(quantity: float) -> None:
    if not math.isfinite(quantity):
        raise ValueError("Quantity must be a finite number")
