"""Services for an owner's measurement unit catalog."""

import math
from dataclasses import dataclass, replace
from typing import Protocol

from pantry_tracker.domain.units import Conversion, MeasurementUnit
from pantry_tracker.services.conversions import convert_quantity


class UnitRepository(Protocol):
    """Persistence interface for measurement units."""

    def list_units(self, owner_id: str) -> list[MeasurementUnit]:
        """Return all units for an owner, including their conversions."""

    def get_unit(self, owner_id: str, unit_id: str) -> MeasurementUnit | None:
        """Return a unit by id, if present."""

    def create_unit(self, owner_id: str, name: str) -> MeasurementUnit:
        """Create a unit without conversions and return it with its new id."""

    def save_unit(self, unit: MeasurementUnit) -> MeasurementUnit:
        """Create or update a unit with its conversions and return it."""


@dataclass
class CatalogService:
    """Application service for unit lookups and conversions."""

    repository: UnitRepository

    def list_units(self, owner_id: str) -> list[MeasurementUnit]:
        """Return a snapshot of the owner's units."""
        return self.repository.list_units(owner_id)

    def create_unit(self, owner_id: str, name: str) -> MeasurementUnit:
        """Add a unit to the owner's catalog."""
        return self.repository.create_unit(owner_id, _clean_name(name))

    def rename_unit(self, owner_id: str, unit_id: str, name: str) -> MeasurementUnit:
        """Change a unit's name, keeping its conversions."""
        cleaned = _clean_name(name)
        unit = self._require_unit(owner_id, unit_id)
        return self.repository.save_unit(replace(unit, name=cleaned))

    def convertible_units(self, owner_id: str, unit_id: str) -> list[MeasurementUnit]:
        """Return units the given unit converts to directly, in catalog order."""
        units = self.repository.list_units(owner_id)
        source = next((unit for unit in units if unit.id == unit_id), None)
        if source is None:
            return []
        targets = {conversion.target_unit_id for conversion in source.conversions}
        return [unit for unit in units if unit.id in targets]

    def convert(
        self,
        owner_id: str,
        source_unit_id: str,
        target_unit_id: str,
        quantity: float,
    ) -> float | None:
        """Convert a quantity using the owner's catalog."""
        return convert_quantity(
            source_unit_id,
            target_unit_id,
            quantity,
            self.repository.list_units(owner_id),
        )

    def add_conversion(
        self, owner_id: str, unit_id: str, target_unit_id: str, factor: float
    ) -> MeasurementUnit:
        """Add or replace the direct conversion from one unit to another."""
        if not math.isfinite(factor) or factor <= 0:
            raise ValueError("Conversion factor must be positive")
        if unit_id == target_unit_id:
            raise ValueError("A unit cannot convert to itself")
        unit = self._require_unit(owner_id, unit_id)
        self._require_unit(owner_id, target_unit_id)

        conversions = tuple(
            conversion
            for conversion in unit.conversions
            if conversion.target_unit_id != target_unit_id
        ) + (Conversion(target_unit_id=target_unit_id, factor=factor),)
        return self.repository.save_unit(replace(unit, conversions=conversions))

    def remove_conversion(
        self, owner_id: str, unit_id: str, target_unit_id: str
    ) -> MeasurementUnit:
        """Drop the direct conversion from a unit to a target unit, if present."""
        unit = self._require_unit(owner_id, unit_id)
        conversions = tuple(
            conversion
            for conversion in unit.conversions
            if conversion.target_unit_id != target_unit_id
        )
        if conversions == unit.conversions:
            return unit
        return self.repository.save_unit(replace(unit, conversions=conversions))

    def _require_unit(self, owner_id: str, unit_id: str) -> MeasurementUnit:
        unit = self.repository.get_unit(owner_id, unit_id)
        if unit is None:
            raise LookupError(f"Unknown unit {unit_id}")
        return unit


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Unit name must not be empty")
    return cleaned
