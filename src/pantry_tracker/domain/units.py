"""Domain models for measurement units and their conversions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Conversion:
    """A direct conversion edge from the owning unit to a target unit.

    ``quantity_in_target = quantity_in_source * factor``.
    """

    target_unit_id: str
    factor: float


@dataclass(frozen=True)
class MeasurementUnit:
    """Represents a measurement unit in an owner's catalog."""

    id: str
    name: str
    conversions: tuple[Conversion, ...] = ()
    owner_id: str | None = None

    def find_conversion(self, target_unit_id: str) -> Conversion | None:
        """Return the first direct edge to the target unit, if any."""
        for conversion in self.conversions:
            if conversion.target_unit_id == target_unit_id:
                return conversion
        return None
