"""Supabase implementation for measurement units."""

from dataclasses import dataclass

from supabase import Client

from pantry_tracker.domain.units import Conversion, MeasurementUnit
from pantry_tracker.services.catalog import UnitRepository


@dataclass
class SupabaseUnitRepository(UnitRepository):
    """Supabase-backed repository for an owner's unit catalog."""

    client: Client

    def list_units(self, owner_id: str) -> list[MeasurementUnit]:
        """Return all units for an owner, including their conversions."""
        response = (
            self.client.table("measurements")
            .select("*")
            .eq("user_id", owner_id)
            .order("name")
            .execute()
        )
        rows = response.data or []
        if not rows:
            return []

        conversions_response = (
            self.client.table("measurement_conversions")
            .select("*")
            .in_("from_measurement_id", [row["id"] for row in rows])
            .execute()
        )
        conversion_rows = conversions_response.data or []
        return [_parse_unit(row, conversion_rows) for row in rows]

    def get_unit(self, owner_id: str, unit_id: str) -> MeasurementUnit | None:
        """Return a unit by id, if present."""
        response = (
            self.client.table("measurements")
            .select("*")
            .eq("user_id", owner_id)
            .eq("id", unit_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        conversions_response = (
            self.client.table("measurement_conversions")
            .select("*")
            .eq("from_measurement_id", unit_id)
            .execute()
        )
        return _parse_unit(response.data[0], conversions_response.data or [])

    def create_unit(self, owner_id: str, name: str) -> MeasurementUnit:
        """Insert a measurement row and return the stored unit."""
        response = (
            self.client.table("measurements")
            .insert({"name": name, "user_id": owner_id})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create measurement")
        return _parse_unit(response.data[0], [])

    def save_unit(self, unit: MeasurementUnit) -> MeasurementUnit:
        """Upsert a unit and replace its conversion rows."""
        response = (
            self.client.table("measurements")
            .upsert({"id": unit.id, "name": unit.name, "user_id": unit.owner_id})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save measurement")

        self.client.table("measurement_conversions").delete().eq(
            "from_measurement_id", unit.id
        ).execute()
        if unit.conversions:
            self.client.table("measurement_conversions").insert(
                [
                    {
                        "from_measurement_id": unit.id,
                        "to_measurement_id": conversion.target_unit_id,
                        "factor": conversion.factor,
                    }
                    for conversion in unit.conversions
                ]
            ).execute()
        return unit


def _parse_unit(
    row: dict[str, object], conversion_rows: list[dict[str, object]]
) -> MeasurementUnit:
    """Parse a measurement row and its conversion rows into a domain model."""
    unit_id = str(row["id"])
    conversions = tuple(
        Conversion(
            target_unit_id=str(conversion["to_measurement_id"]),
            factor=float(conversion["factor"]),
        )
        for conversion in conversion_rows
        if str(conversion["from_measurement_id"]) == unit_id
    )
    owner = row.get("user_id")
    return MeasurementUnit(
        id=unit_id,
        name=str(row.get("name", "")),
        conversions=conversions,
        owner_id=str(owner) if owner is not None else None,
    )
