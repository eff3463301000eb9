"""Supabase-backed inventory repository."""

from dataclasses import dataclass

from supabase import Client

from pantry_tracker.domain.inventory import InventoryRecord
from pantry_tracker.services.inventory import InventoryRepository


@dataclass
class SupabaseInventoryRepository(InventoryRepository):
    """Supabase implementation for inventory records."""

    client: Client

    def list_inventory(self, owner_id: str) -> list[InventoryRecord]:
        """Return all inventory records for an owner."""
        response = (
            self.client.table("inventory")
            .select("user_id, ingredient_id, measurement_id, quantity")
            .eq("user_id", owner_id)
            .execute()
        )
        return [
            InventoryRecord(
                owner_id=str(row["user_id"]),
                ingredient_id=str(row["ingredient_id"]),
                unit_id=str(row["measurement_id"]),
                quantity=float(row["quantity"]),
            )
            for row in response.data or []
        ]

    def replace_inventory(self, owner_id: str, records: list[InventoryRecord]) -> None:
        """Delete the owner's rows and insert the given records."""
        self.client.table("inventory").delete().eq("user_id", owner_id).execute()
        if not records:
            return
        response = (
            self.client.table("inventory")
            .insert(
                [
                    {
                        "user_id": owner_id,
                        "ingredient_id": record.ingredient_id,
                        "measurement_id": record.unit_id,
                        "quantity": record.quantity,
                    }
                    for record in records
                ]
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save inventory")
