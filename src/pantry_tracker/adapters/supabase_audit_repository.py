"""Supabase repository for the inventory audit trail."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from pantry_tracker.domain.audit import AuditEvent
from pantry_tracker.services.audit import AuditRepository


@dataclass
class SupabaseAuditRepository(AuditRepository):
    """Stores audit events in the `audit_events` table."""

    client: Client

    def create_event(self, event: AuditEvent) -> None:
        self.client.table("audit_events").insert(
            {
                "user_id": event.owner_id,
                "entity_type": event.entity_type,
                "entity_id": event.entity_id,
                "event_type": event.event_type,
                "before_json": event.before,
                "after_json": event.after,
            }
        ).execute()

    def list_events(
        self,
        owner_id: str,
        event_type: str,
        entity_id: str | None,
        limit: int,
    ) -> list[AuditEvent]:
        query = (
            self.client.table("audit_events")
            .select("*")
            .eq("user_id", owner_id)
            .eq("event_type", event_type)
        )
        if entity_id is not None:
            query = query.eq("entity_id", entity_id)
        response = query.order("created_at", desc=True).limit(limit).execute()
        return [_parse_event(row) for row in response.data or []]


def _parse_event(row: dict[str, object]) -> AuditEvent:
    created_raw = row.get("created_at")
    return AuditEvent(
        owner_id=str(row["user_id"]),
        entity_type=str(row["entity_type"]),
        entity_id=str(row["entity_id"]),
        event_type=str(row["event_type"]),
        before=row.get("before_json"),  # type: ignore[arg-type]
        after=row.get("after_json"),  # type: ignore[arg-type]
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )
