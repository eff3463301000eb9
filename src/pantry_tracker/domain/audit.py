"""Domain model for the inventory audit trail."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AuditEvent:
    """A recorded change to an owner's data."""

    owner_id: str
    entity_type: str
    entity_id: str
    event_type: str
    before: dict[str, object] | None = None
    after: dict[str, object] | None = None
    created_at: datetime | None = None
