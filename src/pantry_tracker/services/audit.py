"""Audit trail for inventory deductions."""

from dataclasses import dataclass
from typing import Protocol

from pantry_tracker.domain.audit import AuditEvent
from pantry_tracker.domain.inventory import DeductionRequest, DeductionResult

DEDUCTION_EVENT = "inventory.deducted"
INGREDIENT_ENTITY = "ingredient"
DEFAULT_HISTORY_SIZE = 50


class AuditRepository(Protocol):
    """Persistence interface for audit events."""

    def create_event(self, event: AuditEvent) -> None:
        """Store an audit event."""

    def list_events(
        self,
        owner_id: str,
        event_type: str,
        entity_id: str | None,
        limit: int,
    ) -> list[AuditEvent]:
        """Return an owner's events of one type, newest first."""


@dataclass
class AuditService:
    """Records which inventory lines a deduction consumed."""

    repository: AuditRepository

    def record_deduction(
        self,
        request: DeductionRequest,
        result: DeductionResult,
        session_id: str | None = None,
    ) -> None:
        """Store the requirement and the lines drawn for it.

        Deductions that consumed nothing leave no trace.
        """
        if not result.deducted:
            return
        after: dict[str, object] = {
            "deducted": [
                {"unit_id": line.unit_id, "quantity": line.quantity}
                for line in result.deducted
            ],
            "remaining": result.remaining,
        }
        if session_id is not None:
            after["session_id"] = session_id
        self.repository.create_event(
            AuditEvent(
                owner_id=request.owner_id,
                entity_type=INGREDIENT_ENTITY,
                entity_id=request.ingredient_id,
                event_type=DEDUCTION_EVENT,
                before={
                    "required": request.required_quantity,
                    "unit_id": request.required_unit_id,
                },
                after=after,
            )
        )

    def deduction_history(
        self,
        owner_id: str,
        ingredient_id: str | None = None,
        limit: int = DEFAULT_HISTORY_SIZE,
    ) -> list[AuditEvent]:
        """Return recent deductions for an owner, optionally for one ingredient."""
        if limit <= 0:
            raise ValueError("History size must be positive")
        return self.repository.list_events(
            owner_id, DEDUCTION_EVENT, ingredient_id, limit
        )
