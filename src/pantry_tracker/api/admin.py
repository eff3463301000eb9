"""Operator endpoints for inspecting an owner's pantry."""

from __future__ import annotations

import hmac
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status

from pantry_tracker.services.audit import DEFAULT_HISTORY_SIZE

if TYPE_CHECKING:
    from pantry_tracker.containers import AppContainer


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_admin(
    request: Request, x_admin_token: str | None = Header(default=None)
) -> None:
    """Reject requests whose X-Admin-Token does not match the configured token."""
    expected = _container(request).settings.admin_token
    if not x_admin_token or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


router = APIRouter(
    prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)]
)


@router.get("/health")
async def admin_health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/owners/{owner_id}/snapshot")
async def owner_snapshot(owner_id: str, request: Request) -> dict[str, object]:
    """Return the unit catalog and inventory the engine would see for an owner."""
    container = _container(request)
    return {
        "units": container.catalog_service.list_units(owner_id),
        "inventory": container.inventory_service.list_inventory(owner_id),
    }


@router.get("/owners/{owner_id}/deductions")
async def deduction_history(
    owner_id: str,
    request: Request,
    ingredient_id: str | None = None,
    limit: int = Query(default=DEFAULT_HISTORY_SIZE, gt=0, le=500),
) -> dict[str, object]:
    """Return recent inventory deductions, newest first."""
    events = _container(request).audit_service.deduction_history(
        owner_id, ingredient_id=ingredient_id, limit=limit
    )
    return {
        "events": [
            {
                "ingredient_id": event.entity_id,
                "before": event.before,
                "after": event.after,
                "created_at": event.created_at,
            }
            for event in events
        ]
    }
