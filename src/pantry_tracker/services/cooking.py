"""Cooking sessions: scaling recipes and deducting what was used."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from pantry_tracker.domain.inventory import DeductionRequest
from pantry_tracker.domain.recipes import (
    SESSION_ACTIVE,
    SESSION_CANCELLED,
    SESSION_COMPLETED,
    CookingSession,
    CookSummary,
    IngredientCheck,
    IngredientDeduction,
    Recipe,
)
from pantry_tracker.services.audit import AuditService
from pantry_tracker.services.catalog import CatalogService
from pantry_tracker.services.conversions import check_availability
from pantry_tracker.services.inventory import InventoryService
from pantry_tracker.services.recipes import RecipeService

_logger = logging.getLogger(__name__)


class CookingSessionRepository(Protocol):
    """Persistence interface for cooking sessions."""

    def create_session(
        self, owner_id: str, recipe_id: str, serving_size: int
    ) -> CookingSession:
        """Create an active session and return it."""

    def get_session(self, session_id: str) -> CookingSession | None:
        """Return a session by id, if present."""

    def get_active_session(
        self, owner_id: str, recipe_id: str
    ) -> CookingSession | None:
        """Return the active session for an owner and recipe, if present."""

    def update_session(self, session: CookingSession) -> None:
        """Persist session progress and status."""


@dataclass
class CookingService:
    """Orchestrates a cooking session from start to inventory deduction."""

    recipe_service: RecipeService
    session_repository: CookingSessionRepository
    catalog_service: CatalogService
    inventory_service: InventoryService
    audit_service: AuditService

    def start_session(self, owner_id: str, recipe_id: str) -> CookingSession:
        """Resume the active session for a recipe or start a new one."""
        recipe = self.recipe_service.require_recipe(owner_id, recipe_id)
        active = self.session_repository.get_active_session(owner_id, recipe_id)
        if active is not None:
            return active
        return self.session_repository.create_session(
            owner_id=owner_id, recipe_id=recipe.id, serving_size=recipe.servings
        )

    def update_progress(
        self,
        session_id: str,
        serving_size: int | None = None,
        ingredients_checked: list[int] | None = None,
        steps_checked: list[int] | None = None,
    ) -> CookingSession:
        """Update serving size and checked items of an active session."""
        session = self._require_active(session_id)
        recipe = self._session_recipe(session)
        updated = session
        if serving_size is not None:
            if serving_size <= 0:
                raise ValueError("Serving size must be positive")
            updated = replace(updated, serving_size=serving_size)
        if ingredients_checked is not None:
            updated = replace(
                updated,
                ingredients_checked=_normalize_indices(
                    ingredients_checked, len(recipe.ingredients), "ingredient"
                ),
            )
        if steps_checked is not None:
            updated = replace(
                updated,
                steps_checked=_normalize_indices(
                    steps_checked, len(recipe.instructions), "step"
                ),
            )
        self.session_repository.update_session(updated)
        return updated

    def preview(self, session_id: str) -> list[IngredientCheck]:
        """Check every scaled recipe line against the owner's inventory."""
        session = self._require_session(session_id)
        recipe = self._session_recipe(session)
        units = self.catalog_service.list_units(session.owner_id)
        records = self.inventory_service.list_inventory(session.owner_id)
        scale = recipe_scale(recipe, session)

        checks = []
        for line in recipe.ingredients:
            required = line.quantity * scale
            availability = check_availability(
                line.ingredient_id, line.unit_id, required, records, units
            )
            checks.append(
                IngredientCheck(
                    ingredient_id=line.ingredient_id,
                    unit_id=line.unit_id,
                    required=required,
                    available=availability.available,
                    sufficient=availability.sufficient,
                )
            )
        return checks

    def complete(
        self, session_id: str, require_all_checked: bool = True
    ) -> CookSummary:
        """Finish a session and deduct the scaled ingredients from inventory.

        Lines that cannot be fully covered are deducted as far as possible and
        flagged as partial in the summary.
        """
        session = self._require_active(session_id)
        recipe = self._session_recipe(session)
        if require_all_checked and not _all_checked(recipe, session):
            raise ValueError("All ingredients and steps must be checked")

        owner_id = session.owner_id
        units = self.catalog_service.list_units(owner_id)
        records = self.inventory_service.list_inventory(owner_id)
        scale = recipe_scale(recipe, session)
        epsilon = self.inventory_service.epsilon

        items: list[IngredientDeduction] = []
        changed = False
        for line in recipe.ingredients:
            required = line.quantity * scale
            request = DeductionRequest(
                ingredient_id=line.ingredient_id,
                required_unit_id=line.unit_id,
                required_quantity=required,
                owner_id=owner_id,
            )
            result = self.inventory_service.deduct_from(request, records, units)
            records = result.updated_inventory
            partial = result.remaining > epsilon
            items.append(
                IngredientDeduction(
                    ingredient_id=line.ingredient_id,
                    unit_id=line.unit_id,
                    required=required,
                    deducted=result.deducted,
                    remaining=result.remaining,
                    partial=partial,
                )
            )
            if partial:
                _logger.warning(
                    "Partial deduction: session=%s ingredient=%s remaining=%s %s",
                    session.id,
                    line.ingredient_id,
                    result.remaining,
                    line.unit_id,
                )
            if result.deducted:
                changed = True
            self.audit_service.record_deduction(request, result, session.id)

        if changed:
            self.inventory_service.save_inventory(owner_id, records)
        self.session_repository.update_session(
            replace(session, status=SESSION_COMPLETED)
        )
        self.recipe_service.record_cook(recipe.id)
        return CookSummary(
            session_id=session.id, recipe_id=recipe.id, scale=scale, items=items
        )

    def cancel(self, session_id: str) -> CookingSession:
        """Cancel an active session without touching inventory."""
        session = self._require_active(session_id)
        cancelled = replace(session, status=SESSION_CANCELLED)
        self.session_repository.update_session(cancelled)
        return cancelled

    def _session_recipe(self, session: CookingSession) -> Recipe:
        return self.recipe_service.require_recipe(session.owner_id, session.recipe_id)

    def _require_session(self, session_id: str) -> CookingSession:
        session = self.session_repository.get_session(session_id)
        if session is None:
            raise LookupError(f"Unknown cooking session {session_id}")
        return session

    def _require_active(self, session_id: str) -> CookingSession:
        session = self._require_session(session_id)
        if session.status != SESSION_ACTIVE:
            raise ValueError(f"Cooking session is {session.status}")
        return session


def recipe_scale(recipe: Recipe, session: CookingSession) -> float:
    """Return the serving-size factor applied to every recipe line."""
    if recipe.servings <= 0:
        return 1.0
    return session.serving_size / recipe.servings


def _all_checked(recipe: Recipe, session: CookingSession) -> bool:
    return len(set(session.ingredients_checked)) >= len(recipe.ingredients) and len(
        set(session.steps_checked)
    ) >= len(recipe.instructions)


def _normalize_indices(indices: list[int], size: int, label: str) -> tuple[int, ...]:
    """Validate checked indices and return them sorted without duplicates."""
    for index in indices:
        if index < 0 or index >= size:
            raise ValueError(f"Unknown {label} index {index}")
    return tuple(sorted(set(indices)))
