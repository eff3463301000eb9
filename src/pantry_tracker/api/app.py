"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from pantry_tracker.api.admin import router as admin_router
from pantry_tracker.api.models import (
    CompletePayload,
    ConversionPayload,
    EdgePayload,
    RequirementPayload,
    SessionProgressPayload,
    StockPayload,
    StockUpdatePayload,
    UnitPayload,
)
from pantry_tracker.app_logging import configure_logging
from pantry_tracker.containers import AppContainer
from pantry_tracker.domain.inventory import DeductionRequest, DeductionResult
from pantry_tracker.domain.recipes import CookSummary, IngredientCheck, Recipe

_UNPROCESSABLE_STATUS = 422


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Pantry tracker started: environment=%s", container.settings.environment
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(LookupError)
    async def not_found(request: Request, exc: LookupError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(ValueError)
    async def unprocessable(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=_UNPROCESSABLE_STATUS,
            content={"detail": str(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/owners/{owner_id}/inventory")
    async def list_inventory(owner_id: str, request: Request) -> dict[str, object]:
        """Return the owner's inventory records."""
        state_container: AppContainer = request.app.state.container
        inventory = state_container.inventory_service.list_inventory(owner_id)
        return {"inventory": inventory}

    @app.post("/owners/{owner_id}/inventory")
    async def add_stock(
        owner_id: str, payload: StockPayload, request: Request
    ) -> dict[str, object]:
        """Add stock, merging with an existing record in the same unit."""
        state_container: AppContainer = request.app.state.container
        inventory = state_container.inventory_service.add_stock(
            owner_id, payload.ingredient_id, payload.unit_id, payload.quantity
        )
        return {"inventory": inventory}

    @app.put("/owners/{owner_id}/inventory/{ingredient_id}/{unit_id}")
    async def set_stock(
        owner_id: str,
        ingredient_id: str,
        unit_id: str,
        payload: StockUpdatePayload,
        request: Request,
    ) -> dict[str, object]:
        """Overwrite a record's quantity, optionally moving it to another unit."""
        state_container: AppContainer = request.app.state.container
        inventory = state_container.inventory_service.set_stock(
            owner_id, ingredient_id, unit_id, payload.unit_id, payload.quantity
        )
        return {"inventory": inventory}

    @app.delete("/owners/{owner_id}/inventory/{ingredient_id}/{unit_id}")
    async def remove_stock(
        owner_id: str, ingredient_id: str, unit_id: str, request: Request
    ) -> dict[str, object]:
        """Remove an inventory record."""
        state_container: AppContainer = request.app.state.container
        inventory = state_container.inventory_service.remove_stock(
            owner_id, ingredient_id, unit_id
        )
        return {"inventory": inventory}

    @app.post("/owners/{owner_id}/availability")
    async def check_availability(
        owner_id: str, payload: RequirementPayload, request: Request
    ) -> dict[str, object]:
        """Report whether the owner's stock covers a requirement."""
        state_container: AppContainer = request.app.state.container
        units = state_container.catalog_service.list_units(owner_id)
        availability = state_container.inventory_service.check(
            owner_id, payload.ingredient_id, payload.unit_id, payload.quantity, units
        )
        return {
            "sufficient": availability.sufficient,
            "available": availability.available,
        }

    @app.post("/owners/{owner_id}/deductions")
    async def deduct(
        owner_id: str, payload: RequirementPayload, request: Request
    ) -> dict[str, object]:
        """Deduct a requirement from the owner's stock."""
        state_container: AppContainer = request.app.state.container
        units = state_container.catalog_service.list_units(owner_id)
        deduction = DeductionRequest(
            ingredient_id=payload.ingredient_id,
            required_unit_id=payload.unit_id,
            required_quantity=payload.quantity,
            owner_id=owner_id,
        )
        result = state_container.inventory_service.deduct(deduction, units)
        state_container.audit_service.record_deduction(deduction, result)
        return _deduction_payload(result)

    @app.post("/owners/{owner_id}/convert")
    async def convert(
        owner_id: str, payload: ConversionPayload, request: Request
    ) -> dict[str, object]:
        """Convert a quantity using a direct conversion from the owner's catalog."""
        state_container: AppContainer = request.app.state.container
        converted = state_container.catalog_service.convert(
            owner_id,
            payload.source_unit_id,
            payload.target_unit_id,
            payload.quantity,
        )
        if converted is None:
            raise HTTPException(
                status_code=_UNPROCESSABLE_STATUS,
                detail="No direct conversion between these units",
            )
        return {"quantity": converted, "unit_id": payload.target_unit_id}

    @app.get("/owners/{owner_id}/units")
    async def list_units(owner_id: str, request: Request) -> dict[str, object]:
        """Return the owner's unit catalog."""
        state_container: AppContainer = request.app.state.container
        return {"units": state_container.catalog_service.list_units(owner_id)}

    @app.post("/owners/{owner_id}/units")
    async def create_unit(
        owner_id: str, payload: UnitPayload, request: Request
    ) -> dict[str, object]:
        """Add a unit to the owner's catalog."""
        state_container: AppContainer = request.app.state.container
        unit = state_container.catalog_service.create_unit(owner_id, payload.name)
        return {"unit": unit}

    @app.patch("/owners/{owner_id}/units/{unit_id}")
    async def rename_unit(
        owner_id: str, unit_id: str, payload: UnitPayload, request: Request
    ) -> dict[str, object]:
        """Rename a unit."""
        state_container: AppContainer = request.app.state.container
        unit = state_container.catalog_service.rename_unit(
            owner_id, unit_id, payload.name
        )
        return {"unit": unit}

    @app.get("/owners/{owner_id}/units/{unit_id}/convertible")
    async def convertible_units(
        owner_id: str, unit_id: str, request: Request
    ) -> dict[str, object]:
        """List units the given unit converts to directly."""
        state_container: AppContainer = request.app.state.container
        units = state_container.catalog_service.convertible_units(owner_id, unit_id)
        return {"units": units}

    @app.post("/owners/{owner_id}/units/{unit_id}/conversions")
    async def add_conversion(
        owner_id: str, unit_id: str, payload: EdgePayload, request: Request
    ) -> dict[str, object]:
        """Add or replace the direct conversion from a unit to a target unit."""
        state_container: AppContainer = request.app.state.container
        unit = state_container.catalog_service.add_conversion(
            owner_id, unit_id, payload.target_unit_id, payload.factor
        )
        return {"unit": unit}

    @app.delete("/owners/{owner_id}/units/{unit_id}/conversions/{target_unit_id}")
    async def remove_conversion(
        owner_id: str, unit_id: str, target_unit_id: str, request: Request
    ) -> dict[str, object]:
        """Remove the direct conversion from a unit to a target unit."""
        state_container: AppContainer = request.app.state.container
        unit = state_container.catalog_service.remove_conversion(
            owner_id, unit_id, target_unit_id
        )
        return {"unit": unit}

    @app.get("/owners/{owner_id}/dashboard")
    async def dashboard(
        owner_id: str, request: Request, limit: int = 5
    ) -> dict[str, object]:
        """Return recipe counts and the most cooked and most viewed recipes."""
        state_container: AppContainer = request.app.state.container
        rankings = state_container.recipe_service.rankings(owner_id, limit=limit)
        return {
            "total_recipes": rankings.total_recipes,
            "most_cooked": [_recipe_summary(recipe) for recipe in rankings.most_cooked],
            "most_viewed": [_recipe_summary(recipe) for recipe in rankings.most_viewed],
        }

    @app.get("/owners/{owner_id}/recipes/{recipe_id}")
    async def view_recipe(
        owner_id: str, recipe_id: str, request: Request
    ) -> dict[str, object]:
        """Return a recipe and count the view."""
        state_container: AppContainer = request.app.state.container
        recipe = state_container.recipe_service.view_recipe(owner_id, recipe_id)
        return {"recipe": recipe}

    @app.post("/owners/{owner_id}/recipes/{recipe_id}/sessions")
    async def start_session(
        owner_id: str, recipe_id: str, request: Request
    ) -> dict[str, object]:
        """Start or resume a cooking session for a recipe."""
        state_container: AppContainer = request.app.state.container
        session = state_container.cooking_service.start_session(owner_id, recipe_id)
        return {"session": session}

    @app.patch("/sessions/{session_id}")
    async def update_session(
        session_id: str, payload: SessionProgressPayload, request: Request
    ) -> dict[str, object]:
        """Update serving size or checked items of a session."""
        state_container: AppContainer = request.app.state.container
        session = state_container.cooking_service.update_progress(
            session_id,
            serving_size=payload.serving_size,
            ingredients_checked=payload.ingredients_checked,
            steps_checked=payload.steps_checked,
        )
        return {"session": session}

    @app.get("/sessions/{session_id}/preview")
    async def preview_session(session_id: str, request: Request) -> dict[str, object]:
        """Show the scaled requirements and what the inventory covers."""
        state_container: AppContainer = request.app.state.container
        checks = state_container.cooking_service.preview(session_id)
        return {"items": [_check_payload(check) for check in checks]}

    @app.post("/sessions/{session_id}/complete")
    async def complete_session(
        session_id: str, request: Request, payload: CompletePayload | None = None
    ) -> dict[str, object]:
        """Complete a session and deduct its ingredients."""
        state_container: AppContainer = request.app.state.container
        options = payload or CompletePayload()
        summary = state_container.cooking_service.complete(
            session_id, require_all_checked=options.require_all_checked
        )
        return _summary_payload(summary)

    @app.post("/sessions/{session_id}/cancel")
    async def cancel_session(session_id: str, request: Request) -> dict[str, object]:
        """Cancel a session without deducting anything."""
        state_container: AppContainer = request.app.state.container
        session = state_container.cooking_service.cancel(session_id)
        return {"session": session}

    return app


def _deduction_payload(result: DeductionResult) -> dict[str, object]:
    return {
        "deducted": [
            {"unit_id": line.unit_id, "quantity": line.quantity}
            for line in result.deducted
        ],
        "remaining": result.remaining,
        "inventory": result.updated_inventory,
    }


def _check_payload(check: IngredientCheck) -> dict[str, object]:
    return {
        "ingredient_id": check.ingredient_id,
        "unit_id": check.unit_id,
        "required": check.required,
        "available": check.available,
        "sufficient": check.sufficient,
        "shortfall": check.shortfall,
    }


def _summary_payload(summary: CookSummary) -> dict[str, object]:
    return {
        "session_id": summary.session_id,
        "recipe_id": summary.recipe_id,
        "scale": summary.scale,
        "partial": summary.partial,
        "items": [
            {
                "ingredient_id": item.ingredient_id,
                "unit_id": item.unit_id,
                "required": item.required,
                "deducted": [
                    {"unit_id": line.unit_id, "quantity": line.quantity}
                    for line in item.deducted
                ],
                "remaining": item.remaining,
                "partial": item.partial,
            }
            for item in summary.items
        ],
    }


def _recipe_summary(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "name": recipe.name,
        "view_count": recipe.view_count,
        "cook_count": recipe.cook_count,
    }
