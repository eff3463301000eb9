"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from pantry_tracker.adapters.supabase_audit_repository import SupabaseAuditRepository
from pantry_tracker.adapters.supabase_cooking_session_repository import (
    SupabaseCookingSessionRepository,
)
from pantry_tracker.adapters.supabase_inventory_repository import (
    SupabaseInventoryRepository,
)
from pantry_tracker.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from pantry_tracker.adapters.supabase_unit_repository import SupabaseUnitRepository
from pantry_tracker.config import Settings
from pantry_tracker.services.audit import AuditService
from pantry_tracker.services.catalog import CatalogService
from pantry_tracker.services.cooking import CookingService
from pantry_tracker.services.inventory import InventoryService
from pantry_tracker.services.recipes import RecipeService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_service: CatalogService
    inventory_service: InventoryService
    audit_service: AuditService
    recipe_service: RecipeService
    cooking_service: CookingService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_service = CatalogService(SupabaseUnitRepository(supabase_client))
    inventory_service = InventoryService(
        SupabaseInventoryRepository(supabase_client),
        epsilon=resolved_settings.deduction_epsilon,
    )
    audit_service = AuditService(SupabaseAuditRepository(supabase_client))
    recipe_service = RecipeService(SupabaseRecipeRepository(supabase_client))
    cooking_service = CookingService(
        recipe_service=recipe_service,
        session_repository=SupabaseCookingSessionRepository(supabase_client),
        catalog_service=catalog_service,
        inventory_service=inventory_service,
        audit_service=audit_service,
    )
    return AppContainer(
        settings=resolved_settings,
        catalog_service=catalog_service,
        inventory_service=inventory_service,
        audit_service=audit_service,
        recipe_service=recipe_service,
        cooking_service=cooking_service,
    )
