"""Supabase-backed cooking session repository."""

from dataclasses import dataclass

from supabase import Client

from pantry_tracker.domain.recipes import SESSION_ACTIVE, CookingSession
from pantry_tracker.services.cooking import CookingSessionRepository

_COLUMNS = (
    "id, recipe_id, user_id, ingredients_checked, steps_checked, serving_size, status"
)


@dataclass
class SupabaseCookingSessionRepository(CookingSessionRepository):
    """Supabase implementation for cooking sessions."""

    client: Client

    def create_session(
        self, owner_id: str, recipe_id: str, serving_size: int
    ) -> CookingSession:
        """Create a session row and return it."""
        response = (
            self.client.table("cooking_sessions")
            .insert(
                {
                    "recipe_id": recipe_id,
                    "user_id": owner_id,
                    "ingredients_checked": [],
                    "steps_checked": [],
                    "serving_size": serving_size,
                    "status": SESSION_ACTIVE,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create cooking session")
        return _parse_session(response.data[0])

    def get_session(self, session_id: str) -> CookingSession | None:
        """Return a session by id, if present."""
        response = (
            self.client.table("cooking_sessions")
            .select(_COLUMNS)
            .eq("id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def get_active_session(
        self, owner_id: str, recipe_id: str
    ) -> CookingSession | None:
        """Return the active session for an owner and recipe, if present."""
        response = (
            self.client.table("cooking_sessions")
            .select(_COLUMNS)
            .eq("user_id", owner_id)
            .eq("recipe_id", recipe_id)
            .eq("status", SESSION_ACTIVE)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def update_session(self, session: CookingSession) -> None:
        """Update session progress and status."""
        self.client.table("cooking_sessions").update(
            {
                "ingredients_checked": list(session.ingredients_checked),
                "steps_checked": list(session.steps_checked),
                "serving_size": session.serving_size,
                "status": session.status,
            }
        ).eq("id", session.id).execute()


def _parse_session(row: dict[str, object]) -> CookingSession:
    """Parse a cooking session row into a domain model."""
    return CookingSession(
        id=str(row["id"]),
        recipe_id=str(row["recipe_id"]),
        owner_id=str(row["user_id"]),
        serving_size=int(row["serving_size"]),
        status=str(row.get("status") or SESSION_ACTIVE),
        ingredients_checked=tuple(row.get("ingredients_checked") or ()),
        steps_checked=tuple(row.get("steps_checked") or ()),
    )
