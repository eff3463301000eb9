"""Supabase-backed recipe repository."""

from dataclasses import dataclass

from supabase import Client

from pantry_tracker.domain.recipes import Recipe, RecipeIngredient
from pantry_tracker.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipes."""

    client: Client

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        """Return an owner's recipes with their ingredient lines and steps."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("user_id", owner_id)
            .order("name")
            .execute()
        )
        rows = response.data or []
        if not rows:
            return []

        recipe_ids = [row["id"] for row in rows]
        ingredient_rows = (
            self.client.table("recipe_ingredients")
            .select("recipe_id, ingredient_id, quantity, measurement_id")
            .in_("recipe_id", recipe_ids)
            .execute()
        ).data or []
        instruction_rows = (
            self.client.table("recipe_instructions")
            .select("recipe_id, step_number, instruction")
            .in_("recipe_id", recipe_ids)
            .order("step_number")
            .execute()
        ).data or []
        return [
            _parse_recipe(
                row,
                [line for line in ingredient_rows if line["recipe_id"] == row["id"]],
                [step for step in instruction_rows if step["recipe_id"] == row["id"]],
            )
            for row in rows
        ]

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a recipe with its ingredient lines and ordered steps."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None

        ingredients_response = (
            self.client.table("recipe_ingredients")
            .select("ingredient_id, quantity, measurement_id")
            .eq("recipe_id", recipe_id)
            .execute()
        )
        instructions_response = (
            self.client.table("recipe_instructions")
            .select("step_number, instruction")
            .eq("recipe_id", recipe_id)
            .order("step_number")
            .execute()
        )
        return _parse_recipe(
            response.data[0],
            ingredients_response.data or [],
            instructions_response.data or [],
        )

    def increment_view_count(self, recipe_id: str) -> None:
        """Increment the view counter for a recipe."""
        self._increment(recipe_id, "view_count")

    def increment_cook_count(self, recipe_id: str) -> None:
        """Increment the cook counter for a recipe."""
        self._increment(recipe_id, "cook_count")

    def _increment(self, recipe_id: str, column: str) -> None:
        response = (
            self.client.table("recipes")
            .select(column)
            .eq("id", recipe_id)
            .limit(1)
            .execute()
        )
        current = 0
        if response.data:
            current = int(response.data[0].get(column) or 0)
        self.client.table("recipes").update({column: current + 1}).eq(
            "id", recipe_id
        ).execute()


def _parse_recipe(
    row: dict[str, object],
    ingredient_rows: list[dict[str, object]],
    instruction_rows: list[dict[str, object]],
) -> Recipe:
    """Build a recipe from its row, ingredient lines and instruction steps."""
    steps = sorted(instruction_rows, key=lambda step: int(step.get("step_number", 0)))
    return Recipe(
        id=str(row["id"]),
        owner_id=str(row["user_id"]),
        name=str(row.get("name", "")),
        description=str(row.get("description") or ""),
        servings=int(row.get("servings") or 1),
        ingredients=tuple(
            RecipeIngredient(
                ingredient_id=str(line["ingredient_id"]),
                quantity=float(line["quantity"]),
                unit_id=str(line["measurement_id"]),
            )
            for line in ingredient_rows
        ),
        instructions=tuple(str(step["instruction"]) for step in steps),
        view_count=int(row.get("view_count") or 0),
        cook_count=int(row.get("cook_count") or 0),
    )
