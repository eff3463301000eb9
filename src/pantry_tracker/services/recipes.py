"""Recipe lookups, view tracking and popularity rankings."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from pantry_tracker.domain.recipes import Recipe, RecipeRankings

_logger = logging.getLogger(__name__)

DEFAULT_RANKING_SIZE = 5


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def list_recipes(self, owner_id: str) -> list[Recipe]:
        """Return all recipes for an owner."""

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a recipe with its ingredients and instructions, if present."""

    def increment_view_count(self, recipe_id: str) -> None:
        """Increment the number of times a recipe was opened."""

    def increment_cook_count(self, recipe_id: str) -> None:
        """Increment the number of times a recipe was cooked."""


@dataclass
class RecipeService:
    """Application service for reading recipes."""

    repository: RecipeRepository

    def require_recipe(self, owner_id: str, recipe_id: str) -> Recipe:
        """Return the owner's recipe or raise LookupError."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None or recipe.owner_id != owner_id:
            raise LookupError(f"Unknown recipe {recipe_id}")
        return recipe

    def view_recipe(self, owner_id: str, recipe_id: str) -> Recipe:
        """Return a recipe and count the view."""
        recipe = self.require_recipe(owner_id, recipe_id)
        self.repository.increment_view_count(recipe.id)
        _logger.info("Recipe viewed: owner=%s recipe=%s", owner_id, recipe.id)
        return replace(recipe, view_count=recipe.view_count + 1)

    def rankings(
        self, owner_id: str, limit: int = DEFAULT_RANKING_SIZE
    ) -> RecipeRankings:
        """Rank the owner's recipes by cook and view counts.

        Ties keep the repository's order.
        """
        if limit <= 0:
            raise ValueError("Ranking size must be positive")
        recipes = self.repository.list_recipes(owner_id)
        most_cooked = sorted(recipes, key=lambda item: item.cook_count, reverse=True)
        most_viewed = sorted(recipes, key=lambda item: item.view_count, reverse=True)
        return RecipeRankings(
            total_recipes=len(recipes),
            most_cooked=most_cooked[:limit],
            most_viewed=most_viewed[:limit],
        )

    def record_cook(self, recipe_id: str) -> None:
        """Count a completed cooking session for a recipe."""
        self.repository.increment_cook_count(recipe_id)
