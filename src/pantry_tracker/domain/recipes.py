"""Domain models for recipes and cooking sessions."""

from dataclasses import dataclass

from pantry_tracker.domain.inventory import DeductedLine

SESSION_ACTIVE = "active"
SESSION_COMPLETED = "completed"
SESSION_CANCELLED = "cancelled"


@dataclass(frozen=True)
class RecipeIngredient:
    """One ingredient line of a recipe, for the recipe's base servings."""

    ingredient_id: str
    quantity: float
    unit_id: str


@dataclass(frozen=True)
class Recipe:
    """Represents a stored recipe."""

    id: str
    owner_id: str
    name: str
    servings: int
    ingredients: tuple[RecipeIngredient, ...]
    instructions: tuple[str, ...]
    description: str = ""
    view_count: int = 0
    cook_count: int = 0


@dataclass(frozen=True)
class CookingSession:
    """Progress of an owner cooking a recipe."""

    id: str
    recipe_id: str
    owner_id: str
    serving_size: int
    status: str = SESSION_ACTIVE
    ingredients_checked: tuple[int, ...] = ()
    steps_checked: tuple[int, ...] = ()


@dataclass(frozen=True)
class IngredientCheck:
    """Availability of one scaled recipe line."""

    ingredient_id: str
    unit_id: str
    required: float
    available: float
    sufficient: bool

    @property
    def shortfall(self) -> float:
        return max(self.required - self.available, 0.0)


@dataclass(frozen=True)
class IngredientDeduction:
    """What was taken from inventory for one scaled recipe line."""

    ingredient_id: str
    unit_id: str
    required: float
    deducted: list[DeductedLine]
    remaining: float
    partial: bool


@dataclass(frozen=True)
class CookSummary:
    """Result of completing a cooking session."""

    session_id: str
    recipe_id: str
    scale: float
    items: list[IngredientDeduction]

    @property
    def partial(self) -> bool:
        return any(item.partial for item in self.items)


@dataclass(frozen=True)
class RecipeRankings:
    """An owner's recipes ordered by popularity."""

    total_recipes: int
    most_cooked: list[Recipe]
    most_viewed: list[Recipe]
