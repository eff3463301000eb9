"""Domain models for on-hand inventory and deductions."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class InventoryRecord:
    """Quantity of one ingredient held by an owner in a single unit."""

    owner_id: str
    ingredient_id: str
    unit_id: str
    quantity: float


@dataclass(frozen=True)
class DeductionRequest:
    """A request to consume an ingredient from an owner's inventory."""

    ingredient_id: str
    required_unit_id: str
    required_quantity: float
    owner_id: str


@dataclass(frozen=True)
class DeductedLine:
    """Amount taken from one inventory record, in that record's unit."""

    unit_id: str
    quantity: float


@dataclass(frozen=True)
class DeductionResult:
    """Outcome of a deduction pass."""

    updated_inventory: list[InventoryRecord]
    deducted: list[DeductedLine] = field(default_factory=list)
    remaining: float = 0.0


@dataclass(frozen=True)
class Availability:
    """Whether enough stock exists, and how much, in the required unit."""

    sufficient: bool
    available: float
