"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field


class StockPayload(BaseModel):
    """Stock to add for an ingredient in a unit."""

    model_config = ConfigDict(allow_inf_nan=False)

    ingredient_id: str
    unit_id: str
    quantity: float = Field(gt=0)


class StockUpdatePayload(BaseModel):
    """New quantity and unit for an existing inventory record."""

    model_config = ConfigDict(allow_inf_nan=False)

    unit_id: str
    quantity: float = Field(gt=0)


class RequirementPayload(BaseModel):
    """Quantity of an ingredient required in a unit."""

    model_config = ConfigDict(allow_inf_nan=False)

    ingredient_id: str
    unit_id: str
    quantity: float


class ConversionPayload(BaseModel):
    """Quantity to convert between two units."""

    model_config = ConfigDict(allow_inf_nan=False)

    source_unit_id: str
    target_unit_id: str
    quantity: float


class UnitPayload(BaseModel):
    """Name of a measurement unit."""

    name: str = Field(min_length=1)


class EdgePayload(BaseModel):
    """Direct conversion factor from a unit to a target unit."""

    model_config = ConfigDict(allow_inf_nan=False)

    target_unit_id: str
    factor: float


class SessionProgressPayload(BaseModel):
    """Partial update of a cooking session."""

    serving_size: int | None = Field(default=None, gt=0)
    ingredients_checked: list[int] | None = None
    steps_checked: list[int] | None = None


class CompletePayload(BaseModel):
    """Options for completing a cooking session."""

    require_all_checked: bool = True
