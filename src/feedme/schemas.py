"""Pydantic schemas for recipe rows handed over by the storage layer."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class RecipeIngredientRow(BaseModel):
    """A stored ``recipe_ingredients`` row joined with its ingredient name."""

    ingredient_id: int | str
    ingredient_name: str
    quantity_unit: str = ""
    notes: str | None = None

    @field_validator("ingredient_name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> str:
        """Names are display text only; trim them."""
        return str(v).strip() if v is not None else ""

    @field_validator("quantity_unit", mode="before")
    @classmethod
    def coerce_quantity_unit(cls, v: Any) -> str:
        """Keep the stored text verbatim, only turning NULL into an empty string."""
        if v is None:
            return ""
        return str(v)

    @field_validator("notes", mode="before")
    @classmethod
    def blank_notes_to_none(cls, v: Any) -> str | None:
        """Treat empty notes as missing."""
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class RecipeSelection(BaseModel):
    """A recipe picked for the grocery list, with its ingredient rows."""

    recipe_id: int | str
    rows: list[RecipeIngredientRow] = Field(default_factory=list)
    multiplier: float = Field(default=1.0, ge=0, allow_inf_nan=False)
