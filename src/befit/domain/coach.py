"""Models for structured coach responses."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from befit.domain.meals import MacroNutrients, MealType


class MealEstimate(BaseModel):
    """Estimated name and macros for a described or photographed meal."""

    name: str
    macros: MacroNutrients
    advice: str | None = None


class PlannedMeal(BaseModel):
    """A generated recipe option within a meal plan."""

    name: str
    description: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)
    ingredients: list[str] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)


class PlanSlot(StrEnum):
    """Meal plan sections."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"

    @property
    def meal_type(self) -> MealType:
        """Return the meal type a recipe from this slot is logged as."""
        return MealType(self.value.capitalize())


class MealPlan(BaseModel):
    """Three recipe options for each main meal."""

    breakfast: list[PlannedMeal] = Field(default_factory=list)
    lunch: list[PlannedMeal] = Field(default_factory=list)
    dinner: list[PlannedMeal] = Field(default_factory=list)


class DietAdjustment(BaseModel):
    """Advice on which macro to prioritise in the next meal."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    missing_macros: str = Field(alias="missingMacros")
    suggestion: str


class ChatTurn(BaseModel):
    """One message in the coach conversation."""

    role: Literal["user", "model"]
    text: str
