"""Domain models for meal logging."""

import datetime as dt
from dataclasses import dataclass
from enum import StrEnum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class MealType(StrEnum):
    """Slot of the day a meal belongs to."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"


class MacroNutrients(BaseModel):
    """Calories and macronutrient grams."""

    model_config = ConfigDict(frozen=True)

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class MealLog(BaseModel):
    """A single logged meal. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    timestamp: int = Field(description="Creation instant in epoch milliseconds")
    macros: MacroNutrients
    image: str | None = None
    notes: str | None = None
    type: MealType


class DailyLog(BaseModel):
    """All meals logged by one account on one calendar date."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    meals: list[MealLog] = Field(default_factory=list)
    weight: float | None = None

    @model_validator(mode="after")
    def _unique_meal_ids(self) -> "DailyLog":
        seen: set[str] = set()
        for meal in self.meals:
            if meal.id in seen:
                raise ValueError(f"Duplicate meal id: {meal.id}")
            seen.add(meal.id)
        return self

    def with_meal(self, meal: MealLog) -> "DailyLog":
        """Return a copy of the log with the meal appended."""
        return DailyLog(date=self.date, meals=[*self.meals, meal], weight=self.weight)

    def to_document(self) -> dict[str, object]:
        """Return the JSON document stored for this log."""
        return self.model_dump(mode="json", exclude_none=True)


@dataclass(frozen=True)
class DailySummary:
    """Daily totals compared against the profile targets."""

    date: dt.date
    calories: float
    protein: float
    carbs: float
    fat: float
    target_calories: int
    target_protein: int
    remaining_calories: float
    progress_percent: float
    meal_count: int
