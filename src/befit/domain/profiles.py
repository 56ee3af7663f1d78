"""Profile domain models."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Gender(StrEnum):
    """Gender options used by the BMR formula."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class Goal(StrEnum):
    """Weight goal selected during onboarding."""

    LOSE_WEIGHT = "Lose Weight"
    MAINTAIN = "Maintain"
    GAIN_MUSCLE = "Gain Muscle"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "Sedentary"
    LIGHTLY_ACTIVE = "Lightly Active"
    MODERATELY_ACTIVE = "Moderately Active"
    VERY_ACTIVE = "Very Active"


class ProfileDraft(BaseModel):
    """Profile fields a user can edit; targets are never accepted here."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    name: str | None = None
    age: int = Field(gt=0)
    gender: Gender
    height: float = Field(gt=0, description="Height in cm")
    weight: float = Field(gt=0, description="Weight in kg")
    goal: Goal
    activity_level: ActivityLevel
    dietary_restrictions: str = "None"


class UserProfile(BaseModel):
    """Stored profile with derived nutrition targets."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    name: str
    age: int = Field(gt=0)
    gender: Gender
    height: float = Field(gt=0)
    weight: float = Field(gt=0)
    goal: Goal
    activity_level: ActivityLevel
    target_calories: int
    target_protein: int
    dietary_restrictions: str = "None"

    def to_document(self) -> dict[str, object]:
        """Return the camelCase JSON document stored for this profile."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class NutritionTargets:
    """Daily calorie and protein targets."""

    calories: int
    protein: int


@dataclass(frozen=True)
class MealTarget:
    """Calorie and protein sub-target for one meal."""

    calories: int
    protein: int


@dataclass(frozen=True)
class MealPlanTargets:
    """Per-meal sub-targets used when requesting a meal plan."""

    breakfast: MealTarget
    lunch: MealTarget
    dinner: MealTarget
