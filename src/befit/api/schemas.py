"""Pydantic models for API requests and responses."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from befit.domain.coach import ChatTurn, PlannedMeal, PlanSlot
from befit.domain.meals import MacroNutrients, MealType

# Keys on the HTTP surface are camelCase, like the stored documents.
_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(BaseModel):
    """Registration payload."""

    model_config = _CAMEL

    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name must not be blank")
        return value


class LoginRequest(BaseModel):
    """Login payload."""

    model_config = _CAMEL

    email: str
    password: str


class SessionResponse(BaseModel):
    """Issued session token."""

    model_config = _CAMEL

    token: str
    email: str
    expires_at: dt.datetime
    name: str = ""


class DashboardResponse(BaseModel):
    """Today's totals against the profile targets."""

    model_config = _CAMEL

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


class QuickLogRequest(BaseModel):
    """A reviewed meal estimate to append to today's log."""

    model_config = _CAMEL

    name: str = Field(min_length=1)
    macros: MacroNutrients
    type: MealType = MealType.LUNCH
    image: str | None = None
    notes: str | None = None


class AnalyzeMealRequest(BaseModel):
    """Meal to analyze, given as text or as a base64 image."""

    model_config = _CAMEL

    description: str | None = None
    image: str | None = Field(
        default=None, description="Base64 image, raw or as a data URL"
    )

    @model_validator(mode="after")
    def _one_input(self) -> "AnalyzeMealRequest":
        has_text = bool(self.description and self.description.strip())
        if has_text == bool(self.image):
            raise ValueError("Provide either a description or an image")
        return self


class ChatRequest(BaseModel):
    """New coach message with the prior conversation."""

    model_config = _CAMEL

    history: list[ChatTurn] = Field(default_factory=list)
    message: str = Field(min_length=1)


class ChatResponse(BaseModel):
    """Coach reply."""

    model_config = _CAMEL

    reply: str


class MealImageRequest(BaseModel):
    """Meal to illustrate."""

    model_config = _CAMEL

    meal_name: str = Field(min_length=1)


class MealImageResponse(BaseModel):
    """Generated image as a data URL, or null."""

    model_config = _CAMEL

    image: str | None


class AcceptPlannedMealRequest(BaseModel):
    """A meal-plan recipe the user chose to log."""

    model_config = _CAMEL

    meal: PlannedMeal
    slot: PlanSlot
    image: str | None = None
