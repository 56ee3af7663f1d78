"""AI coach: meal analysis, meal plans, recipe images and chat."""

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from befit.domain.coach import (
    ChatTurn,
    DietAdjustment,
    MealEstimate,
    MealPlan,
)
from befit.domain.errors import MealAnalysisError
from befit.domain.meals import MealLog
from befit.domain.profiles import UserProfile
from befit.services.targets import split_meal_targets

_logger = logging.getLogger(__name__)

COACH_INSTRUCTIONS = (
    "You are a helpful, encouraging diet coach named FitBot. Keep answers concise."
)
CHAT_EMPTY_REPLY = "I'm having trouble thinking right now."
CHAT_FAILURE_REPLY = "I'm having trouble connecting right now."
FALLBACK_ADJUSTMENT = DietAdjustment(
    missing_macros="Nutrients", suggestion="Balanced meal"
)

_MACROS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "carbs": {"type": "number", "minimum": 0},
        "fat": {"type": "number", "minimum": 0},
    },
    "required": ["calories", "protein", "carbs", "fat"],
    "additionalProperties": False,
}

MEAL_ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "macros": _MACROS_SCHEMA,
        "advice": {"type": "string"},
    },
    "required": ["name", "macros", "advice"],
    "additionalProperties": False,
}

_PLANNED_MEAL_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "description": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "carbs": {"type": "number", "minimum": 0},
        "fat": {"type": "number", "minimum": 0},
        "ingredients": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Ingredients with quantities",
        },
        "instructions": {
            "type": "array",
            "items": {"type": "string"},
            "description": "Step by step cooking instructions",
        },
    },
    "required": [
        "name",
        "description",
        "calories",
        "protein",
        "carbs",
        "fat",
        "ingredients",
        "instructions",
    ],
    "additionalProperties": False,
}

MEAL_PLAN_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "breakfast": {"type": "array", "items": _PLANNED_MEAL_SCHEMA},
        "lunch": {"type": "array", "items": _PLANNED_MEAL_SCHEMA},
        "dinner": {"type": "array", "items": _PLANNED_MEAL_SCHEMA},
    },
    "required": ["breakfast", "lunch", "dinner"],
    "additionalProperties": False,
}

ADJUSTMENT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "missingMacros": {"type": "string"},
        "suggestion": {"type": "string"},
    },
    "required": ["missingMacros", "suggestion"],
    "additionalProperties": False,
}


class CoachClient(Protocol):
    """Interface for the hosted generative model."""

    async def complete_json(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return a JSON object matching the schema."""

    async def complete_text(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        """Return a free-text reply to the conversation."""

    async def generate_image(self, *, model: str, prompt: str) -> str | None:
        """Return a base64-encoded PNG for the prompt, if one was produced."""


@dataclass
class CoachService:
    """Builds prompts for the coach model and applies neutral fallbacks."""

    client: CoachClient
    model: str
    image_model: str
    reasoning_effort: str | None
    store: bool

    async def estimate_meal_from_description(self, description: str) -> MealEstimate:
        """Estimate a meal's name and macros from a text description."""
        prompt = (
            f'Analyze this meal description: "{description.strip()}". '
            "Estimate a short name for the meal and its macros "
            "(calories, protein, carbs and fat in grams), "
            "and give one line of advice."
        )
        return await self._estimate(prompt, image_data_url=None)

    async def estimate_meal_from_image(self, image_bytes: bytes) -> MealEstimate:
        """Estimate a meal's name and macros from a photo."""
        prompt = (
            "Analyze this meal. Estimate its name and macros "
            "(calories, protein, carbs and fat in grams), "
            "and give one line of advice."
        )
        return await self._estimate(prompt, image_data_url=to_data_url(image_bytes))

    async def generate_meal_plan(self, profile: UserProfile) -> MealPlan | None:
        """Generate three recipe options per meal that fit the profile targets."""
        try:
            raw = await self.client.complete_json(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=build_meal_plan_prompt(profile),
                schema_name="meal_plan",
                schema=MEAL_PLAN_SCHEMA,
            )
            return MealPlan.model_validate(raw)
        except Exception:
            _logger.exception("Meal plan generation failed")
            return None

    async def generate_meal_image(self, meal_name: str) -> str | None:
        """Generate a food photo for a meal and return it as a data URL."""
        prompt = (
            "A delicious, professional high-resolution food photography shot of "
            f"{meal_name}. Appetizing, restaurant quality, cinematic lighting."
        )
        try:
            encoded = await self.client.generate_image(
                model=self.image_model, prompt=prompt
            )
        except Exception:
            _logger.exception("Meal image generation failed")
            return None
        if not encoded:
            return None
        return f"data:image/png;base64,{encoded}"

    async def chat(self, history: list[ChatTurn], message: str) -> str:
        """Return the coach's reply to a new message."""
        messages = [
            {"role": _chat_role(turn.role), "content": turn.text} for turn in history
        ]
        messages.append({"role": "user", "content": message})
        try:
            reply = await self.client.complete_text(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                instructions=COACH_INSTRUCTIONS,
                messages=messages,
            )
        except Exception:
            _logger.exception("Coach chat failed")
            return CHAT_FAILURE_REPLY
        return reply.strip() or CHAT_EMPTY_REPLY

    async def suggest_adjustments(
        self, profile: UserProfile, meals: list[MealLog]
    ) -> DietAdjustment:
        """Suggest which macro the next meal should focus on."""
        eaten = [
            {"name": meal.name, "macros": meal.macros.model_dump()} for meal in meals
        ]
        prompt = (
            f"User: {profile.name}, Goal: {profile.goal}, "
            f"Target Cal: {profile.target_calories}, "
            f"Target Protein: {profile.target_protein}g.\n"
            f"Today's Meals: {json.dumps(eaten)}.\n\n"
            "Respond with missingMacros: the macro (Protein, Carbs or Fat) they "
            "need more of in the next meal, and suggestion: a specific food "
            "that would cover it."
        )
        try:
            raw = await self.client.complete_json(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema_name="diet_adjustment",
                schema=ADJUSTMENT_SCHEMA,
            )
            return DietAdjustment.model_validate(raw)
        except Exception:
            _logger.exception("Diet adjustment request failed")
            return FALLBACK_ADJUSTMENT

    async def _estimate(self, prompt: str, image_data_url: str | None) -> MealEstimate:
        try:
            raw = await self.client.complete_json(
                model=self.model,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
                prompt=prompt,
                schema_name="meal_estimate",
                schema=MEAL_ESTIMATE_SCHEMA,
                image_data_url=image_data_url,
            )
            return MealEstimate.model_validate(raw)
        except Exception as exc:
            _logger.exception("Meal analysis failed")
            raise MealAnalysisError("Analysis failed") from exc


def build_meal_plan_prompt(profile: UserProfile) -> str:
    """Build the meal plan prompt with per-meal calorie and protein targets."""
    split = split_meal_targets(profile.target_calories, profile.target_protein)
    return (
        "Create a daily meal plan with 3 distinct options for each meal time "
        "(Breakfast, Lunch, Dinner) for:\n"
        f"Height: {profile.height:g}cm, Weight: {profile.weight:g}kg, "
        f"Goal: {profile.goal}.\n"
        f"Daily Total Targets: {profile.target_calories} Calories, "
        f"{profile.target_protein}g Protein.\n"
        f"Dietary Restrictions: {profile.dietary_restrictions}.\n\n"
        "Keep each option close to its per-meal target so the day adds up to "
        "the daily goal:\n"
        f"- Breakfast Options: Approx {split.breakfast.calories} kcal and "
        f"{split.breakfast.protein}g protein.\n"
        f"- Lunch Options: Approx {split.lunch.calories} kcal and "
        f"{split.lunch.protein}g protein.\n"
        f"- Dinner Options: Approx {split.dinner.calories} kcal and "
        f"{split.dinner.protein}g protein.\n\n"
        "Do not exceed these per-meal values significantly. Give every option "
        "ingredients with quantities and step by step instructions."
    )


def decode_image(payload: str) -> bytes:
    """Decode a base64 image given either raw or as a data URL."""
    _, _, encoded = payload.rpartition(",")
    try:
        return base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise ValueError("Image is not valid base64") from exc


def to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def _chat_role(role: str) -> str:
    return "assistant" if role == "model" else "user"
