"""Nutrition target derivation."""

import math

from befit.domain.profiles import (
    ActivityLevel,
    Gender,
    Goal,
    MealPlanTargets,
    MealTarget,
    NutritionTargets,
    ProfileDraft,
    UserProfile,
)

DEFAULT_ACTIVITY_MULTIPLIER = 1.2

_ACTIVITY_MULTIPLIERS: dict[str, float] = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
}

_PROTEIN_MULTIPLIERS: dict[str, float] = {
    Goal.LOSE_WEIGHT: 1.2,
    Goal.GAIN_MUSCLE: 1.5,
}

_GOAL_CALORIE_ADJUSTMENTS: dict[str, float] = {
    Goal.LOSE_WEIGHT: -500.0,
    Goal.GAIN_MUSCLE: 300.0,
}

_MEAL_SHARES = {
    "breakfast": 0.30,
    "lunch": 0.35,
    "dinner": 0.35,
}


def calculate_targets(  # noqa: PLR0913
    *,
    weight_kg: float,
    height_cm: float,
    age: int,
    gender: Gender | str,
    goal: Goal | str,
    activity_level: ActivityLevel | str,
) -> NutritionTargets:
    """Derive daily calorie and protein targets.

    Uses the Mifflin-St Jeor equation for basal metabolic rate, scales it by
    the activity multiplier and applies the goal adjustment. Any gender other
    than ``Male`` takes the female offset. Unknown activity levels fall back
    to the sedentary multiplier. No lower bound is applied to the result.
    """
    protein = _round_half_up(weight_kg * _PROTEIN_MULTIPLIERS.get(goal, 1.0))

    bmr = 10 * weight_kg + 6.25 * height_cm - 5 * age
    bmr += 5 if gender == Gender.MALE else -161

    multiplier = _ACTIVITY_MULTIPLIERS.get(activity_level, DEFAULT_ACTIVITY_MULTIPLIER)
    tdee = bmr * multiplier + _GOAL_CALORIE_ADJUSTMENTS.get(goal, 0.0)

    return NutritionTargets(calories=_round_half_up(tdee), protein=protein)


def targets_for(profile: ProfileDraft | UserProfile) -> NutritionTargets:
    """Derive targets from a profile or profile draft."""
    return calculate_targets(
        weight_kg=profile.weight,
        height_cm=profile.height,
        age=profile.age,
        gender=profile.gender,
        goal=profile.goal,
        activity_level=profile.activity_level,
    )


def split_meal_targets(calories: int, protein: int) -> MealPlanTargets:
    """Split daily targets across breakfast, lunch and dinner.

    Each share is rounded on its own, so the parts may not add up exactly
    to the daily totals.
    """
    parts = {
        meal: MealTarget(
            calories=_round_half_up(calories * share),
            protein=_round_half_up(protein * share),
        )
        for meal, share in _MEAL_SHARES.items()
    }
    return MealPlanTargets(**parts)


def _round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""
    return math.floor(value + 0.5)
