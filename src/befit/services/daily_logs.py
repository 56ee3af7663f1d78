"""Daily meal log service."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from befit.domain.accounts import Session
from befit.domain.coach import MealEstimate, PlannedMeal, PlanSlot
from befit.domain.meals import DailyLog, DailySummary, MacroNutrients, MealLog, MealType
from befit.domain.profiles import UserProfile
from befit.services.storage import DietStore

PLANNER_NOTE = "Added from Meal Planner"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class DailyLogService:
    """Reads and writes one meal log per account per day."""

    store: DietStore
    timezone: str = "UTC"
    clock: Callable[[], datetime] = field(default=_utc_now)

    def today(self) -> date:
        """Return the current calendar date in the configured timezone."""
        return self.clock().astimezone(ZoneInfo(self.timezone)).date()

    def get_log(self, session: Session, day: date) -> DailyLog:
        """Return the stored log for a date, or an empty one."""
        return self.store.get_daily_log(session.email, day) or DailyLog(date=day)

    def get_today(self, session: Session) -> DailyLog:
        """Return today's log."""
        return self.get_log(session, self.today())

    def save_log(self, session: Session, log: DailyLog) -> DailyLog:
        """Replace the stored log for the log's date."""
        self.store.save_daily_log(session.email, log)
        return log

    def add_meal(
        self, session: Session, meal: MealLog, day: date | None = None
    ) -> DailyLog:
        """Append a meal to a day's log by reading, appending and writing back.

        Two overlapping calls for the same day are not merged: the last write
        wins.
        """
        current = self.get_log(session, day or self.today())
        updated = current.with_meal(meal)
        self.store.save_daily_log(session.email, updated)
        return updated

    def meal_from_estimate(
        self,
        estimate: MealEstimate,
        meal_type: MealType = MealType.LUNCH,
        image: str | None = None,
    ) -> MealLog:
        """Build a meal from a quick-log estimate."""
        return MealLog(
            name=estimate.name,
            timestamp=self._timestamp_ms(),
            macros=estimate.macros,
            image=image,
            notes=estimate.advice,
            type=meal_type,
        )

    def meal_from_plan(
        self, planned: PlannedMeal, slot: PlanSlot, image: str | None = None
    ) -> MealLog:
        """Build a meal from an accepted meal-plan recipe."""
        return MealLog(
            name=planned.name,
            timestamp=self._timestamp_ms(),
            macros=MacroNutrients(
                calories=planned.calories,
                protein=planned.protein,
                carbs=planned.carbs,
                fat=planned.fat,
            ),
            image=image,
            notes=PLANNER_NOTE,
            type=slot.meal_type,
        )

    def _timestamp_ms(self) -> int:
        return int(self.clock().timestamp() * 1000)


def summarize(log: DailyLog, profile: UserProfile) -> DailySummary:
    """Total a day's macros and compare calories against the target."""
    calories = sum(meal.macros.calories for meal in log.meals)
    protein = sum(meal.macros.protein for meal in log.meals)
    carbs = sum(meal.macros.carbs for meal in log.meals)
    fat = sum(meal.macros.fat for meal in log.meals)
    target = profile.target_calories
    progress = min(100.0, calories / target * 100) if target > 0 else 0.0
    return DailySummary(
        date=log.date,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        target_calories=target,
        target_protein=profile.target_protein,
        remaining_calories=max(0.0, target - calories),
        progress_percent=progress,
        meal_count=len(log.meals),
    )
