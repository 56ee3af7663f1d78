"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from pathlib import Path

import pytest

from befit.config import Settings
from befit.containers import AppContainer
from befit.domain.accounts import AccountRecord
from befit.domain.errors import DuplicateAccountError, StoreUnavailableError
from befit.domain.meals import DailyLog
from befit.domain.profiles import UserProfile
from befit.services.accounts import AccountService
from befit.services.coach import CoachClient, CoachService
from befit.services.daily_logs import DailyLogService
from befit.services.profiles import ProfileService
from befit.services.storage import DietStore

FIXED_NOW = datetime(2026, 10, 17, 12, 30, tzinfo=UTC)
SESSION_SECRET = "test-session-secret-0123456789abcdef"


@dataclass
class InMemoryDietStore(DietStore):
    """In-memory diet store for tests."""

    accounts: dict[str, AccountRecord] = field(default_factory=dict)
    profiles: dict[str, UserProfile] = field(default_factory=dict)
    logs: dict[tuple[str, date], DailyLog] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def get_account(self, email: str) -> AccountRecord | None:
        self.calls.append("get_account")
        return self.accounts.get(email)

    def create_account(self, account: AccountRecord) -> None:
        self.calls.append("create_account")
        if account.email in self.accounts:
            raise DuplicateAccountError("User already exists")
        self.accounts[account.email] = account

    def count_accounts(self) -> int:
        self.calls.append("count_accounts")
        return len(self.accounts)

    def get_profile(self, email: str) -> UserProfile | None:
        self.calls.append("get_profile")
        return self.profiles.get(email)

    def save_profile(self, email: str, profile: UserProfile) -> None:
        self.calls.append("save_profile")
        self.profiles[email] = profile

    def get_daily_log(self, email: str, day: date) -> DailyLog | None:
        self.calls.append("get_daily_log")
        return self.logs.get((email, day))

    def save_daily_log(self, email: str, log: DailyLog) -> None:
        self.calls.append("save_daily_log")
        self.logs[(email, log.date)] = log


@dataclass
class UnreachableDietStore(DietStore):
    """Store whose transport is always down."""

    attempts: int = 0

    def _fail(self) -> None:
        self.attempts += 1
        raise StoreUnavailableError("connection refused")

    def get_account(self, email: str) -> AccountRecord | None:
        self._fail()

    def create_account(self, account: AccountRecord) -> None:
        self._fail()

    def count_accounts(self) -> int:
        self._fail()

    def get_profile(self, email: str) -> UserProfile | None:
        self._fail()

    def save_profile(self, email: str, profile: UserProfile) -> None:
        self._fail()

    def get_daily_log(self, email: str, day: date) -> DailyLog | None:
        self._fail()

    def save_daily_log(self, email: str, log: DailyLog) -> None:
        self._fail()


@dataclass
class FakeCoachClient(CoachClient):
    """Fake coach client returning canned payloads and recording calls."""

    json_payloads: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "meal_estimate": {
                "name": "Chicken salad",
                "macros": {"calories": 420, "protein": 35, "carbs": 12, "fat": 24},
                "advice": "Add some whole grains for lasting energy.",
            },
            "meal_plan": {
                "breakfast": [
                    {
                        "name": "Greek yogurt bowl",
                        "description": "Yogurt with berries and oats",
                        "calories": 450,
                        "protein": 30,
                        "carbs": 50,
                        "fat": 12,
                        "ingredients": ["200g Greek yogurt", "50g oats"],
                        "instructions": ["Combine everything in a bowl."],
                    }
                ],
                "lunch": [],
                "dinner": [],
            },
            "diet_adjustment": {
                "missingMacros": "Protein",
                "suggestion": "Grilled salmon with greens",
            },
        }
    )
    reply: str = "Drink more water."
    image_b64: str | None = "aW1hZ2U="
    fail: bool = False
    json_calls: list[dict[str, object]] = field(default_factory=list)
    text_calls: list[dict[str, object]] = field(default_factory=list)
    image_calls: list[dict[str, object]] = field(default_factory=list)

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
        self.json_calls.append(
            {
                "model": model,
                "prompt": prompt,
                "schema_name": schema_name,
                "image_data_url": image_data_url,
            }
        )
        if self.fail:
            raise RuntimeError("model unavailable")
        return self.json_payloads[schema_name]

    async def complete_text(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        instructions: str,
        messages: list[dict[str, str]],
    ) -> str:
        self.text_calls.append({"instructions": instructions, "messages": messages})
        if self.fail:
            raise RuntimeError("model unavailable")
        return self.reply

    async def generate_image(self, *, model: str, prompt: str) -> str | None:
        self.image_calls.append({"model": model, "prompt": prompt})
        if self.fail:
            raise RuntimeError("model unavailable")
        return self.image_b64


def make_profile(**overrides: object) -> UserProfile:
    """Build a valid profile with sensible defaults."""
    values: dict[str, object] = {
        "name": "Alex",
        "age": 25,
        "gender": "Male",
        "height": 170,
        "weight": 70,
        "goal": "Lose Weight",
        "activity_level": "Sedentary",
        "target_calories": 1471,
        "target_protein": 84,
        "dietary_restrictions": "None",
    }
    values.update(overrides)
    return UserProfile(**values)


def make_coach_service(client: FakeCoachClient | None = None) -> CoachService:
    """Build a coach service over a fake client."""
    return CoachService(
        client=client or FakeCoachClient(),
        model="gpt-5.2",
        image_model="gpt-image-1",
        reasoning_effort=None,
        store=False,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        session_secret=SESSION_SECRET,
        local_store_path=tmp_path / "store.json",
    )


@pytest.fixture
def store() -> InMemoryDietStore:
    return InMemoryDietStore()


@pytest.fixture
def coach_client() -> FakeCoachClient:
    return FakeCoachClient()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryDietStore,
    coach_client: FakeCoachClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        account_service=AccountService(store=store, secret=SESSION_SECRET),
        profile_service=ProfileService(store),
        daily_log_service=DailyLogService(store, clock=lambda: FIXED_NOW),
        coach_service=make_coach_service(coach_client),
        close_resources=close_resources,
    )
