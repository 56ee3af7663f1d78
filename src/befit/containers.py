"""Dependency container wiring for the application."""

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from befit.adapters.local_diet_store import LocalJsonDietStore
from befit.adapters.openai_coach_client import OpenAICoachClient
from befit.adapters.supabase_diet_store import SupabaseDietStore
from befit.config import Settings
from befit.services.accounts import AccountService
from befit.services.coach import CoachService
from befit.services.daily_logs import DailyLogService
from befit.services.profiles import ProfileService
from befit.services.seed import DemoSeeder
from befit.services.storage import DietStore, FallbackDietStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: DietStore
    account_service: AccountService
    profile_service: ProfileService
    daily_log_service: DailyLogService
    coach_service: CoachService
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> DietStore:
    """Create the store: Supabase with a local fallback, or local only."""
    local_store = LocalJsonDietStore(settings.local_store_path)
    if not settings.remote_store_enabled:
        return local_store
    supabase_client = create_client(
        settings.supabase_url, settings.supabase_service_key
    )
    return FallbackDietStore(
        primary=SupabaseDietStore(supabase_client), fallback=local_store
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    account_service = AccountService(
        store=store,
        secret=resolved_settings.session_secret,
        session_ttl=timedelta(days=resolved_settings.session_ttl_days),
    )
    profile_service = ProfileService(store)
    daily_log_service = DailyLogService(store, timezone=resolved_settings.timezone)
    openai_client = OpenAICoachClient.create(resolved_settings.openai_api_key)
    coach_service = CoachService(
        client=openai_client,
        model=resolved_settings.openai_model,
        image_model=resolved_settings.openai_image_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    if resolved_settings.seed_demo_accounts:
        DemoSeeder(store=store, rng=random.Random()).seed()

    async def close_resources() -> None:
        await openai_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        account_service=account_service,
        profile_service=profile_service,
        daily_log_service=daily_log_service,
        coach_service=coach_service,
        close_resources=close_resources,
    )
