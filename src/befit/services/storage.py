"""Storage interface and remote/local fallback strategy."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Protocol, TypeVar

from befit.domain.accounts import AccountRecord
from befit.domain.errors import StoreUnavailableError
from befit.domain.meals import DailyLog
from befit.domain.profiles import UserProfile

_logger = logging.getLogger(__name__)

T = TypeVar("T")


class DietStore(Protocol):
    """Persistence interface for accounts, profiles and daily logs."""

    def get_account(self, email: str) -> AccountRecord | None:
        """Return the account for an email, if present."""

    def create_account(self, account: AccountRecord) -> None:
        """Create an account, raising DuplicateAccountError if it exists."""

    def count_accounts(self) -> int:
        """Return the number of stored accounts."""

    def get_profile(self, email: str) -> UserProfile | None:
        """Return the stored profile for an account, if any."""

    def save_profile(self, email: str, profile: UserProfile) -> None:
        """Replace the stored profile for an account."""

    def get_daily_log(self, email: str, day: date) -> DailyLog | None:
        """Return the log for an account and date, if any."""

    def save_daily_log(self, email: str, log: DailyLog) -> None:
        """Insert or fully replace the log keyed by account and log date."""


@dataclass
class FallbackDietStore(DietStore):
    """Routes calls to the primary store until it becomes unreachable.

    Once the primary raises StoreUnavailableError, that call and every
    later call are served by the fallback store.
    """

    primary: DietStore
    fallback: DietStore
    degraded: bool = False

    def get_account(self, email: str) -> AccountRecord | None:
        """Return the account for an email, if present."""
        return self._route("get_account", lambda store: store.get_account(email))

    def create_account(self, account: AccountRecord) -> None:
        """Create an account in the active store."""
        self._route("create_account", lambda store: store.create_account(account))

    def count_accounts(self) -> int:
        """Return the number of accounts in the active store."""
        return self._route("count_accounts", lambda store: store.count_accounts())

    def get_profile(self, email: str) -> UserProfile | None:
        """Return the stored profile for an account, if any."""
        return self._route("get_profile", lambda store: store.get_profile(email))

    def save_profile(self, email: str, profile: UserProfile) -> None:
        """Replace the stored profile in the active store."""
        self._route(
            "save_profile", lambda store: store.save_profile(email, profile)
        )

    def get_daily_log(self, email: str, day: date) -> DailyLog | None:
        """Return the log for an account and date, if any."""
        return self._route(
            "get_daily_log", lambda store: store.get_daily_log(email, day)
        )

    def save_daily_log(self, email: str, log: DailyLog) -> None:
        """Upsert the log in the active store."""
        self._route("save_daily_log", lambda store: store.save_daily_log(email, log))

    def _route(self, action: str, call: Callable[[DietStore], T]) -> T:
        if not self.degraded:
            try:
                return call(self.primary)
            except StoreUnavailableError as exc:
                _logger.warning(
                    "Remote store unreachable during %s, using local store: %s",
                    action,
                    exc,
                )
                self.degraded = True
        return call(self.fallback)
