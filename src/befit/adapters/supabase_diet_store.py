"""Supabase-backed diet store."""

import json
from dataclasses import dataclass
from datetime import date

import httpx
from supabase import Client

from befit.domain.accounts import AccountRecord
from befit.domain.errors import DuplicateAccountError, StoreUnavailableError
from befit.domain.meals import DailyLog
from befit.domain.profiles import UserProfile
from befit.services.storage import DietStore


@dataclass
class SupabaseDietStore(DietStore):
    """Supabase implementation over the ``users`` and ``logs`` tables."""

    client: Client

    def get_account(self, email: str) -> AccountRecord | None:
        """Return the account for an email, if present."""
        response = _execute(
            self.client.table("users")
            .select("email, password, name")
            .eq("email", email)
            .limit(1)
        )
        if not response.data:
            return None
        row = response.data[0]
        return AccountRecord(
            email=row["email"],
            password_hash=row.get("password") or "",
            name=row.get("name") or "",
        )

    def create_account(self, account: AccountRecord) -> None:
        """Insert a new account row."""
        if self.get_account(account.email) is not None:
            raise DuplicateAccountError("User already exists")
        response = _execute(
            self.client.table("users").insert(
                {
                    "email": account.email,
                    "password": account.password_hash,
                    "name": account.name,
                }
            )
        )
        if not response.data:
            raise RuntimeError("Failed to create account in Supabase")

    def count_accounts(self) -> int:
        """Return the number of account rows."""
        response = _execute(
            self.client.table("users").select("email", count="exact").limit(1)
        )
        return int(response.count or 0)

    def get_profile(self, email: str) -> UserProfile | None:
        """Return the stored profile blob, if any."""
        response = _execute(
            self.client.table("users").select("profile").eq("email", email).limit(1)
        )
        if not response.data:
            return None
        document = _decode(response.data[0].get("profile"))
        if document is None:
            return None
        return UserProfile.model_validate(document)

    def save_profile(self, email: str, profile: UserProfile) -> None:
        """Replace the profile blob on the account row."""
        _execute(
            self.client.table("users")
            .update({"profile": profile.to_document()})
            .eq("email", email)
        )

    def get_daily_log(self, email: str, day: date) -> DailyLog | None:
        """Return the log for an account and date, if any."""
        response = _execute(
            self.client.table("logs")
            .select("data")
            .eq("email", email)
            .eq("date", day.isoformat())
            .limit(1)
        )
        if not response.data:
            return None
        document = _decode(response.data[0].get("data"))
        if document is None:
            return None
        return DailyLog.model_validate(document)

    def save_daily_log(self, email: str, log: DailyLog) -> None:
        """Upsert the log row keyed by email and date."""
        _execute(
            self.client.table("logs").upsert(
                {
                    "email": email,
                    "date": log.date.isoformat(),
                    "data": log.to_document(),
                },
                on_conflict="email,date",
            )
        )


def _execute(query):  # type: ignore[no-untyped-def]
    """Run a query, mapping transport failures to StoreUnavailableError."""
    try:
        return query.execute()
    except httpx.TransportError as exc:
        raise StoreUnavailableError(str(exc) or type(exc).__name__) from exc


def _decode(value: object) -> dict[str, object] | None:
    """Accept JSON columns stored either as jsonb or as text."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        return json.loads(value)
    if isinstance(value, dict):
        return value
    return None
