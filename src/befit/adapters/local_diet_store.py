"""JSON file store mirroring the remote tables."""

import json
import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from befit.domain.accounts import AccountRecord
from befit.domain.errors import DuplicateAccountError
from befit.domain.meals import DailyLog
from befit.domain.profiles import UserProfile
from befit.services.storage import DietStore

_logger = logging.getLogger(__name__)


@dataclass
class LocalJsonDietStore(DietStore):
    """Local store keeping accounts, profiles and logs in one JSON file.

    Layout: ``{"users": {email: {...}}, "logs": {email: {date: log}}}``.
    """

    path: Path

    def get_account(self, email: str) -> AccountRecord | None:
        """Return the account for an email, if present."""
        row = self._load()["users"].get(email)
        if row is None:
            return None
        return AccountRecord(
            email=email,
            password_hash=str(row.get("password", "")),
            name=str(row.get("name", "")),
        )

    def create_account(self, account: AccountRecord) -> None:
        """Create an account entry."""
        data = self._load()
        if account.email in data["users"]:
            raise DuplicateAccountError("User already exists")
        data["users"][account.email] = {
            "email": account.email,
            "password": account.password_hash,
            "name": account.name,
            "profile": None,
        }
        self._write(data)

    def count_accounts(self) -> int:
        """Return the number of stored accounts."""
        return len(self._load()["users"])

    def get_profile(self, email: str) -> UserProfile | None:
        """Return the stored profile, if any."""
        row = self._load()["users"].get(email)
        if not row or not row.get("profile"):
            return None
        return UserProfile.model_validate(row["profile"])

    def save_profile(self, email: str, profile: UserProfile) -> None:
        """Replace the stored profile."""
        data = self._load()
        row = data["users"].setdefault(email, {"email": email, "name": profile.name})
        row["profile"] = profile.to_document()
        self._write(data)

    def get_daily_log(self, email: str, day: date) -> DailyLog | None:
        """Return the log for an account and date, if any."""
        document = self._load()["logs"].get(email, {}).get(day.isoformat())
        if document is None:
            return None
        return DailyLog.model_validate(document)

    def save_daily_log(self, email: str, log: DailyLog) -> None:
        """Insert or replace the log for its date."""
        data = self._load()
        data["logs"].setdefault(email, {})[log.date.isoformat()] = log.to_document()
        self._write(data)

    def _load(self) -> dict[str, dict[str, object]]:
        if not self.path.exists():
            return {"users": {}, "logs": {}}
        raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        raw.setdefault("users", {})
        raw.setdefault("logs", {})
        return raw

    def _write(self, data: dict[str, dict[str, object]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)
        _logger.debug("Local store written: %s", self.path)
