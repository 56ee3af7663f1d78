"""Domain models for accounts and sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AccountRecord:
    """Represents an account stored in the users table."""

    email: str
    password_hash: str
    name: str


@dataclass(frozen=True)
class Session:
    """Authenticated session passed explicitly into service calls."""

    email: str
    token: str
    expires_at: datetime
