"""Account registration, login and session tokens."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from befit.domain.accounts import AccountRecord, Session
from befit.domain.errors import AuthenticationError, DuplicateAccountError
from befit.services.storage import DietStore

_logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AccountService:
    """Service for account lifecycle and session handling."""

    store: DietStore
    secret: str
    session_ttl: timedelta = timedelta(days=30)
    clock: Callable[[], datetime] = field(default=_utc_now)

    def register(self, name: str, email: str, password: str) -> Session:
        """Create an account and return a session for it."""
        normalized = _normalize_email(email)
        display_name = name.strip()
        if not normalized or not password:
            raise AuthenticationError("Email and password are required")
        if not display_name:
            raise AuthenticationError("Name is required")
        if self.store.get_account(normalized) is not None:
            raise DuplicateAccountError("User already exists")
        self.store.create_account(
            AccountRecord(
                email=normalized,
                password_hash=generate_password_hash(password),
                name=display_name,
            )
        )
        _logger.info("Account registered: %s", normalized)
        return self._issue(normalized)

    def login(self, email: str, password: str) -> Session:
        """Verify credentials and return a new session."""
        normalized = _normalize_email(email)
        if not self.authenticate(normalized, password):
            raise AuthenticationError("Invalid credentials")
        return self._issue(normalized)

    def authenticate(self, email: str, password: str) -> bool:
        """Return True when the password matches the stored hash."""
        account = self.store.get_account(_normalize_email(email))
        if account is None or not account.password_hash:
            return False
        return check_password_hash(account.password_hash, password)

    def resolve(self, token: str) -> Session:
        """Return the session encoded in a signed token."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Session expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationError("Invalid session") from exc
        return Session(
            email=str(payload["sub"]),
            token=token,
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        )

    def display_name(self, session: Session) -> str:
        """Return the account's display name or an empty string."""
        account = self.store.get_account(session.email)
        return account.name if account else ""

    def _issue(self, email: str) -> Session:
        issued_at = self.clock()
        expires_at = issued_at + self.session_ttl
        token = jwt.encode(
            {
                "sub": email,
                "iat": int(issued_at.timestamp()),
                "exp": int(expires_at.timestamp()),
            },
            self.secret,
            algorithm=_ALGORITHM,
        )
        return Session(email=email, token=token, expires_at=expires_at)


def _normalize_email(email: str) -> str:
    return email.strip().lower()
