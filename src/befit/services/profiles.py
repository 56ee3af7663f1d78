"""Profile service."""

import logging
from dataclasses import dataclass

from befit.domain.accounts import Session
from befit.domain.profiles import ProfileDraft, UserProfile
from befit.services.storage import DietStore
from befit.services.targets import targets_for

_logger = logging.getLogger(__name__)


@dataclass
class ProfileService:
    """Loads and saves profiles, re-deriving targets on every save."""

    store: DietStore

    def get_profile(self, session: Session) -> UserProfile | None:
        """Return the stored profile for the session's account."""
        return self.store.get_profile(session.email)

    def save_profile(self, session: Session, draft: ProfileDraft) -> UserProfile:
        """Derive targets for the draft and persist the resulting profile."""
        name = (draft.name or "").strip()
        if not name:
            account = self.store.get_account(session.email)
            name = account.name if account else ""
        targets = targets_for(draft)
        profile = UserProfile(
            **draft.model_dump(exclude={"name"}),
            name=name,
            target_calories=targets.calories,
            target_protein=targets.protein,
        )
        self.store.save_profile(session.email, profile)
        _logger.info(
            "Profile saved: email=%s calories=%s protein=%s",
            session.email,
            targets.calories,
            targets.protein,
        )
        return profile
