"""Demo account seeding."""

import logging
import random
from dataclasses import dataclass

from werkzeug.security import generate_password_hash

from befit.domain.accounts import AccountRecord
from befit.domain.profiles import ActivityLevel, Gender, Goal, UserProfile
from befit.services.storage import DietStore
from befit.services.targets import calculate_targets

_logger = logging.getLogger(__name__)

DEMO_ACCOUNT_COUNT = 100
DEMO_PASSWORD = "password123"

_FIRST_NAMES = [
    "James",
    "Mary",
    "John",
    "Patricia",
    "Robert",
    "Jennifer",
    "Michael",
    "Linda",
    "William",
    "Elizabeth",
]
_LAST_NAMES = [
    "Smith",
    "Johnson",
    "Williams",
    "Brown",
    "Jones",
    "Garcia",
    "Miller",
    "Davis",
    "Rodriguez",
    "Martinez",
]


@dataclass
class DemoSeeder:
    """Fills an empty store with demo accounts and profiles."""

    store: DietStore
    rng: random.Random
    count: int = DEMO_ACCOUNT_COUNT

    def seed(self) -> int:
        """Create demo accounts until the store holds ``count`` of them.

        Returns the number of accounts created.
        """
        existing = self.store.count_accounts()
        if existing >= self.count:
            return 0
        password_hash = generate_password_hash(DEMO_PASSWORD)
        created = 0
        for index in range(self.count):
            if existing + created >= self.count:
                break
            first = self.rng.choice(_FIRST_NAMES)
            last = self.rng.choice(_LAST_NAMES)
            email = f"{first.lower()}.{last.lower()}{index}@example.com"
            if self.store.get_account(email) is not None:
                continue
            name = f"{first} {last}"
            self.store.create_account(
                AccountRecord(email=email, password_hash=password_hash, name=name)
            )
            self.store.save_profile(email, self._random_profile(name))
            created += 1
        _logger.info("Seeded %s demo accounts", created)
        return created

    def _random_profile(self, name: str) -> UserProfile:
        age = 20 + self.rng.randrange(40)
        gender = self.rng.choice((Gender.MALE, Gender.FEMALE))
        height = 160 + self.rng.randrange(30)
        weight = 60 + self.rng.randrange(40)
        goal = self.rng.choice(list(Goal))
        activity_level = self.rng.choice(list(ActivityLevel))
        targets = calculate_targets(
            weight_kg=weight,
            height_cm=height,
            age=age,
            gender=gender,
            goal=goal,
            activity_level=activity_level,
        )
        return UserProfile(
            name=name,
            age=age,
            gender=gender,
            height=height,
            weight=weight,
            goal=goal,
            activity_level=activity_level,
            target_calories=targets.calories,
            target_protein=targets.protein,
            dietary_restrictions="None",
        )
