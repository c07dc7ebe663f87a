"""
Challenge collection accessor (skill challenges reference data).
"""

from typing import Any, Dict, List

from gymleague.models.schemas import Challenge, ChallengeDifficulty
from gymleague.services.collection_service import CollectionAccessor
from gymleague.services.seed_data import seed_challenges
from gymleague.utils.constants import CHALLENGES_KEY


class ChallengeAccessor(CollectionAccessor[Challenge]):
    table = "challenges"
    storage_key = CHALLENGES_KEY
    label = "challenges"
    record_model = Challenge
    order_by = "created_at"
    ascending = False

    def seed_records(self) -> List[dict]:
        return seed_challenges()

    def remote_filters(self) -> Dict[str, Any]:
        return {"is_active": True}

    def active(self) -> List[Challenge]:
        return [challenge for challenge in self.list() if challenge.is_active]

    def by_difficulty(self, difficulty: ChallengeDifficulty) -> List[Challenge]:
        difficulty = ChallengeDifficulty(difficulty).value
        return [challenge for challenge in self.active() if challenge.difficulty == difficulty]
