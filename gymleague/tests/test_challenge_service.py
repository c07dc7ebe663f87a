"""
Unit tests for challenges.
"""

import pytest

from gymleague.services.challenge_service import ChallengeAccessor


@pytest.mark.asyncio
async def test_by_difficulty_skips_inactive(fallback_mode, storage):
    challenges = ChallengeAccessor(fallback_mode, storage=storage)
    await challenges.load()

    await challenges.update("demo-challenge-3", {"is_active": False})

    assert challenges.by_difficulty("beginner") == []
    assert [c.id for c in challenges.by_difficulty("advanced")] == ["demo-challenge-2"]
    assert len(challenges.active()) == 2


@pytest.mark.asyncio
async def test_remote_fetch_only_active(remote_mode, mock_gateway):
    challenges = ChallengeAccessor(remote_mode, gateway=mock_gateway)

    await challenges.load()

    assert mock_gateway.select.await_args.kwargs["filters"] == {"is_active": True}
