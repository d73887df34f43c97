"""
Seeders are idempotent
"""
import pytest

from velada.seed.seed_all import seed_admins, seed_demo_votes
from velada.services import user_repository
from velada.services.voting_service import VotingService


@pytest.mark.asyncio
async def test_seed_admins_promotes_existing_users(db, user):
    admins = await seed_admins(db, [user.email, "boss@example.com"])

    assert [admin.email for admin in admins] == [user.email, "boss@example.com"]
    assert all(admin.is_admin for admin in admins)
    refreshed = await user_repository.get_user_by_email(db, user.email)
    assert refreshed.name == user.name


@pytest.mark.asyncio
async def test_demo_votes_fill_gaps_only(db, registry):
    inserted = await seed_demo_votes(db, registry, user_count=3)
    assert inserted == 3 * registry.total_combats

    assert await seed_demo_votes(db, registry, user_count=3) == 0
    assert await VotingService(registry).get_total_votes(db) == 3 * registry.total_combats
