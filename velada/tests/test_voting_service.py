"""
Voting engine: casting rules, concurrency, results aggregation
"""
import asyncio

import pytest
from sqlalchemy import select, func

from velada.exceptions import (
    AlreadyVoted,
    InvalidCombat,
    InvalidParticipant,
    ParticipantNotInCombat,
    VotingClosed,
)
from velada.orm.vote import Vote
from velada.services import user_repository, winner_repository
from velada.services.voting_service import VotingService, majority_winner


async def _vote_rows(db) -> int:
    result = await db.execute(select(func.count(Vote.id)))
    return result.scalar()


async def _make_users(db, count):
    users = []
    for index in range(count):
        created, _ = await user_repository.create_or_update_user(
            db, email=f"voter{index}@example.com", name=f"Voter {index}"
        )
        users.append(created)
    return users


@pytest.fixture
def voting(registry):
    return VotingService(registry, lock_voting_on_winner=True)


class TestCastVote:

    @pytest.mark.asyncio
    async def test_happy_path(self, db, voting, user):
        vote = await voting.cast_vote(db, user.id, 1, "peereira")

        assert vote.user_id == user.id
        assert vote.combat_id == 1
        assert vote.participant_id == "peereira"
        assert await voting.has_voted(db, user.id, 1)
        assert not await voting.has_voted(db, user.id, 2)
        assert (await voting.get_user_vote(db, user.id, 1)).id == vote.id

        (other,) = await _make_users(db, 1)
        rival_vote = await voting.cast_vote(db, other.id, 1, "rivaldios")
        assert rival_vote.participant_id == "rivaldios"
        assert await _vote_rows(db) == 2

        results = await voting.get_combat_vote_results(db, 1)
        assert (results.fighter1_votes, results.fighter2_votes) == (1, 1)

    @pytest.mark.asyncio
    async def test_second_vote_same_combat_rejected(self, db, voting, user):
        await voting.cast_vote(db, user.id, 1, "peereira")

        with pytest.raises(AlreadyVoted):
            await voting.cast_vote(db, user.id, 1, "rivaldios")

        assert await _vote_rows(db) == 1
        assert (await voting.get_user_vote(db, user.id, 1)).participant_id == "peereira"

    @pytest.mark.asyncio
    async def test_one_vote_per_combat_not_per_event(self, db, voting, user):
        await voting.cast_vote(db, user.id, 1, "peereira")
        await voting.cast_vote(db, user.id, 7, "westcol")
        assert await voting.get_total_votes(db) == 2
        assert [vote.combat_id for vote in await voting.get_user_votes(db, user.id)] == [1, 7]

    @pytest.mark.asyncio
    async def test_participant_from_another_combat(self, db, voting, user):
        with pytest.raises(ParticipantNotInCombat) as exc_info:
            await voting.cast_vote(db, user.id, 1, "grefg")
        assert exc_info.value.code == "PARTICIPANT_NOT_IN_COMBAT"
        assert await _vote_rows(db) == 0

    @pytest.mark.asyncio
    async def test_unknown_participant(self, db, voting, user):
        with pytest.raises(InvalidParticipant):
            await voting.cast_vote(db, user.id, 1, "ibai")
        assert await _vote_rows(db) == 0

    @pytest.mark.asyncio
    async def test_unknown_combat(self, db, voting, user):
        with pytest.raises(InvalidCombat):
            await voting.cast_vote(db, user.id, 99, "peereira")

    @pytest.mark.asyncio
    async def test_participant_checked_before_combat(self, db, voting, user):
        with pytest.raises(InvalidParticipant):
            await voting.cast_vote(db, user.id, 99, "ibai")


class TestConcurrentVotes:

    @pytest.mark.asyncio
    async def test_exactly_one_of_many_concurrent_casts_succeeds(self, session_factory, db, voting, user):
        attempts = 10

        async def attempt(index):
            async with session_factory() as session:
                fighter = "peereira" if index % 2 else "rivaldios"
                return await voting.cast_vote(session, user.id, 1, fighter)

        outcomes = await asyncio.gather(*(attempt(i) for i in range(attempts)), return_exceptions=True)

        succeeded = [outcome for outcome in outcomes if not isinstance(outcome, Exception)]
        rejected = [outcome for outcome in outcomes if isinstance(outcome, AlreadyVoted)]
        assert len(succeeded) == 1
        assert len(rejected) == attempts - 1
        assert await _vote_rows(db) == 1


class TestWinnerLock:

    @pytest.mark.asyncio
    async def test_closed_combat_rejects_votes(self, db, voting, user):
        await winner_repository.upsert_winner(db, 2, "gaspi")

        with pytest.raises(VotingClosed):
            await voting.cast_vote(db, user.id, 2, "perxitaa")

        await winner_repository.delete_winner(db, 2)
        vote = await voting.cast_vote(db, user.id, 2, "perxitaa")
        assert vote.combat_id == 2

    @pytest.mark.asyncio
    async def test_lock_can_be_disabled(self, db, registry, user):
        unlocked = VotingService(registry, lock_voting_on_winner=False)
        await winner_repository.upsert_winner(db, 2, "gaspi")

        vote = await unlocked.cast_vote(db, user.id, 2, "perxitaa")
        assert vote.participant_id == "perxitaa"

    @pytest.mark.asyncio
    async def test_validation_runs_before_lock(self, db, voting, user):
        await winner_repository.upsert_winner(db, 1, "peereira")
        with pytest.raises(ParticipantNotInCombat):
            await voting.cast_vote(db, user.id, 1, "grefg")


class TestResults:

    @pytest.mark.asyncio
    async def test_every_participant_reported(self, db, voting, registry):
        users = await _make_users(db, 3)
        for voter in users:
            await voting.cast_vote(db, voter.id, 3, "roro")
        await voting.cast_vote(db, users[0].id, 1, "rivaldios")

        results = await voting.get_vote_results(db)

        assert len(results) == len(registry.participants)
        assert {result.participant_id for result in results} == {p.name for p in registry.participants}
        assert sum(result.vote_count for result in results) == await _vote_rows(db)
        assert results[0].participant_id == "roro"
        assert results[0].vote_count == 3
        assert results[1].participant_id == "rivaldios"

    @pytest.mark.asyncio
    async def test_ties_ordered_by_participant(self, db, voting):
        results = await voting.get_vote_results(db)
        names = [result.participant_id for result in results]
        assert names == sorted(names)

    @pytest.mark.asyncio
    async def test_combat_majority(self, db, voting):
        users = await _make_users(db, 4)
        for voter, fighter in zip(users, ["peereira", "peereira", "peereira", "rivaldios"]):
            await voting.cast_vote(db, voter.id, 1, fighter)

        results = await voting.get_combat_vote_results(db, 1)

        assert results.fighter1_votes == 3
        assert results.fighter2_votes == 1
        assert results.total_votes == 4
        assert results.winning_fighter == "peereira"

    @pytest.mark.asyncio
    async def test_combat_tie_has_no_leader(self, db, voting):
        users = await _make_users(db, 4)
        for voter, fighter in zip(users, ["abby", "roro", "abby", "roro"]):
            await voting.cast_vote(db, voter.id, 3, fighter)

        results = await voting.get_combat_vote_results(db, 3)
        assert results.total_votes == 4
        assert results.winning_fighter is None

    @pytest.mark.asyncio
    async def test_unknown_combat_results(self, db, voting):
        assert await voting.get_combat_vote_results(db, 42) is None

    @pytest.mark.asyncio
    async def test_all_combat_results(self, db, voting, user):
        await voting.cast_vote(db, user.id, 6, "tomas")

        results = await voting.get_all_combat_vote_results(db)

        assert [result.combat_id for result in results] == list(range(1, 8))
        assert results[5].fighter2_votes == 1
        assert results[5].winning_fighter == "tomas"
        assert all(result.total_votes == 0 for result in results if result.combat_id != 6)

    @pytest.mark.asyncio
    async def test_vote_counts(self, db, voting, user):
        await voting.cast_vote(db, user.id, 4, "carlos")
        assert await voting.get_vote_count(db, "carlos") == 1
        assert await voting.get_combat_vote_count(db, "carlos", 4) == 1
        assert await voting.get_combat_vote_count(db, "andoni", 4) == 0
        assert len(await voting.get_votes_for_combat(db, 4)) == 1

    def test_majority_winner(self):
        assert majority_winner("a", 3, "b", 1) == "a"
        assert majority_winner("a", 0, "b", 1) == "b"
        assert majority_winner("a", 2, "b", 2) is None


class TestClearVotes:

    @pytest.mark.asyncio
    async def test_clear_removes_everything(self, db, voting, user):
        first, second = await _make_users(db, 2)
        await voting.cast_vote(db, user.id, 1, "peereira")
        await voting.cast_vote(db, user.id, 2, "gaspi")
        await voting.cast_vote(db, first.id, 1, "rivaldios")
        await voting.cast_vote(db, first.id, 3, "abby")
        await voting.cast_vote(db, second.id, 2, "perxitaa")
        assert await _vote_rows(db) == 5

        assert await voting.clear_votes(db) is True
        assert await _vote_rows(db) == 0
        assert not await voting.has_voted(db, user.id, 1)

    @pytest.mark.asyncio
    async def test_clear_is_idempotent(self, db, voting):
        assert await voting.clear_votes(db) is True
        assert await voting.clear_votes(db) is True

    @pytest.mark.asyncio
    async def test_user_can_vote_again_after_clear(self, db, voting, user):
        await voting.cast_vote(db, user.id, 1, "peereira")
        await voting.clear_votes(db)
        vote = await voting.cast_vote(db, user.id, 1, "rivaldios")
        assert vote.participant_id == "rivaldios"
