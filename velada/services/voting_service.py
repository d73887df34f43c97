"""
Voting Service — one vote per user per combat

Validates and records vote casts against the combat registry, and
aggregates results straight from the vote table.

Core Principles:
- Checks run in a fixed order and stop at the first failure
- No row changes on any failure path
- The (user_id, combat_id) unique index is the final word on duplicates;
  the existence check only spares the insert in the common case
- Results are re-aggregated on every read (no cached counts)
"""
import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from velada.config import feature_flags
from velada.core.registry import Registry
from velada.exceptions import (
    InvalidParticipant,
    InvalidCombat,
    ParticipantNotInCombat,
    AlreadyVoted,
    VotingClosed,
)
from velada.orm.vote import Vote
from velada.services import vote_repository, winner_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteResult:
    participant_id: str
    vote_count: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class CombatVoteResults:
    combat_id: int
    fighter1: str
    fighter2: str
    fighter1_votes: int
    fighter2_votes: int
    total_votes: int
    winning_fighter: Optional[str] = None

    def to_dict(self) -> Dict:
        return asdict(self)


def majority_winner(fighter1: str, fighter1_votes: int, fighter2: str, fighter2_votes: int) -> Optional[str]:
    """Strict majority only. A tie has no winner."""
    if fighter1_votes > fighter2_votes:
        return fighter1
    if fighter2_votes > fighter1_votes:
        return fighter2
    return None


class VotingService:
    """
    Stateless vote operations over an injected registry.

    Args:
        registry: edition data to validate against
        lock_voting_on_winner: reject votes once a combat has a recorded
            winner; defaults to FEATURE_LOCK_VOTING_ON_WINNER
    """

    def __init__(self, registry: Registry, lock_voting_on_winner: Optional[bool] = None):
        self.registry = registry
        if lock_voting_on_winner is None:
            lock_voting_on_winner = feature_flags.FEATURE_LOCK_VOTING_ON_WINNER
        self.lock_voting_on_winner = lock_voting_on_winner

    # ================= CASTING =================

    async def cast_vote(self, db: AsyncSession, user_id: str, combat_id: int, participant_id) -> Vote:
        """
        Record user_id's vote for participant_id in combat_id.

        Raises:
            InvalidParticipant: participant not in the edition
            InvalidCombat: combat id unknown
            ParticipantNotInCombat: participant fights in another combat
            VotingClosed: winner already recorded (when locking is enabled)
            AlreadyVoted: a vote exists for (user_id, combat_id)
        """
        participant = self.registry.participant(participant_id)

        combat = self.registry.get_combat_by_id(combat_id)
        if combat is None:
            raise InvalidCombat(combat_id)

        if not combat.has_fighter(participant):
            raise ParticipantNotInCombat(participant.name, combat_id)

        if self.lock_voting_on_winner:
            if await winner_repository.get_winner(db, combat_id) is not None:
                raise VotingClosed(combat_id)

        if await vote_repository.has_user_voted(db, user_id, combat_id):
            raise AlreadyVoted(user_id, combat_id)

        try:
            vote = await vote_repository.insert_vote(db, user_id, combat_id, participant.name)
        except IntegrityError:
            await db.rollback()
            # A concurrent request got its insert in first
            if await vote_repository.has_user_voted(db, user_id, combat_id):
                logger.info(f"Concurrent duplicate vote rejected: user={user_id} combat={combat_id}")
                raise AlreadyVoted(user_id, combat_id)
            raise

        logger.info(f"Vote cast: user={user_id} combat={combat_id} participant={participant.name}")
        return vote

    # ================= READS =================

    async def get_user_vote(self, db: AsyncSession, user_id: str, combat_id: int) -> Optional[Vote]:
        return await vote_repository.get_vote_by_user(db, user_id, combat_id)

    async def has_voted(self, db: AsyncSession, user_id: str, combat_id: int) -> bool:
        return await vote_repository.has_user_voted(db, user_id, combat_id)

    async def get_user_votes(self, db: AsyncSession, user_id: str) -> List[Vote]:
        return await vote_repository.get_votes_by_user(db, user_id)

    async def get_votes_for_combat(self, db: AsyncSession, combat_id: int) -> List[Vote]:
        return await vote_repository.get_votes_by_combat(db, combat_id)

    async def get_total_votes(self, db: AsyncSession) -> int:
        return await vote_repository.count_votes(db)

    async def get_vote_count(self, db: AsyncSession, participant_id) -> int:
        participant = self.registry.participant(participant_id)
        return await vote_repository.count_votes(db, participant_id=participant.name)

    async def get_combat_vote_count(self, db: AsyncSession, participant_id, combat_id: int) -> int:
        participant = self.registry.participant(participant_id)
        return await vote_repository.count_votes(db, participant_id=participant.name, combat_id=combat_id)

    # ================= RESULTS =================

    async def get_vote_results(self, db: AsyncSession) -> List[VoteResult]:
        """
        Totals for every participant in the edition, zero-vote ones included.

        Sorted by vote count descending; equal counts fall back to the
        participant identifier so the order never depends on the store.
        """
        counts = await vote_repository.count_votes_by_participant(db)
        results = [
            VoteResult(participant_id=participant.name, vote_count=counts.get(participant.name, 0))
            for participant in self.registry.participants
        ]
        return sorted(results, key=lambda result: (-result.vote_count, result.participant_id))

    async def get_combat_vote_results(self, db: AsyncSession, combat_id: int) -> Optional[CombatVoteResults]:
        """Head-to-head totals for one combat, or None if the combat is unknown."""
        combat = self.registry.get_combat_by_id(combat_id)
        if combat is None:
            return None

        counts = await vote_repository.count_votes_by_participant(db, combat_id=combat_id)
        return self._combat_results(combat, counts)

    async def get_all_combat_vote_results(self, db: AsyncSession) -> List[CombatVoteResults]:
        per_combat = await vote_repository.count_votes_per_combat(db)
        return [
            self._combat_results(combat, per_combat.get(combat.id, {}))
            for combat in self.registry.combats
        ]

    @staticmethod
    def _combat_results(combat, counts: Dict[str, int]) -> CombatVoteResults:
        fighter1 = combat.fighter1.name
        fighter2 = combat.fighter2.name
        fighter1_votes = counts.get(fighter1, 0)
        fighter2_votes = counts.get(fighter2, 0)
        return CombatVoteResults(
            combat_id=combat.id,
            fighter1=fighter1,
            fighter2=fighter2,
            fighter1_votes=fighter1_votes,
            fighter2_votes=fighter2_votes,
            total_votes=fighter1_votes + fighter2_votes,
            winning_fighter=majority_winner(fighter1, fighter1_votes, fighter2, fighter2_votes),
        )

    # ================= ADMIN =================

    async def clear_votes(self, db: AsyncSession) -> bool:
        """Delete every vote. Safe to repeat; storage failures return False."""
        try:
            removed = await vote_repository.delete_all_votes(db)
        except Exception as e:
            await db.rollback()
            logger.error(f"Error clearing votes: {type(e).__name__}: {str(e)}")
            return False
        logger.warning(f"All votes cleared ({removed} rows)")
        return True
