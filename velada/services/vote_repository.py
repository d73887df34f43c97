"""
velada/services/vote_repository.py
Vote Store - persistence for individual vote rows

Plain data access, no rule checks. The (user_id, combat_id) unique index
makes insert_vote raise IntegrityError for a second vote in the same combat;
callers decide what that means.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import select, func, delete, and_
from sqlalchemy.ext.asyncio import AsyncSession

from velada.orm.vote import Vote

logger = logging.getLogger(__name__)


async def insert_vote(db: AsyncSession, user_id: str, combat_id: int, participant_id: str) -> Vote:
    """Insert and commit one vote. Propagates IntegrityError on duplicates."""
    vote = Vote(
        user_id=user_id,
        participant_id=participant_id,
        combat_id=combat_id,
    )
    db.add(vote)
    await db.commit()
    await db.refresh(vote)
    return vote


async def get_vote_by_user(db: AsyncSession, user_id: str, combat_id: int) -> Optional[Vote]:
    result = await db.execute(
        select(Vote)
        .where(and_(Vote.user_id == user_id, Vote.combat_id == combat_id))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def has_user_voted(db: AsyncSession, user_id: str, combat_id: int) -> bool:
    result = await db.execute(
        select(Vote.id)
        .where(and_(Vote.user_id == user_id, Vote.combat_id == combat_id))
        .limit(1)
    )
    return result.first() is not None


async def get_votes_by_combat(db: AsyncSession, combat_id: int) -> List[Vote]:
    result = await db.execute(
        select(Vote).where(Vote.combat_id == combat_id).order_by(Vote.created_at)
    )
    return list(result.scalars().all())


async def get_votes_by_user(db: AsyncSession, user_id: str) -> List[Vote]:
    result = await db.execute(
        select(Vote).where(Vote.user_id == user_id).order_by(Vote.combat_id)
    )
    return list(result.scalars().all())


async def count_votes(
    db: AsyncSession,
    participant_id: Optional[str] = None,
    combat_id: Optional[int] = None,
) -> int:
    """Count votes, optionally narrowed to a participant and/or a combat."""
    stmt = select(func.count(Vote.id))
    if participant_id is not None:
        stmt = stmt.where(Vote.participant_id == participant_id)
    if combat_id is not None:
        stmt = stmt.where(Vote.combat_id == combat_id)
    result = await db.execute(stmt)
    return result.scalar() or 0


async def count_votes_by_participant(db: AsyncSession, combat_id: Optional[int] = None) -> Dict[str, int]:
    """Vote totals keyed by participant. Participants with no votes are absent."""
    stmt = select(Vote.participant_id, func.count(Vote.id)).group_by(Vote.participant_id)
    if combat_id is not None:
        stmt = stmt.where(Vote.combat_id == combat_id)
    result = await db.execute(stmt)
    return {participant_id: count for participant_id, count in result.all()}


async def count_votes_per_combat(db: AsyncSession) -> Dict[int, Dict[str, int]]:
    """Vote totals grouped by combat, then participant."""
    result = await db.execute(
        select(Vote.combat_id, Vote.participant_id, func.count(Vote.id))
        .group_by(Vote.combat_id, Vote.participant_id)
    )
    grouped: Dict[int, Dict[str, int]] = {}
    for combat_id, participant_id, count in result.all():
        grouped.setdefault(combat_id, {})[participant_id] = count
    return grouped


async def delete_all_votes(db: AsyncSession) -> int:
    """Delete every vote row and commit. Returns the number of rows removed."""
    result = await db.execute(delete(Vote))
    await db.commit()
    return result.rowcount or 0
