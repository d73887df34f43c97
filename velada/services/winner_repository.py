"""
velada/services/winner_repository.py
Winner Store - persistence for recorded combat outcomes

upsert_winner uses the dialect's native INSERT ... ON CONFLICT DO UPDATE so
two admins saving at once leave one row (the last write wins) instead of
racing a read-then-update.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from velada.orm.combat_winner import CombatWinner

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _dialect_insert(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    try:
        return _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise NotImplementedError(f"Winner upsert is not supported on dialect '{dialect}'")


async def upsert_winner(db: AsyncSession, combat_id: int, participant_id: str) -> CombatWinner:
    """Insert the winner for combat_id, replacing any existing one, and commit."""
    insert = _dialect_insert(db)
    now = datetime.utcnow()
    stmt = insert(CombatWinner).values(
        combat_id=combat_id,
        participant_id=participant_id,
        created_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[CombatWinner.combat_id],
        set_={"participant_id": participant_id, "created_at": now},
    )
    await db.execute(stmt)
    await db.commit()

    winner = await get_winner(db, combat_id)
    if winner is None:
        raise RuntimeError(f"Winner upsert for combat {combat_id} returned no row")
    # The identity map may hold a stale copy from before the upsert
    await db.refresh(winner)
    return winner


async def get_winner(db: AsyncSession, combat_id: int) -> Optional[CombatWinner]:
    result = await db.execute(
        select(CombatWinner).where(CombatWinner.combat_id == combat_id).limit(1)
    )
    return result.scalar_one_or_none()


async def get_all_winners(db: AsyncSession) -> List[CombatWinner]:
    result = await db.execute(select(CombatWinner).order_by(CombatWinner.combat_id))
    return list(result.scalars().all())


async def delete_winner(db: AsyncSession, combat_id: int) -> int:
    result = await db.execute(delete(CombatWinner).where(CombatWinner.combat_id == combat_id))
    await db.commit()
    return result.rowcount or 0


async def delete_all_winners(db: AsyncSession) -> int:
    result = await db.execute(delete(CombatWinner))
    await db.commit()
    return result.rowcount or 0
