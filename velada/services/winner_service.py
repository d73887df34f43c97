"""
Winner Service — administratively recorded combat outcomes

Each combat follows its own two-state lifecycle:

    OPEN  --set_winner-->  CLOSED  --delete_winner-->  OPEN

set_winner on a CLOSED combat replaces the recorded winner. There is no
global voting phase.

Admin authorization happens in the request handlers; this service still
re-checks that the winner belongs to the combat so it is safe to call
directly (CLI, tests).
"""
import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from velada.core.registry import Registry
from velada.exceptions import InvalidCombat, ParticipantNotInCombat
from velada.orm.combat_winner import CombatWinner
from velada.services import winner_repository

logger = logging.getLogger(__name__)

COMBAT_OPEN = "open"
COMBAT_CLOSED = "closed"


class WinnerService:

    def __init__(self, registry: Registry):
        self.registry = registry

    async def set_winner(self, db: AsyncSession, combat_id: int, participant_id) -> CombatWinner:
        """
        Record participant_id as the winner of combat_id, replacing any
        previous winner.

        Raises:
            InvalidCombat: combat id unknown
            ParticipantNotInCombat: participant is not one of the combat's two fighters
        """
        combat = self.registry.get_combat_by_id(combat_id)
        if combat is None:
            raise InvalidCombat(combat_id)

        if not combat.has_fighter(participant_id):
            raise ParticipantNotInCombat(participant_id, combat_id)
        participant = self.registry.participant(participant_id)

        winner = await winner_repository.upsert_winner(db, combat_id, participant.name)
        logger.info(f"Winner recorded: combat={combat_id} participant={participant.name}")
        return winner

    async def get_winner(self, db: AsyncSession, combat_id: int) -> Optional[CombatWinner]:
        return await winner_repository.get_winner(db, combat_id)

    async def get_all_winners(self, db: AsyncSession) -> List[CombatWinner]:
        return await winner_repository.get_all_winners(db)

    async def get_combat_status(self, db: AsyncSession, combat_id: int) -> str:
        if self.registry.get_combat_by_id(combat_id) is None:
            raise InvalidCombat(combat_id)
        winner = await winner_repository.get_winner(db, combat_id)
        return COMBAT_CLOSED if winner is not None else COMBAT_OPEN

    async def delete_winner(self, db: AsyncSession, combat_id: int) -> bool:
        """Reopen one combat. Deleting a missing winner still succeeds."""
        try:
            removed = await winner_repository.delete_winner(db, combat_id)
        except Exception as e:
            await db.rollback()
            logger.error(f"Error deleting winner for combat {combat_id}: {type(e).__name__}: {str(e)}")
            return False
        if removed:
            logger.info(f"Winner deleted: combat={combat_id}")
        return True

    async def clear_all_winners(self, db: AsyncSession) -> bool:
        try:
            removed = await winner_repository.delete_all_winners(db)
        except Exception as e:
            await db.rollback()
            logger.error(f"Error clearing winners: {type(e).__name__}: {str(e)}")
            return False
        logger.warning(f"All winners cleared ({removed} rows)")
        return True
