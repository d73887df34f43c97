"""
velada/routes/winners.py
Winner actions: record, read, delete one, clear all

Writes are admin-only; reads need any authenticated caller.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velada.database import get_db
from velada.errors import BadRequestError, ErrorCode, log_internal_error
from velada.orm.user import User
from velada.routes.deps import get_winner_service
from velada.schemas.common import ApiResponse, success_response
from velada.schemas.voting import CombatWinnerResponse, ConfirmRequest, SetWinnerRequest
from velada.security.rbac import get_current_user, require_admin
from velada.services.winner_service import WinnerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/winners", tags=["Winners"])


@router.post("", response_model=ApiResponse[CombatWinnerResponse])
async def set_winner(
    winner_data: SetWinnerRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    winners: WinnerService = Depends(get_winner_service),
):
    """Record (or replace) the winner of a combat."""
    winner = await winners.set_winner(db, winner_data.combat_id, winner_data.participant_id)
    logger.info(f"Admin {admin.id} set winner of combat {winner.combat_id} to {winner.participant_id}")
    return success_response(CombatWinnerResponse.model_validate(winner))


@router.get("", response_model=ApiResponse[List[CombatWinnerResponse]])
async def list_winners(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    winners: WinnerService = Depends(get_winner_service),
):
    records = await winners.get_all_winners(db)
    return success_response([CombatWinnerResponse.model_validate(record) for record in records])


@router.get("/{combat_id}", response_model=ApiResponse[Optional[CombatWinnerResponse]])
async def get_winner(
    combat_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    winners: WinnerService = Depends(get_winner_service),
):
    """Winner of combat_id, or null while the combat is open."""
    winner = await winners.get_winner(db, combat_id)
    return success_response(CombatWinnerResponse.model_validate(winner) if winner else None)


@router.post("/clear", response_model=ApiResponse[bool])
async def clear_winners(
    body: ConfirmRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    winners: WinnerService = Depends(get_winner_service),
):
    """Remove every recorded winner. Requires confirm=true."""
    if not body.confirm:
        raise BadRequestError("Winner clearing not confirmed", code=ErrorCode.NOT_CONFIRMED)
    logger.warning(f"Admin {admin.id} clearing all winners")
    if not await winners.clear_all_winners(db):
        raise log_internal_error(RuntimeError("winner store delete failed"), "clear_winners")
    return success_response(True, message="All winners cleared")


@router.delete("/{combat_id}", response_model=ApiResponse[bool])
async def delete_winner(
    combat_id: int,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    winners: WinnerService = Depends(get_winner_service),
):
    """Reopen one combat by removing its winner. Idempotent."""
    if not await winners.delete_winner(db, combat_id):
        raise log_internal_error(RuntimeError("winner store delete failed"), "delete_winner")
    logger.info(f"Admin {admin.id} deleted winner of combat {combat_id}")
    return success_response(True)
