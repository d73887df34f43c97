"""
velada/routes/combats.py
Public reads: combat list, per-combat results, participant totals
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from velada.core.editions import get_registry
from velada.core.registry import Registry, fighter_avatar_url
from velada.database import get_db
from velada.errors import NotFoundError, ErrorCode
from velada.routes.deps import get_voting_service, get_winner_service
from velada.schemas.common import ApiResponse, success_response
from velada.schemas.voting import (
    CombatListResponse,
    CombatResponse,
    CombatVoteResultsResponse,
    VoteResultResponse,
)
from velada.services.voting_service import VotingService
from velada.services.winner_service import WinnerService, COMBAT_CLOSED, COMBAT_OPEN

router = APIRouter(tags=["Combats"])


def _combat_response(combat, winner) -> CombatResponse:
    return CombatResponse(
        id=combat.id,
        fighter1=combat.fighter1.name,
        fighter2=combat.fighter2.name,
        year=combat.year,
        fighter1_avatar=fighter_avatar_url(combat.fighter1),
        fighter2_avatar=fighter_avatar_url(combat.fighter2),
        status=COMBAT_CLOSED if winner else COMBAT_OPEN,
        winner=winner.participant_id if winner else None,
    )


@router.get("/combats", response_model=ApiResponse[CombatListResponse])
async def list_combats(
    db: AsyncSession = Depends(get_db),
    registry: Registry = Depends(get_registry),
    winners: WinnerService = Depends(get_winner_service),
):
    """Every combat of the edition with its open/closed status."""
    recorded = {winner.combat_id: winner for winner in await winners.get_all_winners(db)}
    combats = [_combat_response(combat, recorded.get(combat.id)) for combat in registry.combats]
    return success_response(CombatListResponse(combats=combats, total=len(combats)))


@router.get("/combats/{combat_id}", response_model=ApiResponse[CombatResponse])
async def get_combat(
    combat_id: int,
    db: AsyncSession = Depends(get_db),
    registry: Registry = Depends(get_registry),
    winners: WinnerService = Depends(get_winner_service),
):
    combat = registry.get_combat_by_id(combat_id)
    if combat is None:
        raise NotFoundError("Combat", combat_id, code=ErrorCode.COMBAT_NOT_FOUND)
    winner = await winners.get_winner(db, combat_id)
    return success_response(_combat_response(combat, winner))


@router.get("/combats/{combat_id}/results", response_model=ApiResponse[CombatVoteResultsResponse])
async def get_combat_results(
    combat_id: int,
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    """Head-to-head totals; winning_fighter only on a strict majority."""
    results = await voting.get_combat_vote_results(db, combat_id)
    if results is None:
        raise NotFoundError("Combat", combat_id, code=ErrorCode.COMBAT_NOT_FOUND)
    return success_response(CombatVoteResultsResponse(**results.to_dict()))


@router.get("/results", response_model=ApiResponse[List[VoteResultResponse]])
async def get_results(
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    """Vote totals for every participant, highest first."""
    results = await voting.get_vote_results(db)
    return success_response([VoteResultResponse(**result.to_dict()) for result in results])


@router.get("/results/combats", response_model=ApiResponse[List[CombatVoteResultsResponse]])
async def get_all_combat_results(
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    results = await voting.get_all_combat_vote_results(db)
    return success_response([CombatVoteResultsResponse(**result.to_dict()) for result in results])
