"""
velada/routes/votes.py
Vote actions: cast, read own votes, clear all (admin)
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from velada.config import settings
from velada.database import get_db
from velada.errors import log_internal_error
from velada.middleware.rate_limit import limiter
from velada.orm.user import User
from velada.routes.deps import get_voting_service
from velada.schemas.common import ApiResponse, success_response
from velada.schemas.voting import CastVoteRequest, ConfirmRequest, VoteResponse, VoteStateResponse
from velada.security.rbac import get_current_user, require_admin
from velada.services.voting_service import VotingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/votes", tags=["Votes"])


@router.post("", response_model=ApiResponse[VoteResponse], status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.vote_rate_limit)
async def cast_vote(
    request: Request,
    vote_data: CastVoteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    """
    Cast the caller's vote in one combat.

    Errors:
    - 400 INVALID_PARTICIPANT / INVALID_COMBAT / PARTICIPANT_NOT_IN_COMBAT
    - 409 ALREADY_VOTED / VOTING_CLOSED
    """
    logger.info(f"Casting vote for participant: {vote_data.participant_id} (combat {vote_data.combat_id})")
    vote = await voting.cast_vote(db, current_user.id, vote_data.combat_id, vote_data.participant_id)
    return success_response(VoteResponse.model_validate(vote), message="Vote recorded")


@router.get("/me", response_model=ApiResponse[List[VoteResponse]])
async def get_my_votes(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    """Every vote the caller has cast, ordered by combat."""
    votes = await voting.get_user_votes(db, current_user.id)
    return success_response([VoteResponse.model_validate(vote) for vote in votes])


@router.get("/{combat_id}/me", response_model=ApiResponse[VoteStateResponse])
async def get_vote_state(
    combat_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    """The caller's own vote for combat_id (participant_id is null if none)."""
    vote = await voting.get_user_vote(db, current_user.id, combat_id)
    return success_response(VoteStateResponse(
        combat_id=combat_id,
        has_voted=vote is not None,
        participant_id=vote.participant_id if vote else None,
    ))


@router.post("/clear", response_model=ApiResponse[bool])
async def clear_votes(
    body: ConfirmRequest = ConfirmRequest(),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    voting: VotingService = Depends(get_voting_service),
):
    """Delete every vote. Admin only; repeated calls succeed."""
    logger.warning(f"Admin {admin.id} clearing all votes (confirm={body.confirm})")
    if not await voting.clear_votes(db):
        raise log_internal_error(RuntimeError("vote store delete failed"), "clear_votes")
    return success_response(True, message="All votes cleared")
