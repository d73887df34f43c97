"""
velada/schemas/voting.py
Request/response schemas for vote and winner actions
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ================= REQUEST SCHEMAS =================

class CastVoteRequest(BaseModel):
    """
    Used by: POST /api/votes

    The voter is the authenticated caller, never a body field.
    """
    participant_id: str = Field(..., min_length=1, max_length=50)
    combat_id: int = Field(..., ge=1)

    @field_validator("participant_id")
    @classmethod
    def strip_participant(cls, v: str) -> str:
        return v.strip()

    model_config = ConfigDict(json_schema_extra={
        "example": {"participant_id": "peereira", "combat_id": 1}
    })


class SetWinnerRequest(BaseModel):
    """Used by: POST /api/winners"""
    combat_id: int = Field(..., ge=1)
    participant_id: str = Field(..., min_length=1, max_length=50)

    @field_validator("participant_id")
    @classmethod
    def strip_participant(cls, v: str) -> str:
        return v.strip()


class ConfirmRequest(BaseModel):
    """Used by: POST /api/votes/clear, POST /api/winners/clear"""
    confirm: bool = False


# ================= RESPONSE SCHEMAS =================

class VoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    participant_id: str
    combat_id: int
    created_at: datetime


class VoteStateResponse(BaseModel):
    combat_id: int
    has_voted: bool
    participant_id: Optional[str] = None


class CombatWinnerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    combat_id: int
    participant_id: str
    created_at: datetime


class VoteResultResponse(BaseModel):
    participant_id: str
    vote_count: int


class CombatVoteResultsResponse(BaseModel):
    combat_id: int
    fighter1: str
    fighter2: str
    fighter1_votes: int
    fighter2_votes: int
    total_votes: int
    winning_fighter: Optional[str] = None


class CombatResponse(BaseModel):
    id: int
    fighter1: str
    fighter2: str
    year: Optional[str] = None
    fighter1_avatar: str
    fighter2_avatar: str
    status: str
    winner: Optional[str] = None


class CombatListResponse(BaseModel):
    combats: List[CombatResponse]
    total: int
