"""
velada/exceptions.py
Typed failures raised by the registry, voting and winner services

Each error carries a machine-readable code. Request handlers translate them
into the JSON error envelope (see velada.errors).
"""
from typing import Optional


class VotingError(Exception):
    """Base exception for vote and winner rule violations."""
    code: str = "VOTING_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        if code:
            self.code = code
        super().__init__(message)


class InvalidParticipant(VotingError):
    """Participant name is not part of the edition."""
    code = "INVALID_PARTICIPANT"

    def __init__(self, participant_id):
        self.participant_id = participant_id
        super().__init__(f"Invalid participant: {participant_id}")


class InvalidCombat(VotingError):
    """Combat id does not resolve to a registry combat."""
    code = "INVALID_COMBAT"

    def __init__(self, combat_id):
        self.combat_id = combat_id
        super().__init__(f"Invalid combat ID: {combat_id}")


class ParticipantNotInCombat(VotingError):
    """Participant exists but fights in a different combat."""
    code = "PARTICIPANT_NOT_IN_COMBAT"

    def __init__(self, participant_id, combat_id):
        self.participant_id = participant_id
        self.combat_id = combat_id
        super().__init__(f"Participant {participant_id} is not in combat {combat_id}")


class AlreadyVoted(VotingError):
    """A vote already exists for this (user, combat) pair."""
    code = "ALREADY_VOTED"

    def __init__(self, user_id, combat_id):
        self.user_id = user_id
        self.combat_id = combat_id
        super().__init__(f"User {user_id} has already voted in combat {combat_id}")


class VotingClosed(VotingError):
    """The combat already has a recorded winner."""
    code = "VOTING_CLOSED"

    def __init__(self, combat_id):
        self.combat_id = combat_id
        super().__init__(f"Voting is closed for combat {combat_id}")
