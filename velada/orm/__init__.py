from .base import Base

from .user import User
from .vote import Vote
from .combat_winner import CombatWinner


__all__ = [
    "Base",
    "User",
    "Vote",
    "CombatWinner",
]
