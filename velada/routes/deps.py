"""
velada/routes/deps.py
Service dependencies for the routers

Services are stateless; a fresh one per request keeps registry injection
overridable through app.dependency_overrides[get_registry].
"""
from fastapi import Depends

from velada.core.editions import get_registry
from velada.core.registry import Registry
from velada.services.voting_service import VotingService
from velada.services.winner_service import WinnerService


def get_voting_service(registry: Registry = Depends(get_registry)) -> VotingService:
    return VotingService(registry)


def get_winner_service(registry: Registry = Depends(get_registry)) -> WinnerService:
    return WinnerService(registry)
