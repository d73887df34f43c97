"""
velada/routes/__init__.py
Route registration
"""
from fastapi import APIRouter

from velada.config import feature_flags
from velada.routes import auth, combats, users, votes, winners

router = APIRouter()

router.include_router(auth.router)
router.include_router(votes.router)
router.include_router(winners.router)
router.include_router(combats.router)
router.include_router(users.router)


@router.get("", tags=["Root"])
async def api_index():
    """Endpoint index for the JSON API."""
    endpoints = {
        "auth": {"me": "GET /api/auth/me", "logout": "POST /api/auth/logout"},
        "votes": {
            "cast": "POST /api/votes",
            "mine": "GET /api/votes/me",
            "state": "GET /api/votes/{combat_id}/me",
            "clear": "POST /api/votes/clear",
        },
        "winners": {
            "set": "POST /api/winners",
            "list": "GET /api/winners",
            "get": "GET /api/winners/{combat_id}",
            "delete": "DELETE /api/winners/{combat_id}",
            "clear": "POST /api/winners/clear",
        },
        "combats": {
            "list": "GET /api/combats",
            "get": "GET /api/combats/{combat_id}",
            "results": "GET /api/combats/{combat_id}/results",
        },
        "results": {"participants": "GET /api/results", "combats": "GET /api/results/combats"},
        "users": {
            "list": "GET /api/users?limit={limit}&offset={offset}",
            "get": "GET /api/users/{user_id}",
        },
    }
    if feature_flags.FEATURE_USER_SEARCH:
        endpoints["users"]["search"] = "GET /api/users/search?q={term}"
    return {"success": True, "data": {"endpoints": endpoints}}
