"""
velada/routes/users.py
Public user JSON endpoints: paginated list, search, lookup by id
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from velada.config import feature_flags
from velada.database import get_db
from velada.errors import BadRequestError, NotFoundError, ErrorCode
from velada.schemas.common import ApiResponse, PaginatedData, success_response
from velada.schemas.users import UserResponse
from velada.services import user_repository
from velada.utils.pagination import parse_pagination_params, calculate_pagination

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=ApiResponse[PaginatedData[UserResponse]])
async def list_users(
    limit: Optional[str] = Query(None, description="Page size, clamped to 1-100 (default 10)"),
    offset: Optional[str] = Query(None, description="Rows to skip, at least 0 (default 0)"),
    db: AsyncSession = Depends(get_db),
):
    """
    Paginated user list.

    Malformed limit/offset values fall back to the defaults instead of
    failing the request.
    """
    params = parse_pagination_params(limit, offset)
    total = await user_repository.count_users(db)
    users = await user_repository.list_users(db, params.limit, params.offset)

    return success_response({
        "items": [UserResponse.model_validate(user) for user in users],
        "pagination": calculate_pagination(total, params.limit, params.offset).to_dict(),
    })


@router.get("/search", response_model=ApiResponse[List[UserResponse]])
async def search_users(
    q: str = Query("", max_length=100),
    db: AsyncSession = Depends(get_db),
):
    """Case-insensitive partial match on user names."""
    if not feature_flags.FEATURE_USER_SEARCH:
        raise NotFoundError("Endpoint")
    if len(q.strip()) < 2:
        raise BadRequestError("Search term must be at least 2 characters", details={"field": "q"})
    users = await user_repository.search_users_by_name(db, q)
    return success_response([UserResponse.model_validate(user) for user in users])


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await user_repository.get_user_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", user_id, code=ErrorCode.USER_NOT_FOUND)
    return success_response(UserResponse.model_validate(user))
