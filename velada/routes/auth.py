"""
velada/routes/auth.py
Session endpoints for the OAuth-backed frontend

The OAuth exchange itself happens in the frontend; the backend only trusts
the signed token it hands over.
"""
import logging

from fastapi import APIRouter, Depends, Response

from velada.config import settings
from velada.orm.user import User
from velada.schemas.common import ApiResponse, success_response
from velada.schemas.users import UserResponse
from velada.security.rbac import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(current_user: User = Depends(get_current_user)):
    """The authenticated caller's profile."""
    return success_response(UserResponse.model_validate(current_user))


@router.post("/logout", response_model=ApiResponse[bool])
async def logout(response: Response):
    """Drop the auth cookie. Bearer tokens simply expire."""
    response.delete_cookie(settings.auth_cookie_name)
    return success_response(True, message="Signed out")
