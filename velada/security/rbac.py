"""
velada/security/rbac.py
Authentication dependencies and admin gate

Identity arrives as an HS256 JWT whose "sub" is the user's email, either in
an Authorization: Bearer header or in the auth cookie set by the frontend
after the OAuth login. The first valid token seen for an email creates the
User row (optional "name" and "picture" claims fill the profile).
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from velada.config import settings
from velada.database import get_db
from velada.errors import ErrorCode, UnauthorizedError, ForbiddenError
from velada.orm.user import User
from velada.services import user_repository
from velada.utils.content_validation import validate_user_name

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# ================= TOKEN UTILS =================

def create_access_token(
    email: str,
    name: Optional[str] = None,
    picture: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed access token for email."""
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode = {
        "sub": email.lower(),
        "exp": expire,
        "type": "access",
    }
    if name:
        to_encode["name"] = name
    if picture:
        to_encode["picture"] = picture
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict:
    """
    Decode and validate an access token.

    Raises:
        UnauthorizedError: expired, malformed or wrong-type token
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired", code=ErrorCode.AUTH_EXPIRED)
    except JWTError:
        raise UnauthorizedError("Invalid token", code=ErrorCode.AUTH_INVALID)

    if payload.get("type") != "access" or not payload.get("sub"):
        raise UnauthorizedError("Invalid token payload", code=ErrorCode.AUTH_INVALID)
    return payload


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name)


async def user_from_claims(db: AsyncSession, payload: dict) -> Optional[User]:
    """Look up the token's user, creating it on first sight when a name is present."""
    email = payload["sub"]
    user = await user_repository.get_user_by_email(db, email)
    if user is not None:
        return user

    raw_name = payload.get("name")
    if not raw_name:
        return None

    checked = validate_user_name(raw_name)
    name = checked.sanitized_name or email.split("@")[0]
    if not checked.is_valid:
        logger.warning(f"Display name for {email} rejected ({checked.error}); storing sanitized form")

    user, _ = await user_repository.create_or_update_user(
        db,
        email=email,
        name=name,
        image=payload.get("picture"),
        is_admin=email.lower() in settings.admin_emails,
    )
    return user


# ================= AUTH DEPENDENCIES =================

async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Authenticated caller. Returns 401 if the token is missing, invalid,
    expired or names an unknown user.
    """
    token = extract_token(request, credentials)
    if not token:
        raise UnauthorizedError()

    payload = decode_token(token)
    user = await user_from_claims(db, payload)
    if user is None:
        raise UnauthorizedError("Unknown user", code=ErrorCode.AUTH_INVALID)

    request.state.user = {"id": user.id, "is_admin": user.is_admin}
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Authenticated caller with is_admin set; 403 otherwise."""
    if not current_user.is_admin:
        logger.warning(f"Access denied: user {current_user.id} attempted an admin-only action")
        raise ForbiddenError()
    return current_user
