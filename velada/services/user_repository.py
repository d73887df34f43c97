"""
velada/services/user_repository.py
User Store - lookup, listing and first-login upsert of users
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from velada.orm.user import User

logger = logging.getLogger(__name__)


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id).limit(1))
    return result.scalar_one_or_none()


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email.lower()).limit(1))
    return result.scalar_one_or_none()


async def create_user(
    db: AsyncSession,
    email: str,
    name: str,
    image: Optional[str] = None,
    is_admin: bool = False,
) -> User:
    user = User(email=email.lower(), name=name, image=image, is_admin=is_admin)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def create_or_update_user(
    db: AsyncSession,
    email: str,
    name: str,
    image: Optional[str] = None,
    is_admin: Optional[bool] = None,
) -> Tuple[User, bool]:
    """
    Upsert a user keyed by email.

    Existing users keep their id; name and image are refreshed, and is_admin
    only changes when explicitly passed. Two first logins racing on the same
    email resolve through the unique index: the loser re-reads the winner's row.

    Returns:
        (user, created)
    """
    existing = await get_user_by_email(db, email)
    if existing is None:
        try:
            user = await create_user(db, email, name, image, bool(is_admin))
            logger.info(f"Created user {user.id} for {user.email}")
            return user, True
        except IntegrityError:
            await db.rollback()
            existing = await get_user_by_email(db, email)
            if existing is None:
                raise

    changed = False
    if name and existing.name != name:
        existing.name = name
        changed = True
    if image is not None and existing.image != image:
        existing.image = image
        changed = True
    if is_admin is not None and existing.is_admin != is_admin:
        existing.is_admin = is_admin
        changed = True

    if changed:
        await db.commit()
        await db.refresh(existing)
    return existing, False


async def list_users(db: AsyncSession, limit: int, offset: int) -> List[User]:
    result = await db.execute(
        select(User).order_by(User.created_at, User.id).limit(limit).offset(offset)
    )
    return list(result.scalars().all())


async def count_users(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(User.id)))
    return result.scalar() or 0


async def search_users_by_name(db: AsyncSession, term: str, limit: int = 20) -> List[User]:
    """Case-insensitive partial match on the display name."""
    pattern = f"%{term.strip()}%"
    result = await db.execute(
        select(User).where(User.name.ilike(pattern)).order_by(User.name).limit(limit)
    )
    return list(result.scalars().all())