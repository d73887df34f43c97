"""
velada/seed/seed_all.py
Database seeding (idempotent)

- Admin users from ADMIN_EMAILS
- Optional demo users with one vote per combat, for local development
"""
import asyncio
import logging
import random
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from velada.config import settings
from velada.core.editions import get_registry
from velada.core.registry import Registry
from velada.database import AsyncSessionLocal, init_db
from velada.exceptions import AlreadyVoted, VotingClosed
from velada.orm.user import User
from velada.services import user_repository
from velada.services.voting_service import VotingService

logger = logging.getLogger(__name__)

DEMO_EMAIL_DOMAIN = "demo.velada.local"


async def seed_admins(db: AsyncSession, emails: Optional[List[str]] = None) -> List[User]:
    """Create or promote one admin per email. Existing names are kept."""
    admins = []
    for email in emails if emails is not None else settings.admin_emails:
        existing = await user_repository.get_user_by_email(db, email)
        name = existing.name if existing else email.split("@")[0]
        user, created = await user_repository.create_or_update_user(db, email=email, name=name, is_admin=True)
        logger.info(f"{'Created' if created else 'Promoted'} admin {user.email}")
        admins.append(user)
    return admins


async def seed_demo_votes(
    db: AsyncSession,
    registry: Registry,
    user_count: int = 20,
    seed: int = 2025,
) -> int:
    """
    Create demo users and cast one random vote per user per combat.

    Votes that already exist (or hit a closed combat) are skipped, so
    re-running only fills the gaps.

    Returns:
        Number of votes inserted
    """
    rng = random.Random(seed)
    voting = VotingService(registry)
    inserted = 0

    for index in range(1, user_count + 1):
        user, _ = await user_repository.create_or_update_user(
            db, email=f"fan{index}@{DEMO_EMAIL_DOMAIN}", name=f"Fan {index}"
        )
        for combat in registry.combats:
            choice = rng.choice(combat.fighters)
            try:
                await voting.cast_vote(db, user.id, combat.id, choice.name)
                inserted += 1
            except (AlreadyVoted, VotingClosed):
                continue

    logger.info(f"✓ Demo votes inserted: {inserted}")
    return inserted


async def seed_database(demo_users: int = 0):
    """Run all seeders in order."""
    try:
        logger.info("[1/3] Initializing database...")
        await init_db()

        async with AsyncSessionLocal() as db:
            logger.info("[2/3] Seeding admins...")
            admins = await seed_admins(db)
            logger.info(f"✓ {len(admins)} admin(s) ready")

            if demo_users > 0:
                logger.info(f"[3/3] Seeding demo votes for {demo_users} users...")
                await seed_demo_votes(db, get_registry(), demo_users)
            else:
                logger.info("[3/3] Demo votes skipped")

        logger.info("✅ DATABASE SEEDING COMPLETE!")

    except Exception as e:
        logger.error(f"❌ Seeding failed: {str(e)}", exc_info=True)
        raise


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    asyncio.run(seed_database())
