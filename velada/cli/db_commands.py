"""
Database CLI commands: init, seed
"""
import asyncio
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from velada.config import settings
from velada.database import AsyncSessionLocal, close_db, init_db
from velada.seed.seed_all import seed_database

T = TypeVar("T")


def run_in_session(work: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run work(db) on a fresh session and dispose the engine afterwards."""
    async def runner():
        try:
            async with AsyncSessionLocal() as db:
                return await work(db)
        finally:
            await close_db()

    return asyncio.run(runner())


class DbCommand:
    """Database CLI command handler."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def execute(self, args) -> int:
        if args.db_action == "init":
            return self._init(args)
        elif args.db_action == "seed":
            return self._seed(args)
        else:
            print("Error: Unknown database action")
            return 1

    def _init(self, args) -> int:
        print("=== Database Init ===")
        print(f"Database: {settings.database_url}")

        if self.dry_run:
            print("[DRY RUN] Would create missing tables")
            return 0

        async def runner():
            try:
                await init_db()
            finally:
                await close_db()

        asyncio.run(runner())
        print("✓ Tables ready")
        return 0

    def _seed(self, args) -> int:
        print("=== Database Seed ===")
        print(f"Admins: {', '.join(settings.admin_emails) or '(none configured)'}")
        print(f"Demo users: {args.demo_users}")

        if self.dry_run:
            print("[DRY RUN] Would seed admins and demo votes")
            return 0

        async def runner():
            try:
                await seed_database(demo_users=args.demo_users)
            finally:
                await close_db()

        asyncio.run(runner())
        print("✓ Seed complete")
        return 0
