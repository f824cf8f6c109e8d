import argparse
import asyncio
import getpass
import logging

from sqlalchemy import select

from app.core.db import AsyncSessionLocal, init_models
from app.core.security import hash_password
from app.models.user_models import User

logger = logging.getLogger(__name__)


async def create_admin(username: str, password: str):
    await init_models()
    async with AsyncSessionLocal() as session:
        existing = await session.execute(select(User).where(User.username == username))
        if existing.scalars().first():
            logger.warning("User '%s' already exists, nothing to do", username)
            return

        admin = User(
            username=username,
            full_name="Administrator",
            password_hash=hash_password(password),
            role="admin",
            is_active=True,
        )
        session.add(admin)
        await session.commit()
        logger.info("Admin user '%s' created", username)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Create the first admin account")
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password", help="prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    if len(password) < 6:
        parser.error("password must be at least 6 characters")
    asyncio.run(create_admin(args.username, password))


if __name__ == "__main__":
    main()
