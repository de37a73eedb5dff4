import asyncio
import logging
from motor.motor_asyncio import AsyncIOMotorClient

from leave_portal.config import settings
from leave_portal.database import init_db, ensure_default_admin
from leave_portal.logging_config import setup_logging

logger = logging.getLogger("leave_portal.create_admin")


async def create_admin():
    setup_logging()
    logger.info("Connecting to MongoDB: %s", settings.MONGODB_DB_NAME)
    client = AsyncIOMotorClient(settings.MONGODB_URL)
    await init_db(client[settings.MONGODB_DB_NAME])

    admin = await ensure_default_admin()
    logger.info("Admin account: %s (%s)", admin.email, admin.staff_id)
    client.close()

if __name__ == "__main__":
    asyncio.run(create_admin())
