import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from settleup.core.config import settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    # Stored timestamps are UTC; read them back as aware datetimes
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URL, tz_aware=True)
    mongodb.db = mongodb.client[settings.DATABASE_NAME]

    await create_indexes(mongodb.db)
    logger.info(f"Connected to MongoDB: {settings.DATABASE_NAME}")

async def close_mongo_connection():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes(db: AsyncIOMotorDatabase):
    """Create database indexes."""
    # Membership lookups for the query views
    await db["groups"].create_index("member_ids")
    await db["groups"].create_index([("member_ids", 1), ("status", 1)])

    # Completed groups are removed by the TTL monitor once their
    # scheduled deletion time has passed
    await db["groups"].create_index("scheduled_deletion_at", expireAfterSeconds=0)

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
