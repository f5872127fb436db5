"""
MongoDB Connection Utility

MongoDB stores:
- Rate-limit counters shared across API instances

WHY MongoDB for these?
- Atomic $inc upserts give a race-free counter per client and window
- TTL indexes expire finished windows without a cleanup job
"""
import logging

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from campus_recruit.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(settings.mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


# Collection name constants (avoid typos)
COLLECTIONS = {
    "rate_limits": "rate_limits",
}


def get_collection(name: str) -> Collection:
    """Get a specific collection by its key in COLLECTIONS."""
    db = get_mongo_db()
    return db[COLLECTIONS[name]]


def ping_mongo() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


def init_mongo_indexes():
    """
    Create indexes for the rate-limit collection.
    Call this once during app startup when the mongo backend is enabled.
    """
    collection = get_collection("rate_limits")
    # Documents are removed as soon as their window has ended
    collection.create_index([("expires_at", ASCENDING)], expireAfterSeconds=0)
