"""
MongoDB Database Connector (Singleton Pattern).
"""
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from core.config import config
from core.logging import get_logger

logger = get_logger("database")

_db_client: MongoClient | None = None
_database: Database | None = None


def get_db() -> Database:
    """
    Returns the MongoDB database instance (Singleton).

    Returns:
        Database: The MongoDB database object.
    """
    global _db_client, _database

    if _database is None:
        try:
            logger.info("Connecting to MongoDB", extra={"database": config.DATABASE_NAME})
            _db_client = MongoClient(config.MONGO_URI, tz_aware=False)
            _database = _db_client[config.DATABASE_NAME]
            logger.info("Successfully connected to MongoDB", extra={"database": config.DATABASE_NAME})
        except Exception:
            logger.error("Failed to connect to MongoDB", exc_info=True)
            raise

    return _database


def get_collection(name: str) -> Collection:
    """Shortcut for get_db()[name]."""
    return get_db()[name]


def ensure_indexes(db: Database | None = None) -> None:
    """
    Create the unique keys the crawler relies on.

    - prices: one record per (id, grade)
    - report collection: one document per report id
    """
    db = db if db is not None else get_db()
    db[config.PRICE_COLLECTION].create_index(
        [("id", ASCENDING), ("grade", ASCENDING)],
        unique=True,
        name="id_grade_unique",
    )
    db[config.REPORT_COLLECTION].create_index(
        [("id", ASCENDING)],
        unique=True,
        name="report_id_unique",
    )
    logger.debug("Indexes ensured")


def close_db():
    """Close the database connection."""
    global _db_client, _database

    if _db_client:
        try:
            _db_client.close()
            _db_client = None
            _database = None
            logger.info("Database connection closed")
        except Exception:
            logger.error("Error closing database connection", exc_info=True)
