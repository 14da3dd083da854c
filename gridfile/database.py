# gridfile/database.py
"""
MongoDB connection handling.

The client is created lazily from settings and shared for the process.
Registries only need the database handle returned by get_database().
"""

import logging
from typing import Optional

from dotenv import load_dotenv
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from gridfile.config import get_settings

# Load .env file (MONGODB_URL lives there)
load_dotenv()

logger = logging.getLogger(__name__)

_client: Optional[AsyncMongoClient] = None


def get_client() -> AsyncMongoClient:
    """Get or create the shared async MongoDB client."""
    global _client

    if _client is None:
        settings = get_settings()
        _client = AsyncMongoClient(settings.MONGODB_URL)
        logger.info("MongoDB client created")

    return _client


def get_database(name: Optional[str] = None) -> AsyncDatabase:
    """
    Get a database handle for the GridFS bucket.

    Args:
        name: Database name (default: MONGODB_DATABASE setting)
    """
    return get_client()[name or get_settings().MONGODB_DATABASE]


async def close_client() -> None:
    """Close the shared client (for shutdown and tests)."""
    global _client

    if _client is not None:
        await _client.close()
        _client = None
        logger.info("MongoDB client closed")
