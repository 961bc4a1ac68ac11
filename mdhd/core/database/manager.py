import inspect
from typing import Optional
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from loguru import logger

from mdhd.core.config import MongoSettings


class DatabaseManager:
    """
    Owns the MongoDB client and hands out the configured database.

    One manager is created at startup and passed to whoever needs the
    database; there is no module-level instance.
    """
    def __init__(self, settings: MongoSettings, client: Optional[AsyncMongoClient] = None):
        self.settings = settings
        self.client = client
        self.db: Optional[AsyncDatabase] = None

    @property
    def connection_url(self) -> str:
        return f"mongodb://{self.settings.host}:{self.settings.port}"

    def init(self) -> AsyncDatabase:
        if self.db is not None:
            return self.db
        try:
            if self.client is None:
                self.client = AsyncMongoClient(self.connection_url)
            self.db = self.client[self.settings.database_name]
            logger.info(f"Connected to MongoDB (Async): {self.connection_url}/{self.settings.database_name}")
        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise
        return self.db

    async def close(self):
        if self.client is not None:
            result = self.client.close()
            # pymongo's async client closes asynchronously; test doubles may not
            if inspect.isawaitable(result):
                await result
            logger.debug("MongoDB client closed")
        self.client = None
        self.db = None
