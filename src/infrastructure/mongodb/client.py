"""
MongoDB connection management.

Provides a connection pool with an explicit lifecycle (connect, acquire,
close) and an in-memory mock for local development and tests.

Using the repository pattern means most code never touches this module
directly - route handlers get a VideoRepository, and the repository
acquires a database handle from the pool for each query.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncGenerator, Optional, Protocol

logger = logging.getLogger(__name__)


class MongoConnectionError(Exception):
    """Raised when the database can't be reached."""
    pass


@dataclass
class MongoConfig:
    """Configuration for a MongoDB connection."""
    uri: str
    database: str
    server_selection_timeout_ms: int = 5000


class MongoPool(Protocol):
    """
    Protocol for database pools.

    Repositories never see the pool, only the database handle it yields.
    """

    async def connect(self) -> None: ...

    def acquire(self): ...

    async def close(self) -> None: ...

    @property
    def is_connected(self) -> bool: ...


class MongoConnectionPool:
    """
    Process-wide MongoDB pool backed by motor.

    motor keeps its own socket pool inside the client, so acquire() only
    hands out the database handle and release is bookkeeping. The point of
    the explicit lifecycle is that the application owns it: the pool is
    created in the lifespan handler and closed on shutdown.
    """

    def __init__(self, config: MongoConfig) -> None:
        self._config = config
        self._client = None
        self._database = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """
        Create the client and verify the server answers a ping.

        Safe to call more than once.
        """
        if self._client is not None:
            return

        from motor.motor_asyncio import AsyncIOMotorClient
        from pymongo.errors import PyMongoError

        client = AsyncIOMotorClient(
            self._config.uri,
            serverSelectionTimeoutMS=self._config.server_selection_timeout_ms,
        )

        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            logger.error(
                "MongoDB connection failed",
                extra={"database": self._config.database, "error": str(e)}
            )
            raise MongoConnectionError(f"Database connection failed: {e}")

        self._client = client
        self._database = client[self._config.database]

        logger.info(
            "Connected to MongoDB",
            extra={"database": self._config.database}
        )

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[Any, None]:
        """
        Yield the database handle for the duration of one unit of work.

        Connects lazily if the lifespan handler hasn't done so yet.
        """
        if self._client is None:
            await self.connect()

        logger.debug("Acquired MongoDB handle")
        try:
            yield self._database
        finally:
            logger.debug("Released MongoDB handle")

    async def close(self) -> None:
        if self._client is None:
            return

        self._client.close()
        self._client = None
        self._database = None
        logger.info("Closed MongoDB connection")


# ---------------------------------------------------------------------------
# Mock Database for Local Development
# ---------------------------------------------------------------------------

def _matches(document: dict, filter_: dict) -> bool:
    return all(document.get(key) == value for key, value in filter_.items())


class MockCursor:
    """
    Just enough of motor's cursor interface for the repositories:
    sort() and to_list().
    """

    def __init__(self, documents: list[dict]) -> None:
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "MockCursor":
        # Missing values sort first, as in MongoDB
        self._documents = sorted(
            self._documents,
            key=lambda doc: (doc.get(key) is not None, doc.get(key)),
            reverse=direction < 0,
        )
        return self

    async def to_list(self, length: Optional[int] = None) -> list[dict]:
        if length is None:
            return list(self._documents)
        return list(self._documents[:length])


class MockCollection:
    """In-memory collection supporting equality filters only."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._documents: list[dict] = []

    def find(self, filter_: Optional[dict] = None) -> MockCursor:
        filter_ = filter_ or {}
        return MockCursor([
            dict(doc) for doc in self._documents
            if _matches(doc, filter_)
        ])

    async def find_one(self, filter_: Optional[dict] = None) -> Optional[dict]:
        filter_ = filter_ or {}
        for doc in self._documents:
            if _matches(doc, filter_):
                return dict(doc)
        return None

    async def insert_one(self, document: dict) -> None:
        self._documents.append(dict(document))

    async def insert_many(self, documents: list[dict]) -> None:
        for document in documents:
            await self.insert_one(document)

    def _clear(self) -> None:
        self._documents.clear()


class MockMongoDatabase:
    """
    In-memory stand-in for a motor database.

    Collections are created on first access, like in MongoDB.
    """

    def __init__(self) -> None:
        self._collections: dict[str, MockCollection] = {}

    def __getitem__(self, name: str) -> MockCollection:
        if name not in self._collections:
            self._collections[name] = MockCollection(name)
        return self._collections[name]

    async def command(self, name: str) -> dict:
        return {"ok": 1.0}

    def _clear(self) -> None:
        """Clear all collections (for test cleanup)."""
        for collection in self._collections.values():
            collection._clear()


class MockMongoPool:
    """
    Pool that always hands out the same in-memory database.

    Sharing one database across requests means data written by a test or
    a seed step is visible to later requests.
    """

    def __init__(self, database: Optional[MockMongoDatabase] = None) -> None:
        self.database = database or MockMongoDatabase()
        self._connected = False
        logger.info("Initialized mock MongoDB pool (in-memory)")

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def connect(self) -> None:
        self._connected = True

    @asynccontextmanager
    async def acquire(self) -> AsyncGenerator[MockMongoDatabase, None]:
        if not self._connected:
            await self.connect()
        yield self.database

    async def close(self) -> None:
        self._connected = False


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_mongo_pool(
    config: Optional[MongoConfig] = None,
    mock_mode: bool = False,
) -> MongoPool:
    """
    Create a database pool based on configuration.

    Args:
        config: MongoDB configuration (required if not mock_mode)
        mock_mode: If True, return an in-memory pool

    The returned pool is not connected yet; call connect() or let the first
    acquire() do it.
    """
    if mock_mode:
        return MockMongoPool()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return MongoConnectionPool(config)
