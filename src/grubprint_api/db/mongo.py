"""MongoDB connection management using Motor async driver."""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase


class MongoConnection:
    """
    MongoDB connection handle.

    Created once at startup and passed to whatever needs it; there is no
    module-level client.
    """

    def __init__(self, uri: str, db_name: str):
        """
        Initialize MongoDB connection.

        Args:
            uri: MongoDB connection URI
            db_name: Database name to use
        """
        self.client: AsyncIOMotorClient | None = AsyncIOMotorClient(uri)
        self.db_name = db_name

    def close(self) -> None:
        """Close MongoDB connection."""
        if self.client is not None:
            self.client.close()
            self.client = None

    def get_database(self, name: str | None = None) -> AsyncIOMotorDatabase:
        """
        Get a database instance.

        Raises:
            RuntimeError: If the connection was closed
        """
        if self.client is None:
            raise RuntimeError("MongoDB connection is closed")
        return self.client[name or self.db_name]

    async def ping(self) -> None:
        """Fail fast if the server is unreachable."""
        await self.get_database().command("ping")

    @property
    def is_connected(self) -> bool:
        return self.client is not None
