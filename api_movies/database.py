import logging

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from .errors import DatabaseNotInitializedError

logger = logging.getLogger(__name__)


class Database:
    """
    Shared MongoDB handle passed to the handlers.

    The connection is opened once by ``connect`` and then only read from;
    collections requested before that raise ``DatabaseNotInitializedError``.
    """

    def __init__(self, uri: str, name: str, client: MongoClient | None = None):
        self.uri = uri
        self.name = name
        self._client = client
        self._db = None

    @property
    def connected(self):
        return self._db is not None

    def connect(self):
        """
        Open the client and check the server answers.

        Raises:
            PyMongoError: When the server cannot be reached.
        """
        if self._db is not None:
            return

        client = self._client or MongoClient(self.uri)
        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            logger.error("Failed to connect to MongoDB: %s", exc)
            raise

        self._client = client
        self._db = client[self.name]
        logger.info("Connected to MongoDB database %s", self.name)

    def get_collection(self, name: str) -> Collection:
        """
        Return a collection handle.

        Args:
            name (str): Collection name.

        Returns:
            Collection: PyMongo collection handle.
        """
        if self._db is None:
            raise DatabaseNotInitializedError()
        return self._db[name]

    def close(self):
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
