"""
MongoDB store gateway.

Owns the single MongoClient used by the process. The gateway is built once
by the application entry point, connected with connect(), handed to whatever
needs it, and closed with close() on shutdown. There is no module-level
connection cache.

Every method is a thin, synchronous wrapper over one driver call against the
configured collection. Async callers go through AsyncGatewayAdapter.
"""
import logging
import threading
from typing import Any, Dict, List, Optional

from pymongo import MongoClient
from pymongo.errors import ConfigurationError, ConnectionFailure
from pymongo.results import DeleteResult, InsertManyResult, InsertOneResult, UpdateResult

from config import DatabaseConfig

logger = logging.getLogger(__name__)

EXPLAIN_VERBOSITY = "executionStats"


class MongoGateway:
    """Synchronous gateway over one logical collection.

    Thread safety: MongoClient is itself thread-safe and pools connections,
    so concurrent callers share it freely. The lock only guards the
    connect/close transitions.
    """

    def __init__(self, config: DatabaseConfig, client_factory=MongoClient):
        """Initialize gateway.

        Args:
            config: Database configuration (uri, database name, collection)
            client_factory: Callable building the client, injectable for tests
        """
        self.config = config
        self._client_factory = client_factory
        self._client: Optional[MongoClient] = None
        self._lock = threading.Lock()

    # === Lifecycle ===

    def connect(self) -> None:
        """Create the client once; later calls reuse it."""
        with self._lock:
            if self._client is not None:
                return
            if not self.config.uri:
                raise ConfigurationError("MONGODB_URI environment variable is not defined")
            self._client = self._client_factory(
                self.config.uri,
                serverSelectionTimeoutMS=self.config.timeout_ms,
                appname="mongoflow-studio",
            )
            logger.info(
                f"MongoDB client created (database: {self.config.name}, "
                f"collection: {self.config.collection})"
            )

    def close(self) -> None:
        """Close the client if one was created."""
        with self._lock:
            if self._client is None:
                return
            self._client.close()
            self._client = None
            logger.info("MongoDB client closed")

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def ping(self) -> bool:
        """Round-trip to the server; raises on connectivity failure."""
        self._database().client.admin.command("ping")
        return True

    # === Writes ===

    def insert_one(self, document: Dict[str, Any]) -> InsertOneResult:
        return self._collection().insert_one(document)

    def insert_many(self, documents: List[Dict[str, Any]]) -> InsertManyResult:
        return self._collection().insert_many(documents)

    def update_many(self, filter: Dict[str, Any], update: Dict[str, Any]) -> UpdateResult:
        return self._collection().update_many(filter, update)

    def delete_many(self, filter: Dict[str, Any]) -> DeleteResult:
        return self._collection().delete_many(filter)

    def reset(self) -> DeleteResult:
        """Delete every document in the collection. Irreversible."""
        logger.warning(f"Resetting collection {self.config.collection}")
        return self._collection().delete_many({})

    def create_index(self, keys: Dict[str, Any], name: Optional[str] = None,
                     unique: bool = False, sparse: bool = False) -> str:
        options = {"unique": unique, "sparse": sparse}
        if name:
            options["name"] = name
        return self._collection().create_index(list(keys.items()), **options)

    # === Reads ===

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self._collection().find_one(filter)

    def find(self, filter: Dict[str, Any], limit: int) -> List[Dict[str, Any]]:
        return list(self._collection().find(filter).limit(limit))

    def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return list(self._collection().aggregate(pipeline))

    def explain_find(self, filter: Dict[str, Any]) -> Dict[str, Any]:
        """Explain a find with executionStats verbosity"""
        return self._database().command({
            "explain": {"find": self.config.collection, "filter": filter},
            "verbosity": EXPLAIN_VERBOSITY,
        })

    def explain_aggregate(self, pipeline: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Explain an aggregation with executionStats verbosity"""
        return self._database().command({
            "explain": {
                "aggregate": self.config.collection,
                "pipeline": pipeline,
                "cursor": {},
            },
            "verbosity": EXPLAIN_VERBOSITY,
        })

    # === Collection metadata ===

    def collection_stats(self) -> Dict[str, Any]:
        """Run collStats. Raises OperationFailure ("ns not found") when the
        collection has never been created."""
        return self._database().command("collStats", self.config.collection)

    def list_indexes(self) -> List[Dict[str, Any]]:
        return list(self._collection().list_indexes())

    def count_documents(self) -> int:
        return self._collection().count_documents({})

    def _database(self):
        self.connect()
        with self._lock:
            client = self._client
        if client is None:
            raise ConnectionFailure("MongoDB client was closed")
        return client[self.config.name]

    def _collection(self):
        return self._database()[self.config.collection]
