"""
MongoDB Database - Infrastructure Layer

Thin wrapper around a synchronous ``MongoClient``. Regeneration cycles write
current statuses and history in one multi-document transaction, so the
deployment must be a replica set.
"""

from typing import Any, Callable, Dict, List, NamedTuple, Optional, TypeVar, Union

import pymongo
import pymongo.errors
import structlog
from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.collection import Collection
from pymongo.database import Database

T = TypeVar("T")

LOCATIONS_COLLECTION = "locations"
CURRENT_STATUS_COLLECTION = "current_status"
HISTORY_COLLECTION = "occupancy_history"

# Server codes for an existing index with the same name or keys but other options
_INDEX_CONFLICT_CODES = {85, 86}

logger = structlog.get_logger(__name__)


class IndexSpec(NamedTuple):
    collection: str
    keys: Union[str, List[tuple]]
    name: str
    unique: bool = False


INDEXES = (
    IndexSpec(LOCATIONS_COLLECTION, "location_id", "location_id_idx", unique=True),
    IndexSpec(
        CURRENT_STATUS_COLLECTION, "location_id", "status_location_idx", unique=True
    ),
    IndexSpec(
        HISTORY_COLLECTION,
        [("location_id", pymongo.ASCENDING), ("timestamp", pymongo.ASCENDING)],
        "history_location_timestamp_idx",
    ),
)


class MongoDatabase:
    """Owns the client and the selected database."""

    def __init__(self, mongo_uri: str, db_name: str):
        # tz_aware so stored timestamps come back as aware UTC datetimes
        self.client: MongoClient = MongoClient(mongo_uri, tz_aware=True)
        self.db: Database = self.client[db_name]

    def get_collection(self, collection_name: str) -> Collection:
        return self.db[collection_name]

    async def find_one(
        self, collection_name: str, query: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        return self.db[collection_name].find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: Optional[str] = None,
        sort_direction: int = pymongo.ASCENDING,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Query a collection. ``limit=0`` returns every match."""
        cursor = self.db[collection_name].find(query)
        if sort_by:
            cursor = cursor.sort(sort_by, sort_direction)
        return list(cursor.skip(skip).limit(limit))

    async def run_in_transaction(self, callback: Callable[[ClientSession], T]) -> T:
        """
        Run ``callback(session)`` inside a transaction and return its result.

        Every write in the callback must pass ``session=session``. The
        transaction commits when the callback returns and aborts when it
        raises; pymongo retries transient commit errors.
        """
        with self.client.start_session() as session:
            return session.with_transaction(callback)

    def close(self) -> None:
        self.client.close()

    async def create_indexes(self) -> None:
        """Create the service indexes, replacing any with conflicting options."""
        for index in INDEXES:
            try:
                self._create_index(index)
            except pymongo.errors.OperationFailure as exc:
                if exc.code not in _INDEX_CONFLICT_CODES:
                    logger.warning(
                        "mongo.index_creation_failed",
                        collection=index.collection,
                        index=index.name,
                        error=str(exc),
                    )
                    continue
                logger.info(
                    "mongo.index_replaced", collection=index.collection, index=index.name
                )
                self.db[index.collection].drop_index(index.name)
                self._create_index(index)

    def _create_index(self, index: IndexSpec) -> None:
        self.db[index.collection].create_index(
            index.keys, name=index.name, unique=index.unique
        )
