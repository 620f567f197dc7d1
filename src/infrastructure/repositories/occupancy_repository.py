"""
MongoDB Occupancy Repository - Infrastructure Layer

This module implements the OccupancyRepository interface on top of two
collections: ``current_status`` (one document per location, upserted on
every regeneration) and ``occupancy_history`` (append-only).
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import pymongo
import pymongo.errors
import structlog
from pymongo.client_session import ClientSession

from src.domain.entities.errors import RegenerationError
from src.domain.entities.occupancy import HistoryRecord, LocationStatus
from src.domain.repositories.occupancy_repository import IOccupancyRepository
from src.infrastructure.database import MongoDatabase
from src.infrastructure.database.mongo_database import (
    CURRENT_STATUS_COLLECTION,
    HISTORY_COLLECTION,
    LOCATIONS_COLLECTION,
)

logger = structlog.get_logger(__name__)


class OccupancyRepository(IOccupancyRepository):
    """MongoDB implementation of the OccupancyRepository."""

    STATUS_COLLECTION = CURRENT_STATUS_COLLECTION
    HISTORY_COLLECTION = HISTORY_COLLECTION

    def __init__(self, mongo_database: MongoDatabase):
        """
        Initialize the MongoDB occupancy repository.

        Args:
            mongo_database: MongoDB database client
        """
        self.db = mongo_database

    @staticmethod
    def _status_to_document(status: LocationStatus) -> Dict[str, Any]:
        return {
            "location_id": status.location_id,
            "current_count": status.current_count,
            "color": status.color,
            "status_timestamp": status.status_timestamp,
        }

    @staticmethod
    def _history_to_document(record: HistoryRecord) -> Dict[str, Any]:
        return {
            "location_id": record.location_id,
            "current_count": record.current_count,
            "timestamp": record.timestamp,
        }

    @staticmethod
    def _to_status(
        document: Dict[str, Any], location: Optional[Dict[str, Any]] = None
    ) -> LocationStatus:
        location = location or {}
        return LocationStatus(
            location_id=str(document["location_id"]),
            current_count=int(document.get("current_count") or 0),
            color=document.get("color"),
            status_timestamp=document["status_timestamp"],
            name=location.get("name") or str(document["location_id"]),
            capacity=int(location.get("capacity") or 0),
        )

    @staticmethod
    def _to_history(document: Dict[str, Any]) -> HistoryRecord:
        return HistoryRecord(
            location_id=str(document["location_id"]),
            current_count=int(document.get("current_count") or 0),
            timestamp=document["timestamp"],
        )

    async def list_current_statuses(self) -> List[LocationStatus]:
        locations = await self.db.find_many(LOCATIONS_COLLECTION, {}, limit=0)
        by_id = {str(location["location_id"]): location for location in locations}

        documents = await self.db.find_many(
            self.STATUS_COLLECTION,
            {},
            sort_by="location_id",
            sort_direction=pymongo.ASCENDING,
            limit=0,
        )

        # Statuses of locations that no longer exist are not served
        return [
            self._to_status(document, by_id[str(document["location_id"])])
            for document in documents
            if str(document["location_id"]) in by_id
        ]

    async def get_current_status(self, location_id: str) -> Optional[LocationStatus]:
        document = await self.db.find_one(
            self.STATUS_COLLECTION, {"location_id": location_id}
        )
        if document is None:
            return None
        location = await self.db.find_one(
            LOCATIONS_COLLECTION, {"location_id": location_id}
        )
        return self._to_status(document, location)

    async def fetch_recent_history(
        self,
        location_id: str,
        since: datetime,
        limit: Optional[int] = None,
    ) -> List[HistoryRecord]:
        documents = await self.db.find_many(
            self.HISTORY_COLLECTION,
            {"location_id": location_id, "timestamp": {"$gte": since}},
            sort_by="timestamp",
            sort_direction=pymongo.DESCENDING,
            limit=limit or 0,
        )
        documents.reverse()
        return [self._to_history(document) for document in documents]

    async def write_cycle(
        self,
        statuses: Sequence[LocationStatus],
        history: Sequence[HistoryRecord],
    ) -> None:
        status_documents = [self._status_to_document(status) for status in statuses]
        history_documents = [self._history_to_document(record) for record in history]

        def _write(session: ClientSession) -> None:
            status_collection = self.db.get_collection(self.STATUS_COLLECTION)
            for document in status_documents:
                status_collection.replace_one(
                    {"location_id": document["location_id"]},
                    document,
                    upsert=True,
                    session=session,
                )
            if history_documents:
                self.db.get_collection(self.HISTORY_COLLECTION).insert_many(
                    history_documents, session=session
                )

        try:
            await self.db.run_in_transaction(_write)
        except pymongo.errors.PyMongoError as exc:
            logger.error(
                "occupancy.cycle_write_failed",
                statuses=len(status_documents),
                history=len(history_documents),
                error=str(exc),
            )
            raise RegenerationError(
                f"Failed to persist regeneration cycle: {exc}",
                {"statuses": len(status_documents), "history": len(history_documents)},
            ) from exc

    async def append_history(self, history: Sequence[HistoryRecord]) -> int:
        if not history:
            return 0

        documents = [self._history_to_document(record) for record in history]

        def _insert(session: ClientSession) -> int:
            result = self.db.get_collection(self.HISTORY_COLLECTION).insert_many(
                documents, session=session
            )
            return len(result.inserted_ids)

        try:
            return await self.db.run_in_transaction(_insert)
        except pymongo.errors.PyMongoError as exc:
            logger.error(
                "occupancy.history_append_failed", rows=len(documents), error=str(exc)
            )
            raise RegenerationError(
                f"Failed to append occupancy history: {exc}", {"rows": len(documents)}
            ) from exc
