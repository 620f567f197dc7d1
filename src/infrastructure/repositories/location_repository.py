"""
MongoDB Location Repository - Infrastructure Layer

Read access to the ``locations`` collection holding names and capacities.
"""

from typing import Any, Dict, List, Optional

import pymongo

from src.domain.entities.occupancy import Location
from src.domain.repositories.location_repository import ILocationRepository
from src.infrastructure.database import MongoDatabase
from src.infrastructure.database.mongo_database import LOCATIONS_COLLECTION


class LocationRepository(ILocationRepository):
    """MongoDB implementation of the LocationRepository."""

    COLLECTION_NAME = LOCATIONS_COLLECTION

    def __init__(self, mongo_database: MongoDatabase):
        self.db = mongo_database

    @staticmethod
    def _to_entity(document: Dict[str, Any]) -> Location:
        return Location(
            location_id=str(document["location_id"]),
            name=document.get("name") or str(document["location_id"]),
            capacity=int(document.get("capacity") or 0),
        )

    async def find_all(self) -> List[Location]:
        documents = await self.db.find_many(
            self.COLLECTION_NAME,
            {},
            sort_by="location_id",
            sort_direction=pymongo.ASCENDING,
            limit=0,
        )
        return [self._to_entity(document) for document in documents]

    async def find_by_id(self, location_id: str) -> Optional[Location]:
        document = await self.db.find_one(
            self.COLLECTION_NAME, {"location_id": location_id}
        )
        if document is None:
            return None
        return self._to_entity(document)
