from __future__ import annotations

import copy
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import pymongo.errors
import pytest

from src.domain.entities.occupancy import (
    HistoryRecord,
    Location,
    LocationStatus,
    Sample,
)

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


FIXED_NOW = datetime(2024, 9, 9, 12, 0, tzinfo=timezone.utc)


def make_series(
    values: Sequence[int],
    start: datetime = FIXED_NOW,
    spacing_minutes: int = 5,
) -> List[Sample]:
    return [
        Sample(timestamp=start + timedelta(minutes=spacing_minutes * index), value=value)
        for index, value in enumerate(values)
    ]


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def locations() -> List[Location]:
    return [
        Location(location_id="canteen", name="Main Canteen", capacity=200),
        Location(location_id="library", name="Central Library", capacity=100),
    ]


class FakeCursor:
    def __init__(self, documents: Sequence[Dict[str, Any]]):
        self._documents = list(documents)
        self._skip = 0
        self._limit: int | None = None

    def sort(self, key: Optional[str], direction: int = 1) -> "FakeCursor":
        if key:
            self._documents.sort(
                key=lambda doc: doc.get(key), reverse=direction == pymongo.DESCENDING
            )
        return self

    def skip(self, amount: int) -> "FakeCursor":
        self._skip = amount
        return self

    def limit(self, amount: int) -> "FakeCursor":
        # pymongo treats a limit of 0 as "no limit"
        self._limit = amount or None
        return self

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        docs = self._documents[self._skip :]
        if self._limit is not None:
            docs = docs[: self._limit]
        return iter(docs)


class FakeCollection:
    def __init__(self) -> None:
        self.documents: List[Dict[str, Any]] = []
        self.dropped_indexes: List[str] = []
        self.created_indexes: List[tuple[Any, ...]] = []
        self.fail_writes = False
        self.sessions: List[Any] = []

    def find_one(self, query: Dict[str, Any]) -> Dict[str, Any] | None:
        for document in self.documents:
            if self._matches(document, query):
                return document
        return None

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        return FakeCursor(
            [doc for doc in self.documents if self._matches(doc, query)]
        )

    def replace_one(
        self,
        query: Dict[str, Any],
        document: Dict[str, Any],
        upsert: bool = False,
        session: Any = None,
    ) -> Any:
        self._check_writable(session)
        for index, existing in enumerate(self.documents):
            if self._matches(existing, query):
                self.documents[index] = dict(document)
                return SimpleNamespace(matched_count=1, acknowledged=True)
        if upsert:
            self.documents.append(dict(document))
        return SimpleNamespace(matched_count=0, acknowledged=True)

    def insert_many(self, documents: Sequence[Dict[str, Any]], session: Any = None) -> Any:
        self._check_writable(session)
        self.documents.extend(dict(document) for document in documents)
        return SimpleNamespace(
            acknowledged=True, inserted_ids=list(range(len(documents)))
        )

    def drop_index(self, index_name: str) -> None:
        self.dropped_indexes.append(index_name)

    def create_index(self, keys: Any, name: str | None = None, **kwargs: Any) -> Any:
        self.created_indexes.append((keys, name, kwargs))
        return name or keys

    def _check_writable(self, session: Any) -> None:
        self.sessions.append(session)
        if self.fail_writes:
            raise pymongo.errors.OperationFailure("simulated write failure")

    @staticmethod
    def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
        for key, expected in query.items():
            actual = document.get(key)
            if isinstance(expected, dict):
                for operator, operand in expected.items():
                    if operator == "$gte" and not (actual is not None and actual >= operand):
                        return False
            elif actual != expected:
                return False
        return True


class FakeMongoDatabase:
    """In-memory stand-in for MongoDatabase with snapshot-based transactions."""

    def __init__(self) -> None:
        self.collections: Dict[str, FakeCollection] = {}
        self.transactions = 0
        self.aborted_transactions = 0
        self.closed = False

    def get_collection(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection())

    async def find_one(self, collection_name: str, query: Dict[str, Any]) -> Any:
        return self.get_collection(collection_name).find_one(query)

    async def find_many(
        self,
        collection_name: str,
        query: Dict[str, Any],
        sort_by: str | None = None,
        sort_direction: int = 1,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Dict[str, Any]]:
        cursor = self.get_collection(collection_name).find(query)
        cursor.sort(sort_by, sort_direction)
        cursor.skip(skip)
        cursor.limit(limit)
        return list(cursor)

    async def run_in_transaction(self, callback: Callable[[Any], Any]) -> Any:
        snapshot = {
            name: copy.deepcopy(collection.documents)
            for name, collection in self.collections.items()
        }
        session = SimpleNamespace(transaction_id=self.transactions + 1)
        try:
            result = callback(session)
        except Exception:
            self.aborted_transactions += 1
            for name, collection in self.collections.items():
                collection.documents = snapshot.get(name, [])
            raise
        self.transactions += 1
        return result

    async def create_indexes(self) -> None:  # pragma: no cover - stub for tests
        pass

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_mongo_database() -> FakeMongoDatabase:
    return FakeMongoDatabase()


@pytest.fixture()
def seeded_database(
    fake_mongo_database: FakeMongoDatabase, locations: List[Location]
) -> FakeMongoDatabase:
    collection = fake_mongo_database.get_collection("locations")
    for location in locations:
        collection.documents.append(
            {
                "location_id": location.location_id,
                "name": location.name,
                "capacity": location.capacity,
            }
        )
    return fake_mongo_database


class InMemoryLocationRepository:
    def __init__(self, locations: Sequence[Location]):
        self.locations = list(locations)

    async def find_all(self) -> List[Location]:
        return sorted(self.locations, key=lambda location: location.location_id)

    async def find_by_id(self, location_id: str) -> Optional[Location]:
        for location in self.locations:
            if location.location_id == location_id:
                return location
        return None


class InMemoryOccupancyRepository:
    """Stub repository recording every write cycle."""

    def __init__(self, locations: Sequence[Location] = ()):
        self._locations = {location.location_id: location for location in locations}
        self.statuses: Dict[str, LocationStatus] = {}
        self.history: List[HistoryRecord] = []
        self.cycles: List[tuple[int, int]] = []
        self.fail_writes = False

    async def list_current_statuses(self) -> List[LocationStatus]:
        return [self.statuses[key] for key in sorted(self.statuses)]

    async def get_current_status(self, location_id: str) -> Optional[LocationStatus]:
        return self.statuses.get(location_id)

    async def fetch_recent_history(
        self, location_id: str, since: datetime, limit: Optional[int] = None
    ) -> List[HistoryRecord]:
        rows = sorted(
            (
                record
                for record in self.history
                if record.location_id == location_id and record.timestamp >= since
            ),
            key=lambda record: record.timestamp,
        )
        return rows[-limit:] if limit else rows

    async def write_cycle(
        self, statuses: Sequence[LocationStatus], history: Sequence[HistoryRecord]
    ) -> None:
        if self.fail_writes:
            from src.domain.entities.errors import RegenerationError

            raise RegenerationError("simulated failure")
        for status in statuses:
            location = self._locations.get(status.location_id)
            if location is not None:
                status.name = location.name
                status.capacity = location.capacity
            self.statuses[status.location_id] = status
        self.history.extend(history)
        self.cycles.append((len(statuses), len(history)))

    async def append_history(self, history: Sequence[HistoryRecord]) -> int:
        self.history.extend(history)
        return len(history)


class FixedOccupancySource:
    def __init__(self, counts: Dict[str, int]):
        self.counts = dict(counts)
        self.calls: List[datetime] = []

    async def read_counts(self, locations: Sequence[Location], at: datetime) -> Dict[str, int]:
        self.calls.append(at)
        return {
            location.location_id: self.counts[location.location_id]
            for location in locations
            if location.location_id in self.counts
        }


@pytest.fixture()
def location_repository(locations: List[Location]) -> InMemoryLocationRepository:
    return InMemoryLocationRepository(locations)


@pytest.fixture()
def occupancy_repository(locations: List[Location]) -> InMemoryOccupancyRepository:
    return InMemoryOccupancyRepository(locations)


@pytest.fixture()
def occupancy_source() -> FixedOccupancySource:
    return FixedOccupancySource({"canteen": 84, "library": 30})


@pytest.fixture()
def series_factory() -> Callable[..., List[Sample]]:
    return make_series
