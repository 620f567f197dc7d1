"""MongoDB access for the location, current status and history collections."""

from src.infrastructure.database.mongo_database import MongoDatabase

__all__ = ["MongoDatabase"]
