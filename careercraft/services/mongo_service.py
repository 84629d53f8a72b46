"""
MongoDB Service helpers shared by the domain services.

Every domain service owns one collection and receives the Database it works
on explicitly, so route handlers and tests decide which database is used.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection
from pymongo.database import Database

from careercraft.core.exceptions import NotFound
from careercraft.db.mongodb import get_collection


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: Any) -> Any:
    """
    Convert a MongoDB document to a JSON-serializable structure.

    ObjectIds become strings and `_id` keys become `id`, at every level
    (embedded questions carry their own `_id`).
    """
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    if isinstance(doc, dict):
        return {("id" if key == "_id" else key): serialize_doc(value) for key, value in doc.items()}
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: Any, resource: str = "Resource") -> ObjectId:
    """Parse an id from a path/body; malformed ids are treated as missing resources."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFound(f"{resource} not found (invalid ID format).")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what pymongo returns from the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize client-supplied datetimes to naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class CollectionService:
    """Base class: binds a service to one collection of the given database."""

    collection_name: str = ""

    def __init__(self, db: Database = None):
        self.db = db
        self.collection: Collection = get_collection(self.collection_name, db)
