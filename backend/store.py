# store.py
# MongoDB persistence: owner-scoped itinerary documents + user accounts

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError
from errors import ConflictError, PersistenceError

log = logging.getLogger(__name__)


def _oid(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Mongo document -> JSON-ready dict (ObjectIds as strings, `id` alias)."""
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
        out["id"] = out["_id"]
    if isinstance(out.get("createdAt"), datetime):
        out["createdAt"] = out["createdAt"].isoformat()
    out.pop("password_hash", None)
    return out


class ItineraryStore:
    def __init__(self, collection: Collection):
        self.col = collection

    def ensure_indexes(self) -> None:
        self.col.create_index([("user", 1), ("createdAt", DESCENDING)])

    def create(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        doc = {**doc, "createdAt": datetime.now(timezone.utc)}
        try:
            result = self.col.insert_one(doc)
        except PyMongoError as e:
            log.error("itinerary insert failed: %s", e)
            raise PersistenceError("Could not save itinerary") from e
        doc["_id"] = result.inserted_id
        return serialize(doc)

    def list_for_owner(self, owner: str) -> List[Dict[str, Any]]:
        try:
            docs = self.col.find({"user": owner}).sort("createdAt", DESCENDING)
            return [serialize(d) for d in docs]
        except PyMongoError as e:
            raise PersistenceError("Could not load itineraries") from e

    def get_for_owner(self, owner: str, itinerary_id: str) -> Optional[Dict[str, Any]]:
        oid = _oid(itinerary_id)
        if oid is None:
            return None
        try:
            doc = self.col.find_one({"_id": oid, "user": owner})
        except PyMongoError as e:
            raise PersistenceError("Could not load itinerary") from e
        return serialize(doc) if doc else None

    def delete_for_owner(self, owner: str, itinerary_id: str) -> bool:
        oid = _oid(itinerary_id)
        if oid is None:
            return False
        try:
            return self.col.delete_one({"_id": oid, "user": owner}).deleted_count > 0
        except PyMongoError as e:
            raise PersistenceError("Could not delete itinerary") from e


class UserStore:
    def __init__(self, collection: Collection):
        self.col = collection

    def ensure_indexes(self) -> None:
        self.col.create_index("email", unique=True)

    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> Dict[str, Any]:
        if self.by_email(email):
            raise ConflictError("Email already registered")
        doc = {
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = self.col.insert_one(doc)
        except DuplicateKeyError as e:
            raise ConflictError("Email already registered") from e
        except PyMongoError as e:
            raise PersistenceError("Could not create user") from e
        doc["_id"] = result.inserted_id
        return doc

    def by_email(self, email: str) -> Optional[Dict[str, Any]]:
        try:
            return self.col.find_one({"email": email})
        except PyMongoError as e:
            raise PersistenceError("Could not load user") from e


def connect(uri: str, db_name: str) -> tuple[ItineraryStore, UserStore]:
    # MongoClient connects lazily, so startup does not block on the server
    db = MongoClient(uri, serverSelectionTimeoutMS=5000)[db_name]
    return ItineraryStore(db["itineraries"]), UserStore(db["users"])
