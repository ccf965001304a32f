from datetime import datetime

import pytest

from errors import ConflictError


def test_list_for_owner_newest_first(itinerary_store):
    col = itinerary_store.col
    col.insert_one({"user": "u1", "title": "old", "createdAt": datetime(2025, 1, 1)})
    col.insert_one({"user": "u1", "title": "new", "createdAt": datetime(2025, 6, 1)})
    col.insert_one({"user": "u2", "title": "not mine", "createdAt": datetime(2025, 7, 1)})

    listed = itinerary_store.list_for_owner("u1")
    assert [d["title"] for d in listed] == ["new", "old"]
    assert listed[0]["createdAt"] == "2025-06-01T00:00:00"
    assert listed[0]["id"] == listed[0]["_id"]


def test_create_stamps_created_at(itinerary_store):
    doc = itinerary_store.create({"user": "u1", "destination": "Goa"})
    assert doc["createdAt"]
    assert isinstance(doc["_id"], str)


def test_delete_reports_whether_removed(itinerary_store):
    doc = itinerary_store.create({"user": "u1"})
    assert itinerary_store.delete_for_owner("u2", doc["_id"]) is False
    assert itinerary_store.delete_for_owner("u1", doc["_id"]) is True
    assert itinerary_store.delete_for_owner("u1", "zzz") is False


def test_user_email_unique(user_store):
    user_store.ensure_indexes()
    user_store.create("a@example.com", "hash")
    with pytest.raises(ConflictError):
        user_store.create("a@example.com", "hash2")
