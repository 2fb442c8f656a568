"""
Tests the in-memory document store.
"""

import pytest

from groupsync.database.mock import MemoryStore
from groupsync.database.store import StoreWriteError


@pytest.mark.asyncio(loop_scope="session")
async def test_read_returns_copy():
    store = MemoryStore()
    document_id = await store.allocate_id("things")
    await store.create("things", document_id, {"values": [1, 2]})

    document = await store.read("things", document_id)
    assert document == {"id": document_id, "values": [1, 2]}

    document["values"].append(3)
    assert (await store.read("things", document_id))["values"] == [1, 2]


@pytest.mark.asyncio(loop_scope="session")
async def test_query_filters():
    store = MemoryStore()
    await store.create("things", "a", {"colour": "red", "size": 1})
    await store.create("things", "b", {"colour": "red", "size": 2})
    await store.create("things", "c", {"colour": "blue", "size": 1})

    red = await store.query("things", {"colour": "red"})
    assert {d["id"] for d in red} == {"a", "b"}

    small_red = await store.query("things", {"colour": "red", "size": 1})
    assert [d["id"] for d in small_red] == ["a"]


@pytest.mark.asyncio(loop_scope="session")
async def test_update_missing_document():
    store = MemoryStore()
    assert not await store.update("things", "missing", {"colour": "red"})
    assert await store.read("things", "missing") is None


@pytest.mark.asyncio(loop_scope="session")
async def test_array_union():
    store = MemoryStore()
    await store.create("things", "a", {"tags": [{"k": 1}]})

    await store.array_union("things", "a", "tags", [{"k": 1}, {"k": 2}], {"n": 5})

    document = await store.read("things", "a")
    assert document["tags"] == [{"k": 1}, {"k": 2}]
    assert document["n"] == 5

    with pytest.raises(StoreWriteError):
        await store.array_union("things", "missing", "tags", [{"k": 1}])


@pytest.mark.asyncio(loop_scope="session")
async def test_rejects_none():
    store = MemoryStore()

    with pytest.raises(StoreWriteError):
        await store.create("things", "a", {"members": [{"photoURL": None}]})
