"""
The in-memory document store, used for testing.
"""

import asyncio
import copy
from datetime import datetime, timezone
from typing import Any

from groupsync.core.random import document_id as random_document_id

from .store import DocumentStore, StoreWriteError


class MemoryStore(DocumentStore):
    """
    Keeps every collection as a dictionary of deep-copied documents, so that
    callers can never mutate stored state without a write. Each operation
    yields to the event loop once before touching the data, which lets
    concurrent read-modify-write sequences interleave the way they would
    against a remote store.
    """

    collections: dict[str, dict[str, dict[str, Any]]]

    def __init__(self):
        self.collections = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self.collections.setdefault(collection, {})

    async def allocate_id(self, collection: str) -> str:
        documents = self._collection(collection)
        new_id = random_document_id()
        while new_id in documents:
            new_id = random_document_id()
        return new_id

    async def create(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        await asyncio.sleep(0)
        check_no_none(data)
        self._collection(collection)[document_id] = copy.deepcopy(data)

    async def read(self, collection: str, document_id: str) -> dict[str, Any] | None:
        await asyncio.sleep(0)
        document = self._collection(collection).get(document_id)

        if document is None:
            return None

        return {"id": document_id, **copy.deepcopy(document)}

    async def query(
        self, collection: str, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        await asyncio.sleep(0)
        return [
            {"id": key, **copy.deepcopy(document)}
            for key, document in self._collection(collection).items()
            if all(document.get(f) == v for f, v in filters.items())
        ]

    async def update(
        self, collection: str, document_id: str, fields: dict[str, Any]
    ) -> bool:
        await asyncio.sleep(0)
        check_no_none(fields)
        document = self._collection(collection).get(document_id)

        if document is None:
            return False

        document.update(copy.deepcopy(fields))
        return True

    async def array_union(
        self,
        collection: str,
        document_id: str,
        field: str,
        elements: list[Any],
        fields: dict[str, Any] | None = None,
    ) -> None:
        await asyncio.sleep(0)
        check_no_none(elements)
        check_no_none(fields or {})
        document = self._collection(collection).get(document_id)

        if document is None:
            raise StoreWriteError(f"No document to update: {collection}/{document_id}")

        array = document.setdefault(field, [])
        for element in elements:
            if element not in array:
                array.append(copy.deepcopy(element))

        document.update(copy.deepcopy(fields or {}))

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def check_no_none(value: Any):
    """
    Stored documents never hold None, optional values are omitted instead.
    Reject any write that breaks this.
    """
    if value is None:
        raise StoreWriteError("None is not a storable value")

    if isinstance(value, dict):
        for item in value.values():
            check_no_none(item)
    elif isinstance(value, list):
        for item in value:
            check_no_none(item)
