"""
The document store boundary. Services only ever talk to a `DocumentStore`;
the concrete store is chosen at startup (see `groupsync.config.settings`).
"""

import abc
from typing import Any


class StoreError(Exception):
    pass


class StoreUnavailableError(StoreError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class DocumentStore(abc.ABC):
    """
    A schemaless document database with per-document reads and writes,
    equality queries over a collection, and a set-union array append.

    Documents are plain dictionaries. Values passed to writes must not
    contain None; optional fields are omitted instead.
    """

    @abc.abstractmethod
    async def allocate_id(self, collection: str) -> str:
        """
        Reserve a new, unused document identifier in `collection`.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def create(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def read(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """
        Read a single document. The returned dictionary carries the document
        identifier under `id`. Returns None if there is no such document.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def query(
        self, collection: str, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """
        All documents whose fields equal every value in `filters`. The order
        of the results is unspecified.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def update(
        self, collection: str, document_id: str, fields: dict[str, Any]
    ) -> bool:
        """
        Merge `fields` into an existing document, replacing each named field
        wholesale. Returns False, without writing, if the document does not
        exist.
        """
        raise NotImplementedError

    @abc.abstractmethod
    async def array_union(
        self,
        collection: str,
        document_id: str,
        field: str,
        elements: list[Any],
        fields: dict[str, Any] | None = None,
    ) -> None:
        """
        Append each of `elements` to the array `field` unless an equal element
        is already present, and merge `fields` in the same write. Concurrent
        callers appending distinct elements all succeed.
        """
        raise NotImplementedError

    @abc.abstractmethod
    def now(self) -> Any:
        """
        The value to store for a 'current time' field.
        """
        raise NotImplementedError
