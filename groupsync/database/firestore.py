"""
Cloud Firestore implementation of the document store.
"""

from typing import Any

from google.api_core.exceptions import (
    DeadlineExceeded,
    GoogleAPICallError,
    NotFound,
    ServiceUnavailable,
)
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from .store import (
    DocumentStore,
    StoreError,
    StoreReadError,
    StoreUnavailableError,
    StoreWriteError,
)


def translate_error(error: GoogleAPICallError, kind: type[StoreError]) -> StoreError:
    """
    Map a client library error onto the store error hierarchy. Transport-level
    failures become `StoreUnavailableError` regardless of the operation.
    """
    if isinstance(error, (ServiceUnavailable, DeadlineExceeded)):
        return StoreUnavailableError(str(error))

    return kind(str(error))


class FirestoreStore(DocumentStore):
    """
    A `DocumentStore` backed by an `AsyncClient`. The client is created and
    owned by `groupsync.config.managers.FirestoreManager`.
    """

    client: firestore.AsyncClient

    def __init__(self, client: firestore.AsyncClient):
        self.client = client

    async def allocate_id(self, collection: str) -> str:
        # Identifiers are generated client-side, no round trip is made.
        return self.client.collection(collection).document().id

    async def create(
        self, collection: str, document_id: str, data: dict[str, Any]
    ) -> None:
        reference = self.client.collection(collection).document(document_id)
        try:
            await reference.set(data)
        except GoogleAPICallError as e:
            raise translate_error(e, StoreWriteError) from e

    async def read(self, collection: str, document_id: str) -> dict[str, Any] | None:
        reference = self.client.collection(collection).document(document_id)
        try:
            snapshot = await reference.get()
        except GoogleAPICallError as e:
            raise translate_error(e, StoreReadError) from e

        if not snapshot.exists:
            return None

        return {"id": snapshot.id, **snapshot.to_dict()}

    async def query(
        self, collection: str, filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        query = self.client.collection(collection)
        for field, value in filters.items():
            query = query.where(filter=FieldFilter(field, "==", value))

        try:
            return [
                {"id": snapshot.id, **snapshot.to_dict()}
                async for snapshot in query.stream()
            ]
        except GoogleAPICallError as e:
            raise translate_error(e, StoreReadError) from e

    async def update(
        self, collection: str, document_id: str, fields: dict[str, Any]
    ) -> bool:
        reference = self.client.collection(collection).document(document_id)
        try:
            await reference.update(fields)
        except NotFound:
            return False
        except GoogleAPICallError as e:
            raise translate_error(e, StoreWriteError) from e

        return True

    async def array_union(
        self,
        collection: str,
        document_id: str,
        field: str,
        elements: list[Any],
        fields: dict[str, Any] | None = None,
    ) -> None:
        reference = self.client.collection(collection).document(document_id)
        try:
            await reference.update(
                {field: firestore.ArrayUnion(elements), **(fields or {})}
            )
        except GoogleAPICallError as e:
            raise translate_error(e, StoreWriteError) from e

    def now(self) -> Any:
        return firestore.SERVER_TIMESTAMP
