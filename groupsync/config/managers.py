"""
Core client, including document store construction.
"""

import os

from google.auth.credentials import AnonymousCredentials
from google.cloud import firestore

from groupsync.database.firestore import FirestoreStore


class FirestoreManager:
    """
    Owns the Firestore client for the lifetime of the process. Expected usage:

    manager = FirestoreManager(project="my-project")
    store = manager.store()

    group = await groups_service.read_by_id(group_id=..., store=store, log=log)

    When `emulator_host` is given the client talks to a local emulator with
    anonymous credentials instead of the hosted database. The emulator address
    is set in `FIRESTORE_EMULATOR_HOST` and so applies to every Firestore
    client in the process, not only this one.
    """

    project: str | None
    database: str
    emulator_host: str | None
    client: firestore.AsyncClient

    def __init__(
        self,
        project: str | None = None,
        database: str = "(default)",
        emulator_host: str | None = None,
    ):
        self.project = project
        self.database = database
        self.emulator_host = emulator_host

        credentials = None

        if emulator_host is not None:
            # The client library only reads the emulator address from the
            # environment.
            os.environ["FIRESTORE_EMULATOR_HOST"] = emulator_host
            credentials = AnonymousCredentials()

        self.client = firestore.AsyncClient(
            project=project, database=database, credentials=credentials
        )

    def store(self) -> FirestoreStore:
        return FirestoreStore(client=self.client)
