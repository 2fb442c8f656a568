"""
Configuration variables and fixtures for the service layer tests.
"""

from datetime import datetime, timedelta, timezone

import pytest_asyncio

from groupsync.core.group import CreateGroupData, MemberData
from groupsync.core.identity import UserIdentity
from groupsync.database.mock import MemoryStore
from groupsync.database.store import StoreWriteError
from groupsync.service import groups as groups_service


class FailingStore(MemoryStore):
    """
    A memory store that refuses to update the documents named in
    `fail_on`.
    """

    def __init__(self, fail_on: set[str]):
        super().__init__()
        self.fail_on = fail_on

    async def update(self, collection, document_id, fields):
        if document_id in self.fail_on:
            raise StoreWriteError(f"Refusing to write {collection}/{document_id}")
        return await super().update(collection, document_id, fields)


class ClockStore(MemoryStore):
    """
    A memory store whose clock moves forward one second on every reading.
    """

    def __init__(self):
        super().__init__()
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest_asyncio.fixture
def store():
    yield MemoryStore()


@pytest_asyncio.fixture
def failing_store():
    yield FailingStore


@pytest_asyncio.fixture
def clock_store():
    yield ClockStore()


@pytest_asyncio.fixture
def creator():
    yield UserIdentity(
        user_id="creator-1",
        display_name="Ada Lovelace",
        email="ada@example.com",
        photo_url="https://example.com/ada.png",
    )


@pytest_asyncio.fixture(loop_scope="session")
async def group_id(store, creator, logger):
    # A group created without its creator in the member list.
    yield await groups_service.create(
        created_by_user_id=creator.user_id,
        group_data=CreateGroupData(
            name="Book Club",
            description="Monthly reads",
            members=[
                MemberData(user_id="member-1", name="Grace", bio="Reads sci-fi"),
            ],
        ),
        store=store,
        log=logger,
    )
